from __future__ import annotations

import random
import uuid
from typing import Optional

from maestro.domain.entities import EducationalTipEntity
from maestro.domain.enums import TipCategory
from maestro.infra.repository import MaestroRepository


class TipService:
    def __init__(self, repo: MaestroRepository) -> None:
        self._repo = repo

    def list_tips(self, category: TipCategory | str | None = None) -> list[EducationalTipEntity]:
        return self._repo.fetch_all_educational_tips(category).data

    def categories(self) -> list[TipCategory]:
        present = {tip.category for tip in self.list_tips()}
        return sorted(present, key=lambda category: category.value)

    def tip_of_the_day(self, rng: random.Random | None = None) -> Optional[EducationalTipEntity]:
        unread = [tip for tip in self.list_tips() if not tip.is_read]
        if not unread:
            return None
        return (rng or random).choice(unread)

    def mark_read(self, tip_id: uuid.UUID) -> Optional[EducationalTipEntity]:
        return self._repo.mark_tip_as_read(tip_id)

    def unread_count(self) -> int:
        return sum(1 for tip in self.list_tips() if not tip.is_read)
