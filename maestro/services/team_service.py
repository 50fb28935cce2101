from __future__ import annotations

import uuid
from typing import Optional

from maestro.domain.entities import TaskEntity, TeamMemberEntity
from maestro.domain.filters import TaskFilters
from maestro.infra.repository import MaestroRepository


class TeamService:
    def __init__(self, repo: MaestroRepository) -> None:
        self._repo = repo

    def list_members(self) -> list[TeamMemberEntity]:
        return self._repo.fetch_all_team_members().data

    def get_member(self, member_id: uuid.UUID) -> Optional[TeamMemberEntity]:
        return self._repo.fetch_team_member(member_id).data

    def add_member(
        self, name: str, email: str = "", role: str = "", avatar_color: str = "#4ECDC4"
    ) -> Optional[TeamMemberEntity]:
        name = name.strip()
        if not name:
            raise ValueError("Team member name cannot be empty")
        return self._repo.create_team_member(name, email.strip(), role.strip(), avatar_color)

    def remove_member(self, member_id: uuid.UUID) -> bool:
        return self._repo.delete_team_member(member_id)

    def tasks_for_member(self, member_id: uuid.UUID) -> list[TaskEntity]:
        return self._repo.list_tasks(TaskFilters(assigned_to_id=member_id)).data
