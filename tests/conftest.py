from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from maestro.infra.db import create_db_engine, init_db, make_session_factory
from maestro.infra.repository import MaestroRepository


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 9, 30))


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{(tmp_path / 'maestro.db').as_posix()}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine, clock) -> MaestroRepository:
    return MaestroRepository(make_session_factory(engine), clock=clock)
