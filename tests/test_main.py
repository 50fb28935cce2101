from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from maestro.config import Settings
from maestro import main as main_module
from maestro.main import build_container


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{(tmp_path / 'data' / 'app.db').as_posix()}",
        log_dir=str(tmp_path / "logs"),
        preferences_path=str(tmp_path / "prefs.json"),
    )


def test_container_shares_one_repository(settings) -> None:
    container = build_container(settings)

    container.repository.seed_sample_data()

    assert len(container.projects.list_projects()) == 2
    assert container.tasks.get_stats()["total"] == 3
    assert container.tips.unread_count() == 10


def test_reset_all_clears_store_and_onboarding(settings) -> None:
    container = build_container(settings)
    container.repository.seed_sample_data()
    container.preferences.complete_onboarding()

    assert container.reset_all() is True

    assert container.tasks.get_stats()["total"] == 0
    assert container.preferences.has_completed_onboarding is False


def test_unreachable_store_fails_at_startup(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    settings = Settings(database_url=f"sqlite:///{(blocker / 'app.db').as_posix()}")

    with pytest.raises((OSError, SQLAlchemyError)):
        build_container(settings)


def test_main_exits_when_store_cannot_load(monkeypatch) -> None:
    def broken_container():
        raise SQLAlchemyError("disk on fire")

    monkeypatch.setattr(main_module, "setup_logging", lambda: None)
    monkeypatch.setattr(main_module, "build_container", broken_container)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main()

    assert excinfo.value.code == 1
