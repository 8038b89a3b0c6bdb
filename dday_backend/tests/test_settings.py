import logging
from datetime import date, time

import pytest

from src.dday.clock import get_today
from src.dday.errors import InvalidDate
from src.dday.logging_config import configure_logging
from src.dday.settings import get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "PERSISTENCE_BACKEND",
        "SQLITE_DB_PATH",
        "CORS_ALLOW_ORIGINS",
        "LOG_LEVEL",
        "DDAY_FIXED_TODAY",
        "DEFAULT_NOTIFICATION_TIME",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.sqlite_db_path == "./data/tasks.db"
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"
        assert s.fixed_today is None
        assert s.default_notification_time == time(9, 0)

    def test_unknown_backend_falls_back_to_memory(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "postgres")
        assert get_settings().persistence_backend == "memory"

    def test_origins_list(self, clean_env):
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_default_notification_time(self, clean_env):
        clean_env.setenv("DEFAULT_NOTIFICATION_TIME", "07:30")
        assert get_settings().default_notification_time == time(7, 30)
        clean_env.setenv("DEFAULT_NOTIFICATION_TIME", "soon")
        assert get_settings().default_notification_time == time(9, 0)

    def test_fixed_today(self, clean_env):
        clean_env.setenv("DDAY_FIXED_TODAY", "2030-01-02")
        assert get_settings().fixed_today == date(2030, 1, 2)

    def test_invalid_fixed_today_raises(self, clean_env):
        clean_env.setenv("DDAY_FIXED_TODAY", "someday")
        with pytest.raises(InvalidDate):
            get_settings()


class TestClock:
    def test_pinned_date(self, clean_env):
        clean_env.setenv("DDAY_FIXED_TODAY", "2030-01-02")
        assert get_today() == date(2030, 1, 2)

    def test_system_date(self, clean_env):
        assert get_today() == date.today()


def test_configure_logging_accepts_unknown_level():
    configure_logging("not-a-level")
    configure_logging("debug")
    assert logging.getLogger("src.dday").getEffectiveLevel() == logging.DEBUG
