import io
from datetime import datetime

import pytest


class FixedClock:
    """Callable clock returning a settable local time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "app.log"


@pytest.fixture
def clock() -> FixedClock:
    # Wednesday
    return FixedClock(datetime(2026, 10, 21, 12, 0, 0, 5))


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep stray SHIFTLOG_* variables and .env files out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SHIFTLOG_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
