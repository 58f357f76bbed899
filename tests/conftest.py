from datetime import datetime

import pytest

from vignette.reminders import ReminderPolicy

NOW = datetime(2026, 3, 1, 9, 30)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def policy() -> ReminderPolicy:
    return ReminderPolicy(
        clock=lambda: NOW,
        token_factory=lambda: "a" * 64,
        code_factory=lambda: "042817",
    )
