"""
Shared fixtures for schedule optimizer tests.
"""

from datetime import datetime

import pytest

from schedule_optimizer.config import get_settings
from schedule_optimizer.models import DateRange

# 2025-06-23 is a Monday
MONDAY = datetime(2025, 6, 23)


@pytest.fixture
def monday() -> datetime:
    return MONDAY


@pytest.fixture
def week() -> DateRange:
    """Monday 00:00 to the following Monday 00:00."""
    return DateRange.days_from(MONDAY, 7)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
