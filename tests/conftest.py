from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from backoffice.core.config import Settings, get_settings
from backoffice.orders.service import OrderTransitionService

FIXED_NOW = datetime(2024, 6, 1, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test")


@pytest.fixture()
def service(settings: Settings) -> OrderTransitionService:
    return OrderTransitionService(settings=settings, clock=lambda: FIXED_NOW)
