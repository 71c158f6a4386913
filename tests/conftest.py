"""Pytest configuration for vc-thread tests."""

import pytest

from src.bot.application.retry import RetryPolicy
from src.bot.application.session_store import SessionStore
from src.bot.settings import VcThreadSettings

from .fakes import (
    CATEGORY_ID,
    IGNORED_VC_ID,
    THREAD_CHANNEL_ID,
    FakeClock,
    FakePlatformClient,
)


@pytest.fixture
def settings() -> VcThreadSettings:
    return VcThreadSettings(
        vc_category_id=CATEGORY_ID,
        vc_ignored_channels=str(IGNORED_VC_ID),
        thread_channel_id=THREAD_CHANNEL_ID,
    )


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def platform() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def retry_policy() -> RetryPolicy:
    return RetryPolicy(attempts=3, base_wait=0, max_wait=0)
