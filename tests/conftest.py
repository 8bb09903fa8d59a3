# tests/conftest.py

"""Shared pytest fixtures for the price_scout test suite."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so retry loops run instantly."""
    with patch("time.sleep"):
        yield


@pytest.fixture(autouse=True)
def no_credentials() -> Generator[None, None, None]:
    """Ignore credentials from the developer's environment or .env."""
    with patch.multiple(
        "price_scout.config.settings.Settings",
        EBAY_APP_ID="",
        OPENAI_API_KEY="",
    ):
        yield
