"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest

from src.parsers.okx.client import OkxClient


@pytest.fixture
def okx_client() -> OkxClient:
    """OkxClient with its HTTP transport replaced by an AsyncMock."""
    client = OkxClient(max_rps=1000.0)
    client._client = AsyncMock()
    return client
