"""Integration test fixtures for the HTTP API."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shiftpay.api.app import create_app


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def retail_guide_payload() -> dict[str, Any]:
    return {
        "name": "Retail Award",
        "base_rate": "26.55",
        "timezone": "Australia/Brisbane",
    }


@pytest.fixture
def weekday_shift_payload(retail_guide_payload) -> dict[str, Any]:
    """09:00-17:00 on a Wednesday with a 30 minute lunch."""
    return {
        "pay_guide": retail_guide_payload,
        "start_time": "2024-07-03T09:00:00",
        "end_time": "2024-07-03T17:00:00",
        "break_periods": [
            {"start_time": "2024-07-03T12:00:00", "end_time": "2024-07-03T12:30:00"}
        ],
    }
