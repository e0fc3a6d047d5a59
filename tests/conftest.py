import os
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

# Ensure env is set before importing the app
os.environ["OPENAI_API_KEY"] = ""
os.environ["DEBUG"] = "false"

from axiom_api.deps import get_feedback_service  # noqa: E402
from axiom_api.main import app as fastapi_app  # noqa: E402
from axiom_api.services import FeedbackService  # noqa: E402

FEEDBACK_ID = "64b7f0c2a1b2c3d4e5f60718"


@pytest.fixture()
def make_feedback() -> Callable[..., dict[str, Any]]:
    """Build a feedback document the way it comes back from MongoDB."""

    def _make(feedback_id: str = FEEDBACK_ID, **overrides: Any) -> dict[str, Any]:
        document: dict[str, Any] = {
            "_id": ObjectId(feedback_id),
            "text": "Whiskers keeps escaping the enclosure at night",
            "email": "keeper@axiom.test",
            "createdAt": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            "analysis": {
                "summary": "A cat repeatedly escapes its enclosure overnight.",
                "sentiment": "negative",
                "tags": ["enclosure", "escape"],
                "priority": "P1",
                "nextAction": "Inspect the enclosure latch and reinforce it",
            },
        }
        document.update(overrides)
        return document

    return _make


@pytest.fixture()
def feedback_service() -> AsyncMock:
    return AsyncMock(spec=FeedbackService)


@pytest.fixture()
def app(feedback_service: AsyncMock):
    fastapi_app.dependency_overrides[get_feedback_service] = lambda: feedback_service
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
