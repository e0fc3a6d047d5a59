import re
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from axiom_api.core.exceptions import DatabaseError
from axiom_api.core.logging import request_logger
from axiom_api.schemas.feedback import FeedbackListResponse, FeedbackResponse

FEEDBACK_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_FEEDBACK_ID = "64b7f0c2a1b2c3d4e5f60719"
REQUEST_ID_PATTERN = re.compile(r"^req_\d+_[a-z0-9]{7}$")


class TestCreateFeedback:
    @pytest.mark.asyncio
    async def test_create_returns_analysed_feedback(self, client, feedback_service, make_feedback):
        feedback_service.create_feedback.return_value = FeedbackResponse.model_validate(make_feedback())

        response = await client.post(
            "/api/feedback",
            json={"text": "Whiskers keeps escaping the enclosure at night", "email": "keeper@axiom.test"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["_id"] == FEEDBACK_ID
        assert body["data"]["analysis"]["priority"] == "P1"
        assert body["data"]["analysis"]["nextAction"] == "Inspect the enclosure latch and reinforce it"
        assert "error" not in body

        request_id = response.headers["X-Request-Id"]
        assert REQUEST_ID_PATTERN.match(request_id)
        feedback_service.create_feedback.assert_awaited_once_with(
            "Whiskers keeps escaping the enclosure at night", "keeper@axiom.test", request_id
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": 17}])
    async def test_missing_text_is_rejected(self, client, feedback_service, payload):
        response = await client.post("/api/feedback", json=payload)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Text is required"
        assert error["requestId"] == response.headers["X-Request-Id"]
        feedback_service.create_feedback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_body_is_rejected(self, client, feedback_service):
        response = await client.post("/api/feedback")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Text is required"
        feedback_service.create_feedback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_reports_database_error(self, client, feedback_service):
        feedback_service.create_feedback.side_effect = DatabaseError("Failed to create feedback")

        response = await client.post("/api/feedback", json={"text": "The cat is glowing"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "DATABASE_ERROR"
        assert body["error"]["message"] == "Failed to create feedback"

    @pytest.mark.asyncio
    async def test_routes_are_mounted_without_prefix(self, client, feedback_service, make_feedback):
        feedback_service.create_feedback.return_value = FeedbackResponse.model_validate(make_feedback())

        response = await client.post("/feedback", json={"text": "The cat is glowing"})

        assert response.status_code == 201


class TestListFeedback:
    @pytest.mark.asyncio
    async def test_filters_and_page_are_forwarded(self, client, feedback_service, make_feedback):
        feedback_service.list_feedback.return_value = FeedbackListResponse(
            data=[FeedbackResponse.model_validate(make_feedback())],
            pagination={"total": 21, "limit": 10, "skip": 20, "hasMore": False, "page": 3, "pageSize": 10},
        )

        response = await client.get(
            "/api/feedback",
            params=[
                ("sentiment", "negative"),
                ("sentiment", "neutral"),
                ("priority", "P1"),
                ("tag", "escape"),
                ("search", "enclosure"),
                ("hasCat", "false"),
                ("page", "3"),
                ("pageSize", "10"),
            ],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"][0]["_id"] == FEEDBACK_ID
        assert body["pagination"] == {
            "total": 21,
            "limit": 10,
            "skip": 20,
            "hasMore": False,
            "page": 3,
            "pageSize": 10,
        }

        filters, page, _ = feedback_service.list_feedback.await_args.args
        assert filters.sentiments == ["negative", "neutral"]
        assert filters.priorities == ["P1"]
        assert filters.tags == ["escape"]
        assert filters.search == "enclosure"
        assert filters.has_cat is False
        assert page.skip == 20
        assert page.limit == 10

    @pytest.mark.asyncio
    async def test_defaults(self, client, feedback_service):
        feedback_service.list_feedback.return_value = FeedbackListResponse(
            data=[],
            pagination={"total": 0, "limit": 50, "skip": 0, "hasMore": False},
        )

        response = await client.get("/api/feedback")

        assert response.status_code == 200
        assert response.json()["pagination"] == {"total": 0, "limit": 50, "skip": 0, "hasMore": False}
        _, page, _ = feedback_service.list_feedback.await_args.args
        assert page.limit == 50
        assert page.skip == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"limit": "0"}, {"limit": "1001"}, {"skip": "-1"}, {"page": "0"}])
    async def test_invalid_pagination_is_rejected(self, client, feedback_service, params):
        response = await client.get("/api/feedback", params=params)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        feedback_service.list_feedback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure(self, client, feedback_service):
        feedback_service.list_feedback.side_effect = DatabaseError("Failed to fetch feedback")

        response = await client.get("/api/feedback")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Failed to fetch feedback"


class TestBulkDelete:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, message",
        [
            ({}, "ids must be an array"),
            ({"ids": FEEDBACK_ID}, "ids must be an array"),
            ({"ids": []}, "ids array cannot be empty"),
            ({"ids": [FEEDBACK_ID, "nope"]}, "All ids must be valid MongoDB ObjectId strings"),
        ],
    )
    async def test_invalid_ids_are_rejected(self, client, feedback_service, payload, message):
        response = await client.request("DELETE", "/api/feedback", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == message
        feedback_service.delete_feedbacks.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_delete_reports_count(self, client, feedback_service):
        feedback_service.delete_feedbacks.return_value = 1

        response = await client.request("DELETE", "/api/feedback", json={"ids": [FEEDBACK_ID, OTHER_FEEDBACK_ID]})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "deletedCount": 1,
            "deletedIds": [FEEDBACK_ID, OTHER_FEEDBACK_ID],
        }

    @pytest.mark.asyncio
    async def test_failure(self, client, feedback_service):
        feedback_service.delete_feedbacks.side_effect = DatabaseError("Failed to delete feedbacks")

        response = await client.request("DELETE", "/api/feedback", json={"ids": [FEEDBACK_ID]})

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Failed to delete feedbacks"


@pytest.mark.asyncio
async def test_list_tags(client, feedback_service):
    feedback_service.list_tags.return_value = ["appetite", "coat", "escape"]

    response = await client.get("/api/feedback-tags")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": ["appetite", "coat", "escape"]}


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/cats")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "HTTP_ERROR"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_unhandled_error_is_still_logged(app, feedback_service):
    feedback_service.get_feedback.side_effect = RuntimeError("boom")
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    with patch.object(request_logger, "log_request") as log_request:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get(f"/api/feedback/{FEEDBACK_ID}")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    log_request.assert_called_once()
    assert log_request.call_args.kwargs["status"] == 500
    assert log_request.call_args.kwargs["path"] == f"/api/feedback/{FEEDBACK_ID}"
