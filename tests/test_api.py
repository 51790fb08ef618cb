"""
제출 API 테스트 (httpx + ASGITransport)
"""
from unittest.mock import AsyncMock

import httpx
import pytest

from submission_service.core.exceptions import BrokerError
from submission_service.main import create_app

BASE = "/api/v1"


def make_client(test_settings, container) -> httpx.AsyncClient:
    app = create_app(test_settings, container=container)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


class TestSubmissionApi:
    """POST/GET/PATCH /submissions"""

    @pytest.mark.asyncio
    async def test_create_get_update_flow(self, test_settings, container, publisher):
        async with make_client(test_settings, container) as client:
            response = await client.post(
                f"{BASE}/submissions",
                json={"problemId": "two-sum", "lang": "cpp", "code": "int main(){}"},
            )
            assert response.status_code == 201
            created = response.json()
            assert created["status"] == "pending"
            assert created["result"] is None
            assert created["lang"] == "c++"

            response = await client.get(f"{BASE}/submissions/{created['id']}")
            assert response.status_code == 200
            assert response.json() == created

            response = await client.patch(
                f"{BASE}/submissions/{created['id']}",
                json={
                    "status": "completed",
                    "result": {"verdict": "ACCEPTED", "testCasesPassed": 15, "totalTestCases": 15},
                },
            )
            assert response.status_code == 200
            body = response.json()
            assert body["status"] == "completed"
            assert body["result"]["verdict"] == "ACCEPTED"

        assert publisher.messages("submission_queue")[0].submission_id == created["id"]

    @pytest.mark.asyncio
    async def test_language_alias_and_lowercase_verdict(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            response = await client.post(
                f"{BASE}/submissions",
                json={"problemId": "two-sum", "lang": "python3", "code": "print(1)", "userId": "u_1"},
            )
            assert response.status_code == 201
            created = response.json()
            assert created["lang"] == "python"
            assert created["userId"] == "u_1"

            response = await client.patch(
                f"{BASE}/submissions/{created['id']}",
                json={"status": "failed", "result": {"verdict": "wrong_answer"}},
            )
            assert response.status_code == 200
            assert response.json()["result"] == {"verdict": "WRONG_ANSWER"}

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            response = await client.get(f"{BASE}/submissions/nonexistent-id")

        assert response.status_code == 404
        assert response.json() == {
            "error": True,
            "error_code": "NOT_FOUND",
            "error_message": "Submission not found with id: nonexistent-id",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"lang": "cpp", "code": "x"},
            {"problemId": "two-sum", "lang": "cobol", "code": "x"},
            {"problemId": "two sum!", "lang": "cpp", "code": "x"},
            {"problemId": "two-sum", "lang": "cpp", "code": ""},
            {"problemId": "two-sum", "lang": "cpp", "code": "x", "extra": 1},
            {"problemId": "p" * 256, "lang": "cpp", "code": "x"},
            {"problemId": "two-sum", "lang": "cpp", "code": "x", "userId": "u" * 256},
        ],
    )
    async def test_create_validation_errors(self, test_settings, container, repository, body):
        async with make_client(test_settings, container) as client:
            response = await client.post(f"{BASE}/submissions", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert repository.records == {}

    @pytest.mark.asyncio
    async def test_invalid_transition_is_conflict(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            created = (
                await client.post(
                    f"{BASE}/submissions",
                    json={"problemId": "two-sum", "lang": "cpp", "code": "int main(){}"},
                )
            ).json()
            await client.patch(
                f"{BASE}/submissions/{created['id']}",
                json={"status": "failed", "result": {"verdict": "RUNTIME_ERROR"}},
            )

            response = await client.patch(
                f"{BASE}/submissions/{created['id']}", json={"status": "pending"}
            )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATUS_TRANSITION"

    @pytest.mark.asyncio
    async def test_result_out_of_range(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            created = (
                await client.post(
                    f"{BASE}/submissions",
                    json={"problemId": "two-sum", "lang": "cpp", "code": "int main(){}"},
                )
            ).json()
            response = await client.patch(
                f"{BASE}/submissions/{created['id']}",
                json={"status": "completed", "result": {"verdict": "ACCEPTED", "score": 101}},
            )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_publish_failure_is_internal_error(self, test_settings, container, repository):
        container.service.publisher = AsyncMock()
        container.service.publisher.publish.side_effect = BrokerError("channel closed")

        async with make_client(test_settings, container) as client:
            response = await client.post(
                f"{BASE}/submissions",
                json={"problemId": "two-sum", "lang": "cpp", "code": "int main(){}"},
            )

        assert response.status_code == 500
        assert response.json()["error_code"] == "BROKER_ERROR"
        assert [r.status.value for r in repository.records.values()] == ["pending"]

    @pytest.mark.asyncio
    async def test_list_by_problem(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            for problem_id in ("two-sum", "two-sum", "lru-cache"):
                await client.post(
                    f"{BASE}/submissions",
                    json={"problemId": problem_id, "lang": "cpp", "code": "int main(){}"},
                )

            response = await client.get(f"{BASE}/submissions", params={"problemId": "two-sum"})

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert {s["problemId"] for s in response.json()} == {"two-sum"}


class TestHealthApi:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_health_without_broker(self, test_settings, container):
        async with make_client(test_settings, container) as client:
            response = await client.get(f"{BASE}/health")

        assert response.status_code == 200
        assert response.json()["broker"] == "disabled"
        assert response.json()["service"] == test_settings.APP_NAME

    @pytest.mark.asyncio
    async def test_health_reports_lost_broker(self, test_settings, container):
        broker = AsyncMock()
        broker.is_healthy = False
        container.broker = broker

        async with make_client(test_settings, container) as client:
            response = await client.get(f"{BASE}/health")

        assert response.status_code == 503
        assert response.json()["status"] == "UNAVAILABLE"
        assert response.json()["broker"] == "disconnected"
