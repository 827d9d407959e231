"""Tests for the REST client of the notification backend."""

from __future__ import annotations

import httpx
import pytest

from fakes import make_payload
from notification_hub.config import get_settings
from notification_hub.infrastructure.notifications import NotificationApiError, NotificationsApi

BASE_URL = "http://backend.test/api"


def build_api(handler, *, token: str | None = "secret-token") -> NotificationsApi:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return NotificationsApi(BASE_URL, token=token, client=client)


@pytest.mark.anyio
async def test_list_fetches_user_baseline_with_bearer_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"success": True, "data": [make_payload("n2"), make_payload("n1")]}
        )

    api = build_api(handler)
    notifications = await api.list("u1", limit=50)
    await api.aclose()

    assert [n.id for n in notifications] == ["n2", "n1"]
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/notifications/user/u1"
    assert request.url.params["limit"] == "50"
    assert request.headers["Authorization"] == "Bearer secret-token"


@pytest.mark.anyio
async def test_requests_without_token_carry_no_authorization_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": []})

    api = build_api(handler, token=None)
    assert await api.list("u1") == []
    assert "Authorization" not in seen[0].headers

    api.set_token("fresh")
    await api.list("u1")
    assert seen[1].headers["Authorization"] == "Bearer fresh"


@pytest.mark.anyio
async def test_http_error_uses_backend_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"success": False, "message": "Token expired"})

    api = build_api(handler)

    with pytest.raises(NotificationApiError) as exc_info:
        await api.list("u1")

    assert str(exc_info.value) == "Token expired"
    assert exc_info.value.status_code == 401


@pytest.mark.anyio
async def test_unsuccessful_envelope_is_an_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": "User not found"})

    api = build_api(handler)

    with pytest.raises(NotificationApiError, match="User not found"):
        await api.list("u1")


@pytest.mark.anyio
async def test_malformed_list_and_non_json_bodies_are_errors():
    responses = iter(
        [
            httpx.Response(200, json={"success": True, "data": {"id": "n1"}}),
            httpx.Response(200, content=b"<html>maintenance</html>"),
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    api = build_api(handler)

    with pytest.raises(NotificationApiError, match="Malformed notification list"):
        await api.list("u1")
    with pytest.raises(NotificationApiError, match="non-JSON"):
        await api.list("u1")


@pytest.mark.anyio
async def test_network_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    api = build_api(handler)

    with pytest.raises(NotificationApiError, match="connection refused") as exc_info:
        await api.mark_read("n1")

    assert exc_info.value.status_code is None


@pytest.mark.anyio
async def test_list_requires_user_id():
    api = build_api(lambda request: httpx.Response(200, json={"data": []}))

    with pytest.raises(NotificationApiError):
        await api.list("")


@pytest.mark.anyio
async def test_mark_read_and_mark_all_read_patch_each_notification():
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={"success": True, "data": {}})

    api = build_api(handler)

    await api.mark_read("n1")
    result = await api.mark_all_read(["n2", "n3"])

    assert seen == [
        ("PATCH", "/api/notifications/n1/read"),
        ("PATCH", "/api/notifications/n2/read"),
        ("PATCH", "/api/notifications/n3/read"),
    ]
    assert result == {"success": True, "data": {"updated": 2}}


@pytest.mark.anyio
async def test_empty_response_body_is_accepted():
    api = build_api(lambda request: httpx.Response(204))

    assert await api.mark_read("n1") == {}


def test_from_settings_uses_configured_base_url():
    api = NotificationsApi.from_settings(get_settings(), token="abc")

    assert str(api._client.base_url) == "http://backend.test/api/"


@pytest.mark.anyio
async def test_mark_all_read_attempts_every_id_and_reports_failures(caplog):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path.endswith("/n2/read"):
            return httpx.Response(404, json={"success": False, "message": "Notification not found"})
        return httpx.Response(200, json={"success": True})

    api = build_api(handler)

    with pytest.raises(NotificationApiError) as exc_info:
        await api.mark_all_read(["n1", "n2", "n3"])

    assert seen == [
        "/api/notifications/n1/read",
        "/api/notifications/n2/read",
        "/api/notifications/n3/read",
    ]
    assert exc_info.value.failed_ids == ["n2"]
    assert "1 of 3" in str(exc_info.value)
    assert "Notification not found" in caplog.text
