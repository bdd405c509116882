"""Tests for the Alma users API client, using httpx.MockTransport."""
import json
import logging

import httpx
import pytest

from app.core.errors import AlmaApiError
from app.services.alma import AlmaUsersClient
from app.services.batch import error_message


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _client(handler) -> AlmaUsersClient:
    return AlmaUsersClient(
        api_key="test-key",
        base_url="https://alma.example.com/",
        transport=httpx.MockTransport(handler),
    )


# ─── Tests ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_user_posts_json():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(200, json={**body, "primary_id": body["primary_id"]})

    async with _client(handler) as client:
        user = await client.create_user({"primary_id": "u1", "account_type": {"value": "INTERNAL"}})

    assert user["primary_id"] == "u1"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/almaws/v1/users"
    assert request.url.params["social_authentication"] == "false"
    assert request.headers["Authorization"] == "apikey test-key"
    assert request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_error_response_carries_payload():
    payload = {"errorsExist": True, "errorList": {"error": [{"errorMessage": "User already exists"}]}}

    def handler(request):
        return httpx.Response(400, json=payload)

    async with _client(handler) as client:
        with pytest.raises(AlmaApiError) as info:
            await client.create_user({"primary_id": "u1"})

    assert info.value.status_code == 400
    assert info.value.payload == payload
    assert error_message(info.value) == "User already exists"


@pytest.mark.asyncio
async def test_non_json_error_falls_back_to_status_message():
    def handler(request):
        return httpx.Response(503, text="<html>down</html>")

    async with _client(handler) as client:
        with pytest.raises(AlmaApiError) as info:
            await client.create_user({"primary_id": "u1"})

    assert info.value.payload is None
    assert error_message(info.value) == "Users API error 503: Service Unavailable"


@pytest.mark.asyncio
async def test_transport_error_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(AlmaApiError) as info:
            await client.create_user({"primary_id": "u1"})

    assert "connection refused" in str(info.value)
    assert info.value.status_code is None


@pytest.mark.asyncio
async def test_error_response_is_logged(caplog):
    def handler(request):
        return httpx.Response(400, json={"errorsExist": True})

    async with _client(handler) as client:
        with caplog.at_level(logging.WARNING, logger="app.services.alma"):
            with pytest.raises(AlmaApiError):
                await client.create_user({"primary_id": "u1"})

    assert "Users API returned 400" in caplog.text
