"""Unit tests for the Twilio Verify client."""
from urllib.parse import parse_qs

import httpx
import pytest

from clearr.config import TwilioSettings
from clearr.core.exceptions import DependencyError
from clearr.services.phone_verification import TwilioVerifyClient


def _settings(**overrides):
    values = dict(
        account_sid="AC123",
        auth_token="secret",
        verify_service_sid="VA456",
        api_url="https://verify.test/v2",
    )
    values.update(overrides)
    return TwilioSettings(**values)


def _client(handler, **overrides):
    return TwilioVerifyClient(_settings(**overrides), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_code_posts_to_verifications():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"status": "pending"})

    result = await _client(handler).send_code("+15551234567")

    assert result.success is True
    request = seen[0]
    assert str(request.url) == "https://verify.test/v2/Services/VA456/Verifications"
    assert request.headers["Authorization"].startswith("Basic ")
    form = parse_qs(request.content.decode())
    assert form == {"To": ["+15551234567"], "Channel": ["sms"]}


@pytest.mark.asyncio
async def test_send_code_upstream_error_is_dependency_error():
    client = _client(lambda request: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(DependencyError):
        await client.send_code("+15551234567")


@pytest.mark.asyncio
async def test_network_failure_is_dependency_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(DependencyError):
        await _client(handler).check_code("+15551234567", "123456")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code,body,expected",
    [
        (200, {"status": "approved"}, True),
        (200, {"status": "pending"}, False),
        (404, {"message": "not found"}, False),
    ],
)
async def test_check_code_outcomes(status_code, body, expected):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status_code, json=body)

    result = await _client(handler).check_code("+15551234567", "123456")

    assert result.success is expected
    assert str(seen[0].url).endswith("/Services/VA456/VerificationCheck")
    assert parse_qs(seen[0].content.decode()) == {"To": ["+15551234567"], "Code": ["123456"]}


@pytest.mark.asyncio
async def test_unconfigured_client_refuses_to_send():
    client = _client(lambda request: httpx.Response(201), account_sid=None)
    with pytest.raises(DependencyError):
        await client.send_code("+15551234567")
