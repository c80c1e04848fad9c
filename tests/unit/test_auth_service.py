"""Unit tests for phone OTP authentication."""
import pytest

from clearr.core.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from clearr.core.jwt import decode_token
from clearr.services.auth_service import AuthService
from clearr.services.user_service import UserService


@pytest.fixture
def auth_service(session_factory, verifier):
    return AuthService(session_factory, verifier)


@pytest.mark.asyncio
async def test_send_otp_normalizes_number(auth_service, verifier):
    result = await auth_service.send_otp("(555) 123-4567")
    assert result.success is True
    assert verifier.sent == ["+15551234567"]


@pytest.mark.asyncio
async def test_send_otp_rejects_malformed_number(auth_service, verifier):
    with pytest.raises(ValidationError):
        await auth_service.send_otp("12345")
    assert verifier.sent == []


@pytest.mark.asyncio
async def test_verify_creates_then_logs_in(auth_service, approved_code):
    created = await auth_service.verify_otp("5551234567", approved_code, full_name="Sam Lee")
    assert created.is_new_user is True
    assert created.user.phone_number == "+15551234567"
    assert created.user.is_verified is True

    payload = decode_token(created.tokens.access_token)
    assert payload["sub"] == str(created.user.id)
    assert payload["phone_number"] == "+15551234567"

    again = await auth_service.verify_otp("+1 555 123 4567", approved_code)
    assert again.is_new_user is False
    assert again.user.id == created.user.id


@pytest.mark.asyncio
async def test_verify_with_wrong_code(auth_service):
    with pytest.raises(ValidationError) as exc:
        await auth_service.verify_otp("5551234567", "000000", full_name="Sam Lee")
    assert exc.value.message == "Invalid or expired verification code"


@pytest.mark.asyncio
async def test_new_account_requires_full_name(auth_service, approved_code):
    with pytest.raises(ValidationError) as exc:
        await auth_service.verify_otp("5551234567", approved_code)
    assert exc.value.message == "Full name required for new account"


@pytest.mark.asyncio
async def test_deactivated_account_cannot_log_in(auth_service, session_factory, approved_code):
    outcome = await auth_service.verify_otp("5551234567", approved_code, full_name="Sam Lee")
    UserService(session_factory).deactivate(outcome.user.id)
    with pytest.raises(ForbiddenError):
        await auth_service.verify_otp("5551234567", approved_code)


@pytest.mark.asyncio
async def test_refresh_issues_new_pair(auth_service, approved_code):
    outcome = await auth_service.verify_otp("5551234567", approved_code, full_name="Sam Lee")
    pair = auth_service.refresh(outcome.tokens.refresh_token)
    assert decode_token(pair.access_token)["sub"] == str(outcome.user.id)

    with pytest.raises(UnauthorizedError):
        auth_service.refresh(outcome.tokens.access_token)
    with pytest.raises(UnauthorizedError):
        auth_service.refresh("garbage")
