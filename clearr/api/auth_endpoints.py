"""Phone OTP authentication and account endpoints."""

from fastapi import APIRouter, Depends

from clearr.core.dependencies import (
    Identity,
    get_auth_service,
    get_current_identity,
    get_user_service,
)
from clearr.core.exceptions import ValidationError
from clearr.schemas.base import Envelope, respond
from clearr.schemas.user import (
    AuthResult,
    DeleteAccountRequest,
    OnboardingRequest,
    ProfileUpdate,
    SendOtpRequest,
    Token,
    TokenRefresh,
    UserRead,
    VerifyOtpRequest,
)
from clearr.services.auth_service import AuthService, TokenPair
from clearr.services.user_service import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _token(pair: TokenPair) -> Token:
    return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/send-otp", response_model=Envelope)
async def send_otp(payload: SendOtpRequest, auth: AuthService = Depends(get_auth_service)):
    result = await auth.send_otp(payload.phone_number)
    return respond(result.message)


@router.post("/verify-otp", response_model=Envelope[AuthResult])
async def verify_otp(payload: VerifyOtpRequest, auth: AuthService = Depends(get_auth_service)):
    outcome = await auth.verify_otp(
        payload.phone_number,
        payload.otp_code,
        full_name=payload.full_name,
        email=payload.email,
    )
    result = AuthResult(
        user=UserRead.model_validate(outcome.user),
        token=_token(outcome.tokens),
        is_new_user=outcome.is_new_user,
    )
    if outcome.is_new_user:
        return respond("Account created successfully", result, status_code=201)
    return respond("Login successful", result)


@router.post("/refresh", response_model=Envelope[Token])
async def refresh_token(payload: TokenRefresh, auth: AuthService = Depends(get_auth_service)):
    return respond("Token refreshed successfully", _token(auth.refresh(payload.refresh_token)))


@router.post("/update-profile", response_model=Envelope[UserRead])
async def update_profile(
    payload: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    user = users.update_profile(
        identity.user_id,
        full_name=payload.full_name,
        email=payload.email,
        preferred_mode=payload.preferred_mode,
        notification_enabled=payload.notification_enabled,
        push_token=payload.push_token,
    )
    return respond("Profile updated successfully", UserRead.model_validate(user))


@router.post("/complete-onboarding", response_model=Envelope[UserRead])
async def complete_onboarding(
    payload: OnboardingRequest,
    identity: Identity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    user = users.complete_onboarding(
        identity.user_id,
        preferred_mode=payload.preferred_mode,
        notification_enabled=payload.notification_enabled,
    )
    return respond("Onboarding completed successfully", UserRead.model_validate(user))


@router.post("/delete-account", response_model=Envelope)
async def delete_account(
    payload: DeleteAccountRequest,
    identity: Identity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    if payload.confirm_delete is not True:
        raise ValidationError("Account deletion must be confirmed")
    users.deactivate(identity.user_id, reason=payload.reason)
    return respond("Account deactivated successfully")
