"""Phone-possession login and signup."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from clearr.core.db import db_session
from clearr.core.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from clearr.core.jwt import create_access_token, create_refresh_token, decode_token
from clearr.core.validation import (
    normalize_phone_number,
    validate_email,
    validate_phone_number,
    validate_text,
)
from clearr.models.user import User
from clearr.services.phone_verification import BasePhoneVerifier, VerificationResult
from clearr.services.user_service import FULL_NAME_MAX

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass
class AuthOutcome:
    user: User
    tokens: TokenPair
    is_new_user: bool


def issue_tokens(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user.id, user.phone_number),
        refresh_token=create_refresh_token(user.id, user.phone_number),
    )


class AuthService:
    def __init__(self, session_factory, verifier: BasePhoneVerifier):
        self._session_factory = session_factory
        self.verifier = verifier

    async def send_otp(self, phone_number: str) -> VerificationResult:
        if not validate_phone_number(phone_number):
            raise ValidationError("Invalid phone number format")
        return await self.verifier.send_code(normalize_phone_number(phone_number))

    async def verify_otp(
        self,
        phone_number: str,
        code: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> AuthOutcome:
        """
        Check the one-time code, then log in or sign up the phone's owner.

        Args:
            phone_number: Phone number in any common format
            code: Code the user received
            full_name: Required when the number has no account yet
            email: Optional email for a new account

        Returns:
            AuthOutcome with the user, a token pair and whether the account is new
        """
        if not validate_phone_number(phone_number):
            raise ValidationError("Invalid phone number format")
        phone = normalize_phone_number(phone_number)

        result = await self.verifier.check_code(phone, code.strip())
        if not result.success:
            raise ValidationError(result.message)

        is_new_user = False
        with db_session(self._session_factory) as session:
            user = session.execute(
                select(User).where(User.phone_number == phone)
            ).scalar_one_or_none()

            if user is None:
                if not full_name or not full_name.strip():
                    raise ValidationError("Full name required for new account")
                user = User(
                    phone_number=phone,
                    full_name=validate_text(full_name, "Full name", 2, FULL_NAME_MAX),
                    email=validate_email(email) if email else None,
                    is_verified=True,
                    is_active=True,
                    is_deleted=False,
                    context_training=[],
                    translation_ids=[],
                )
                session.add(user)
                try:
                    session.flush()
                except IntegrityError as e:
                    raise ValidationError("Email is already in use") from e
                is_new_user = True
            elif not user.is_active:
                raise ForbiddenError("Account has been deactivated")

        logger.info(
            "Phone verified",
            extra={"user_id": user.id, "is_new_user": is_new_user},
        )
        return AuthOutcome(user=user, tokens=issue_tokens(user), is_new_user=is_new_user)

    def refresh(self, refresh_token: str) -> TokenPair:
        decoded = decode_token(refresh_token, refresh=True)
        if not decoded or not decoded.get("sub"):
            raise UnauthorizedError("Invalid refresh token")

        with self._session_factory() as session:
            user = session.execute(
                User.active().where(User.id == int(decoded["sub"]))
            ).scalar_one_or_none()
        if user is None:
            raise UnauthorizedError("Invalid refresh token")
        return issue_tokens(user)
