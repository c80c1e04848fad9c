"""
Phone possession check through the Twilio Verify REST API.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from clearr.config import TwilioSettings
from clearr.core.exceptions import DependencyError

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    success: bool
    message: str


class BasePhoneVerifier(ABC):
    """Abstract one-time-code delivery and check"""

    @abstractmethod
    async def send_code(self, phone_number: str) -> VerificationResult:
        pass

    @abstractmethod
    async def check_code(self, phone_number: str, code: str) -> VerificationResult:
        pass


class TwilioVerifyClient(BasePhoneVerifier):
    """Twilio Verify v2 over httpx; phone numbers are expected in E.164."""

    def __init__(self, config: TwilioSettings, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.timeout = config.timeout_seconds
        self._transport = transport

        if not self._configured():
            logger.warning(
                "Twilio Verify not configured. "
                "Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_VERIFY_SERVICE_SID."
            )

    def _configured(self) -> bool:
        return bool(self.config.account_sid and self.config.auth_token and self.config.verify_service_sid)

    def _service_url(self, resource: str) -> str:
        return f"{self.config.api_url}/Services/{self.config.verify_service_sid}/{resource}"

    async def _post(self, resource: str, form: dict) -> httpx.Response:
        if not self._configured():
            raise DependencyError("Phone verification is not configured")

        async with httpx.AsyncClient(
            auth=(self.config.account_sid, self.config.auth_token),
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            return await client.post(self._service_url(resource), data=form)

    async def send_code(self, phone_number: str) -> VerificationResult:
        try:
            response = await self._post(
                "Verifications", {"To": phone_number, "Channel": self.config.channel}
            )
        except httpx.HTTPError as e:
            logger.error(f"Twilio Verify request failed: {e}")
            raise DependencyError("Failed to send verification code") from e

        if response.status_code >= 400:
            logger.error(
                f"Twilio Verify returned {response.status_code} while sending code",
                extra={"status_code": response.status_code},
            )
            raise DependencyError("Failed to send verification code")

        logger.info("Verification code sent", extra={"channel": self.config.channel})
        return VerificationResult(True, "Verification code sent successfully")

    async def check_code(self, phone_number: str, code: str) -> VerificationResult:
        try:
            response = await self._post(
                "VerificationCheck", {"To": phone_number, "Code": code}
            )
        except httpx.HTTPError as e:
            logger.error(f"Twilio Verify check failed: {e}")
            raise DependencyError("Verification failed") from e

        # Twilio answers 404 once a verification has expired or been consumed
        if response.status_code == 404:
            return VerificationResult(False, "Invalid or expired verification code")

        if response.status_code >= 400:
            logger.error(
                f"Twilio Verify returned {response.status_code} while checking code",
                extra={"status_code": response.status_code},
            )
            raise DependencyError("Verification failed")

        status = response.json().get("status")
        if status == "approved":
            return VerificationResult(True, "Phone number verified successfully")
        return VerificationResult(False, "Invalid or expired verification code")
