"""
Dependency injection setup for FastAPI.
Provides the service container and request-scoped dependency providers.
"""

from dataclasses import dataclass
from fastapi import Depends, Header, Request
from typing import Optional
import logging
import asyncio

from clearr.config import Settings, get_settings
from clearr.core.db import create_all, get_session_factory
from clearr.core.exceptions import ForbiddenError, UnauthorizedError
from clearr.core.jwt import decode_token
from clearr.services import (
    AuthService,
    BaseGenerationGateway,
    BasePhoneVerifier,
    GeminiGenerationGateway,
    ModeService,
    PromptResolver,
    TranslationService,
    TwilioVerifyClient,
    UserService,
)


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Owns the capability handles (database sessions, generation gateway,
    phone verifier) built once per process and the services wired on top.
    Tests pass their own session factory and fakes.
    """

    def __init__(
        self,
        session_factory=None,
        gateway: Optional[BaseGenerationGateway] = None,
        verifier: Optional[BasePhoneVerifier] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings
        self._session_factory = session_factory
        self._gateway = gateway
        self._verifier = verifier
        self._mode_service: Optional[ModeService] = None
        self._translation_service: Optional[TranslationService] = None
        self._user_service: Optional[UserService] = None
        self._auth_service: Optional[AuthService] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    async def initialize_services(self) -> None:
        """
        Initialize all services with proper dependency order.
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")

            try:
                settings = self._settings or get_settings()
                if self._session_factory is None:
                    self._session_factory = get_session_factory()
                    if settings.database.auto_create:
                        create_all()
                if self._gateway is None:
                    self._gateway = GeminiGenerationGateway(settings.generation)
                if self._verifier is None:
                    self._verifier = TwilioVerifyClient(settings.twilio)

                self._mode_service = ModeService(self._session_factory)
                self._user_service = UserService(
                    self._session_factory,
                    max_style_examples=settings.max_style_examples,
                )
                self._translation_service = TranslationService(
                    self._session_factory,
                    mode_service=self._mode_service,
                    prompt_resolver=PromptResolver(self._session_factory),
                    gateway=self._gateway,
                    max_input_length=settings.max_translation_length,
                )
                self._auth_service = AuthService(self._session_factory, self._verifier)

                self._initialized = True
                logger.info("Service container initialization completed")

            except Exception as e:
                logger.error(f"Service container initialization failed: {e}", exc_info=True)
                raise

    async def cleanup_services(self) -> None:
        """
        Cleanup all services in reverse dependency order.
        """
        logger.info("Cleaning up service container")

        try:
            if self._gateway:
                await self._gateway.close()

            self._auth_service = None
            self._translation_service = None
            self._user_service = None
            self._mode_service = None

            logger.info("Service container cleanup completed")

        except Exception as e:
            logger.error(f"Service container cleanup failed: {e}", exc_info=True)
        finally:
            # Always reset initialized flag
            self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def session_factory(self):
        return self._session_factory

    def _require(self, service, name: str):
        if not self._initialized or service is None:
            raise RuntimeError(f"Service container not initialized ({name})")
        return service

    def get_mode_service(self) -> ModeService:
        return self._require(self._mode_service, "mode service")

    def get_translation_service(self) -> TranslationService:
        return self._require(self._translation_service, "translation service")

    def get_user_service(self) -> UserService:
        return self._require(self._user_service, "user service")

    def get_auth_service(self) -> AuthService:
        return self._require(self._auth_service, "auth service")


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        RuntimeError: If the lifespan never installed a container
    """
    container = getattr(request.app.state, 'service_container', None)
    if container is None:
        logger.error("Service container not initialized")
        raise RuntimeError("Service container not available")
    return container


def get_mode_service(container: ServiceContainer = Depends(get_service_container)) -> ModeService:
    return container.get_mode_service()


def get_translation_service(container: ServiceContainer = Depends(get_service_container)) -> TranslationService:
    return container.get_translation_service()


def get_user_service(container: ServiceContainer = Depends(get_service_container)) -> UserService:
    return container.get_user_service()


def get_auth_service(container: ServiceContainer = Depends(get_service_container)) -> AuthService:
    return container.get_auth_service()


@dataclass
class Identity:
    user_id: int
    phone_number: str


def get_current_identity(authorization: Optional[str] = Header(default=None)) -> Identity:
    """
    Resolve the bearer token into the caller's identity.

    The token's user id and phone number are trusted as issued; account
    state is checked by the services that need it.
    """
    if not authorization:
        raise UnauthorizedError("Access token required")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization header format")

    decoded = decode_token(parts[1], refresh=False)
    if not decoded or not str(decoded.get("sub", "")).isdigit():
        raise UnauthorizedError("Invalid or expired token")

    return Identity(user_id=int(decoded["sub"]), phone_number=decoded.get("phone_number", ""))


def require_path_user(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Reject requests whose ``{user_id}`` path segment is not the caller."""
    if user_id != identity.user_id:
        raise ForbiddenError("Access denied")
    return identity
