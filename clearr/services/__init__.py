"""
Business services for the Clearr backend.
"""

from .auth_service import AuthService
from .generation_gateway import BaseGenerationGateway, GeminiGenerationGateway
from .mode_service import ModeService, ModeRef, ModeById, ModeByLegacyName
from .phone_verification import BasePhoneVerifier, TwilioVerifyClient
from .prompt_resolver import PromptResolver
from .translation_service import TranslationService
from .user_service import UserService

__all__ = [
    "AuthService",
    "BaseGenerationGateway",
    "GeminiGenerationGateway",
    "ModeService",
    "ModeRef",
    "ModeById",
    "ModeByLegacyName",
    "BasePhoneVerifier",
    "TwilioVerifyClient",
    "PromptResolver",
    "TranslationService",
    "UserService",
]
