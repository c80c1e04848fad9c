"""Shared fixtures: in-memory database, fake capabilities, test client."""
import os

# Settings are read at import time; pin them before the app package loads
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clearr.core.db import create_all
from clearr.core.dependencies import ServiceContainer
from clearr.core.exceptions import GenerationError
from clearr.core.jwt import create_access_token
from clearr.main import create_app
from clearr.models.user import User
from clearr.services.generation_gateway import BaseGenerationGateway
from clearr.services.mode_service import ModeService
from clearr.services.phone_verification import BasePhoneVerifier, VerificationResult
from clearr.services.prompt_resolver import PromptResolver
from clearr.services.translation_service import TranslationService
from clearr.services.user_service import UserService

APPROVED_CODE = "123456"


class FakeGateway(BaseGenerationGateway):
    """Deterministic stand-in for the language model."""

    def __init__(self):
        self.prompts: List[str] = []
        self.fail = False

    async def generate(self, prompt_text: str) -> List[str]:
        self.prompts.append(prompt_text)
        if self.fail:
            raise GenerationError("Failed to generate translation")
        return [f"Constructive rewrite #{len(self.prompts)}"]


class FakeVerifier(BasePhoneVerifier):
    def __init__(self):
        self.sent: List[str] = []

    async def send_code(self, phone_number: str) -> VerificationResult:
        self.sent.append(phone_number)
        return VerificationResult(True, "Verification code sent successfully")

    async def check_code(self, phone_number: str, code: str) -> VerificationResult:
        if code == APPROVED_CODE:
            return VerificationResult(True, "Phone number verified successfully")
        return VerificationResult(False, "Invalid or expired verification code")


@pytest.fixture(scope="function")
def session_factory():
    # In-memory SQLite shared across threads for the TestClient
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def mode_service(session_factory):
    return ModeService(session_factory)


@pytest.fixture
def user_service(session_factory):
    return UserService(session_factory, max_style_examples=10)


@pytest.fixture
def translation_service(session_factory, mode_service, gateway):
    return TranslationService(
        session_factory,
        mode_service=mode_service,
        prompt_resolver=PromptResolver(session_factory),
        gateway=gateway,
    )


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    def _make(full_name: str = "Test User", **fields) -> User:
        counter["n"] += 1
        with session_factory() as session:
            user = User(
                phone_number=fields.pop("phone_number", f"+1555000{counter['n']:04d}"),
                full_name=full_name,
                is_verified=True,
                context_training=fields.pop("context_training", []),
                translation_ids=[],
                **fields,
            )
            session.add(user)
            session.commit()
            return user

    return _make


@pytest.fixture
def client(session_factory, gateway, verifier):
    container = ServiceContainer(session_factory=session_factory, gateway=gateway, verifier=verifier)
    app = create_app(container)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(user.id, user.phone_number)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def approved_code():
    return APPROVED_CODE
