from datetime import datetime, timezone

import pytest

from elearn_auth.adapters.bcrypt.hasher import BcryptPasswordHasher
from elearn_auth.adapters.jwt.codec import JWTTokenCodec
from elearn_auth.adapters.memory.store import InMemoryUserStore
from elearn_auth.application.route_classifier import RouteClassifier
from elearn_auth.application.use_cases.gate import AuthenticationGate
from elearn_auth.application.use_cases.validate import ValidateTokenUseCase
from elearn_auth.config.settings import AuthSettings
from elearn_auth.domain.constants import Role
from elearn_auth.domain.entities import UserAccount
from elearn_auth.domain.value_objects import EmailAddress

SECRET = "test-secret-key-that-is-long-enough-for-hs256"
NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
TTL = 3600


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def codec():
    return JWTTokenCodec(SECRET, ttl_seconds=TTL)


@pytest.fixture
def validator(codec):
    return ValidateTokenUseCase(token_codec=codec)


@pytest.fixture
def classifier():
    return RouteClassifier()


@pytest.fixture
def gate(classifier, validator):
    return AuthenticationGate(classifier=classifier, validator=validator, clock=lambda: NOW)


@pytest.fixture(scope="session")
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def store(hasher):
    return InMemoryUserStore([
        UserAccount(
            name="Alice Student",
            email=EmailAddress("alice@example.com"),
            username="alice",
            password_hash=hasher.hash("alice-pass"),
            role=Role.USER,
        ),
        UserAccount(
            name="Ivan Instructor",
            email=EmailAddress("ivan@example.com"),
            username="ivan",
            password_hash=hasher.hash("ivan-pass"),
            role=Role.INSTRUCTOR,
        ),
        UserAccount(
            name="Ada Admin",
            email=EmailAddress("ada@example.com"),
            username="ada",
            password_hash=hasher.hash("ada-pass"),
            role=Role.ADMIN,
        ),
    ])


@pytest.fixture
def settings():
    return AuthSettings(jwt_secret=SECRET, token_ttl_seconds=TTL, bcrypt_rounds=4)
