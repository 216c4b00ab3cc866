"""
elearn_auth

Clean-architecture authentication and role gating for the e-learning
backend: signed bearer tokens, public route classification, a permissive
per-request gate and role-based authorization, with a FastAPI integration.
"""

__version__ = "0.1.0"

from .domain.constants import Role, MatchKind, GateDecision
from .domain.entities import (
    Principal,
    TokenClaims,
    IssuedToken,
    ValidationResult,
    Credential,
    UserAccount,
    RequestContext,
)
from .domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    TokenExpiredError,
    InvalidTokenError,
    InvalidCredentialsError,
    InvalidRoleError,
    ConfigurationError,
    ClassifierMisconfigurationError,
    RegistrationError,
    RegistrationConflictError,
    UsernameTakenError,
    EmailTakenError,
)
from .domain.value_objects import EmailAddress, RouteRule, RoleRequirement, require_roles
from .domain.ports import TokenCodec, PasswordHasher, CredentialStore, UserRegistry

from .application.route_classifier import RouteClassifier, DEFAULT_PUBLIC_ROUTES
from .application.use_cases.validate import ValidateTokenUseCase
from .application.use_cases.gate import AuthenticationGate, extract_bearer_token
from .application.use_cases.login import LoginUseCase
from .application.use_cases.register import (
    SignupRequest,
    RegisterUserUseCase,
    CheckAvailabilityUseCase,
)
from .application.use_cases.authorize import AuthorizeRoleUseCase

from .adapters.jwt.codec import JWTTokenCodec
from .adapters.bcrypt.hasher import BcryptPasswordHasher
from .adapters.memory.store import InMemoryUserStore

from .config import AuthSettings, CORSSettings, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "Role",
    "MatchKind",
    "GateDecision",
    "Principal",
    "TokenClaims",
    "IssuedToken",
    "ValidationResult",
    "Credential",
    "UserAccount",
    "RequestContext",
    "EmailAddress",
    "RouteRule",
    "RoleRequirement",
    "require_roles",
    "TokenCodec",
    "PasswordHasher",
    "CredentialStore",
    "UserRegistry",
    # exceptions
    "AuthenticationError",
    "AuthorizationError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InvalidCredentialsError",
    "InvalidRoleError",
    "ConfigurationError",
    "ClassifierMisconfigurationError",
    "RegistrationError",
    "RegistrationConflictError",
    "UsernameTakenError",
    "EmailTakenError",
    # application
    "RouteClassifier",
    "DEFAULT_PUBLIC_ROUTES",
    "ValidateTokenUseCase",
    "AuthenticationGate",
    "extract_bearer_token",
    "LoginUseCase",
    "SignupRequest",
    "RegisterUserUseCase",
    "CheckAvailabilityUseCase",
    "AuthorizeRoleUseCase",
    # adapters
    "JWTTokenCodec",
    "BcryptPasswordHasher",
    "InMemoryUserStore",
    # config
    "AuthSettings",
    "CORSSettings",
    "settings_from_env",
]
