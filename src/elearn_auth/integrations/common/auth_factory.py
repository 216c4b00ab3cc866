from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ...adapters.bcrypt.hasher import BcryptPasswordHasher
from ...adapters.jwt.codec import JWTTokenCodec
from ...adapters.memory.store import InMemoryUserStore
from ...application.route_classifier import RouteClassifier
from ...application.use_cases.authorize import AuthorizeRoleUseCase
from ...application.use_cases.gate import AuthenticationGate
from ...application.use_cases.login import LoginUseCase
from ...application.use_cases.register import (
    CheckAvailabilityUseCase,
    RegisterUserUseCase,
    SignupRequest,
)
from ...application.use_cases.validate import ValidateTokenUseCase
from ...config.settings import AuthSettings
from ...domain.constants import GateDecision, Role
from ...domain.entities import (
    IssuedToken,
    Principal,
    RequestContext,
    UserAccount,
    ValidationResult,
)
from ...domain.ports import CredentialStore, PasswordHasher, TokenCodec, UserRegistry
from ...domain.value_objects import RoleRequirement


@dataclass(slots=True)
class AuthDependencies:
    """
    Framework-agnostic auth facade.

    Integrations (FastAPI, CLI, etc.) adapt this to their own
    dependency / decorator systems.
    """

    token_codec: TokenCodec
    password_hasher: PasswordHasher
    classifier: RouteClassifier
    validate_use_case: ValidateTokenUseCase
    gate: AuthenticationGate
    login_use_case: LoginUseCase
    authorize_use_case: AuthorizeRoleUseCase
    register_use_case: Optional[RegisterUserUseCase] = None
    availability_use_case: Optional[CheckAvailabilityUseCase] = None

    # --- Core operations --------------------------------------------------

    def issue(self, subject: str, role: Role | str, now: Optional[datetime] = None) -> IssuedToken:
        return self.token_codec.issue(subject, role, now or self.gate.clock())

    def validate(self, token: str, now: Optional[datetime] = None) -> ValidationResult:
        """Token -> ValidationResult (never raises for bad tokens)."""
        return self.validate_use_case.execute(token, now or self.gate.clock())

    def is_public(self, path: str, method: Optional[str] = None) -> bool:
        return self.classifier.is_public(path, method)

    def authenticate_request(
            self,
            context: RequestContext,
            authorization: Optional[str],
    ) -> GateDecision:
        """Run the gate; populates `context.principal` on success."""
        return self.gate.process(context, authorization)

    def check_private_access(self, context: RequestContext) -> None:
        """
        Default-deny step run after the gate: a private route needs a
        principal, whatever the route itself declares.

        Raises:
            AuthenticationError
        """
        if self.classifier.is_public(context.path, context.method):
            return
        self.authorize(context.principal, [])

    def login(self, username: str, password: str) -> IssuedToken:
        return self.login_use_case.execute(username, password)

    def authorize(
            self,
            principal: Optional[Principal],
            requirements: Iterable[RoleRequirement],
    ) -> Principal:
        """Check requirements against the request's principal."""
        return self.authorize_use_case.execute(principal, requirements)

    # --- Account helpers --------------------------------------------------

    def register(self, request: SignupRequest) -> UserAccount:
        if self.register_use_case is None:
            raise RuntimeError("No user registry configured for signup")
        return self.register_use_case.execute(request)

    def username_available(self, username: str) -> bool:
        if self.availability_use_case is None:
            raise RuntimeError("No user registry configured for availability checks")
        return self.availability_use_case.username_available(username)

    def email_available(self, email: str) -> bool:
        if self.availability_use_case is None:
            raise RuntimeError("No user registry configured for availability checks")
        return self.availability_use_case.email_available(email)

    # --- Convenience helpers to build requirements ------------------------

    def require_roles(self, *, any_of: Iterable[Role | str] = ()) -> RoleRequirement:
        return RoleRequirement(any_of=any_of)


def create_auth_dependencies(
        settings: AuthSettings,
        *,
        credential_store: Optional[CredentialStore] = None,
        registry: Optional[UserRegistry] = None,
        password_hasher: Optional[PasswordHasher] = None,
) -> AuthDependencies:
    """
    High-level factory: AuthSettings -> AuthDependencies.

    - builds a JWTTokenCodec from the signing settings
    - builds the RouteClassifier from the public route rules
    - wires validate / gate / login / authorize (+ signup when a registry
      is available)
    - returns an AuthDependencies facade.

    Without a credential store an empty InMemoryUserStore is used for both
    login and signup.
    """
    if credential_store is None:
        store = InMemoryUserStore()
        credential_store = store
        registry = registry or store
    elif registry is None and isinstance(credential_store, InMemoryUserStore):
        registry = credential_store

    codec = JWTTokenCodec(
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )
    hasher = password_hasher or BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    classifier = RouteClassifier(settings.public_routes)

    validate_uc = ValidateTokenUseCase(token_codec=codec)
    gate = AuthenticationGate(classifier=classifier, validator=validate_uc)
    login_uc = LoginUseCase(
        credential_store=credential_store,
        password_hasher=hasher,
        token_codec=codec,
    )

    register_uc = None
    availability_uc = None
    if registry is not None:
        register_uc = RegisterUserUseCase(registry=registry, password_hasher=hasher)
        availability_uc = CheckAvailabilityUseCase(registry=registry)

    return AuthDependencies(
        token_codec=codec,
        password_hasher=hasher,
        classifier=classifier,
        validate_use_case=validate_uc,
        gate=gate,
        login_use_case=login_uc,
        authorize_use_case=AuthorizeRoleUseCase(),
        register_use_case=register_uc,
        availability_use_case=availability_uc,
    )
