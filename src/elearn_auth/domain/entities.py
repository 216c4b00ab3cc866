from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import Role
from .value_objects import EmailAddress


@dataclass(frozen=True, slots=True)
class Principal:
    """
    The authenticated identity of a single request.

    Built from validated token claims only; never persisted.
    """
    subject: str
    role: Role

    def has_any_role(self, *roles: Role) -> bool:
        return self.role in roles


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims carried by a signed token.

    `role` stays a raw string here: it is not trusted until the token has
    passed signature and expiry checks.
    """
    subject: str
    role: str
    issued_at: int | float
    expires_at: int | float

    def is_expired(self, now_ts: float) -> bool:
        return now_ts >= self.expires_at


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """A freshly signed token together with the claims it carries."""
    token: str
    claims: TokenClaims

    @property
    def expires_in(self) -> int:
        return round(self.claims.expires_at - self.claims.issued_at)

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    subject: Optional[str] = None
    role: Optional[Role] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, subject: str, role: Role) -> ValidationResult:
        return cls(valid=True, subject=subject, role=role)

    @classmethod
    def invalid(cls, reason: str) -> ValidationResult:
        return cls(valid=False, reason=reason)

    def to_principal(self) -> Optional[Principal]:
        if not self.valid or self.subject is None or self.role is None:
            return None
        return Principal(subject=self.subject, role=self.role)


@dataclass(frozen=True, slots=True)
class Credential:
    """
    Stored login data for one user, as exposed by the credential store.
    Read-only from the auth core's perspective.
    """
    username: str
    password_hash: str
    role: Role


@dataclass(frozen=True, slots=True)
class UserAccount:
    """
    A registered user as handed to the user registry on signup.
    """
    name: str
    email: EmailAddress
    username: str
    password_hash: str
    role: Role = Role.USER

    @property
    def credential(self) -> Credential:
        return Credential(
            username=self.username,
            password_hash=self.password_hash,
            role=self.role,
        )


@dataclass(slots=True)
class RequestContext:
    """
    Request-scoped authentication state, passed explicitly through the
    request-handling chain instead of living in a global.
    """
    method: str
    path: str
    principal: Optional[Principal] = None

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    @property
    def subject(self) -> Optional[str]:
        return self.principal.subject if self.principal else None

    @property
    def role(self) -> Optional[Role]:
        return self.principal.role if self.principal else None

    def attach(self, principal: Principal) -> bool:
        """
        Attach `principal` unless one is already present.

        Returns True if the principal was attached.
        """
        if self.principal is not None:
            return False
        self.principal = principal
        return True
