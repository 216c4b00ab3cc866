from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ...domain.clock import to_epoch_seconds
from ...domain.constants import Role
from ...domain.entities import ValidationResult
from ...domain.exceptions import (
    InvalidTokenError,
    TokenExpiredError,
)
from ...domain.ports import TokenCodec


@dataclass(slots=True)
class ValidateTokenUseCase:
    """
    Application use case:
    - Decode a token via the TokenCodec port (signature + structure)
    - Check expiry against the caller's clock
    - Map the role claim onto the closed Role set

    `execute` never raises for a bad token; it returns an invalid
    ValidationResult instead. `authenticate` is the raising variant for
    callers that want to tell expired tokens from malformed ones.
    """

    token_codec: TokenCodec

    def execute(self, token: str, now: datetime) -> ValidationResult:
        try:
            subject, role = self.authenticate(token, now)
        except TokenExpiredError:
            return ValidationResult.invalid("expired")
        except InvalidTokenError:
            return ValidationResult.invalid("malformed")
        return ValidationResult.ok(subject=subject, role=role)

    def authenticate(self, token: str, now: datetime) -> tuple[str, Role]:
        """
        Raises:
            TokenExpiredError
            InvalidTokenError
        """
        claims = self.token_codec.decode(token)

        if claims.is_expired(to_epoch_seconds(now)):
            raise TokenExpiredError("Token has expired")

        # strict: only the canonical names issue() writes
        try:
            role = Role(claims.role)
        except ValueError as exc:
            raise InvalidTokenError(f"Invalid token: unknown role {claims.role!r}") from exc

        return claims.subject, role
