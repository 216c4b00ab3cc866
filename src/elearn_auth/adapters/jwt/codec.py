from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any, Mapping

import jwt
from jwt.exceptions import InvalidTokenError as JWTInvalidTokenError

from ...domain.clock import to_epoch_seconds
from ...domain.constants import Role
from ...domain.entities import IssuedToken, TokenClaims
from ...domain.exceptions import InvalidTokenError
from ...domain.ports import TokenCodec

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
DEFAULT_TTL_SECONDS = 24 * 60 * 60
REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def _numeric_date(timestamp: float) -> int | float:
    """Whole seconds go on the wire as integers, anything finer as a float."""
    return int(timestamp) if timestamp.is_integer() else timestamp


class JWTTokenCodec(TokenCodec):
    """
    Adapter implementing the TokenCodec port with PyJWT and a shared
    HMAC secret.

    Infrastructure layer:
    - Knows about JWT structure and signing.
    - Leaves expiry to the validator, so `decode` works on expired tokens.
    """

    def __init__(
        self,
        secret_key: str | bytes,
        algorithm: str = "HS256",
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported algorithm {algorithm!r}, expected one of {SUPPORTED_ALGORITHMS}"
            )
        if not secret_key:
            raise ValueError("Signing key must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Token TTL must be positive")

        self._key = secret_key
        self._algorithm = algorithm
        self._ttl = int(ttl_seconds)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def issue(self, subject: str, role: Role | str, now: datetime) -> IssuedToken:
        if not subject or not subject.strip():
            raise ValueError("Token subject must not be blank")
        checked_role = Role.parse(role)

        # exact instants; sub-second NumericDates are valid per RFC 7519
        issued_at = _numeric_date(to_epoch_seconds(now))
        expires_at = _numeric_date(to_epoch_seconds(now + timedelta(seconds=self._ttl)))
        claims = TokenClaims(
            subject=subject,
            role=checked_role.value,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        payload = {
            "sub": claims.subject,
            "role": claims.role,
            "iat": claims.issued_at,
            "exp": claims.expires_at,
        }
        token = jwt.encode(payload, self._key, algorithm=self._algorithm)
        return IssuedToken(token=token, claims=claims)

    def decode(self, token: str) -> TokenClaims:
        """
        Decode and verify a token's signature and claim shapes.

        Returns:
            TokenClaims (possibly expired).

        Raises:
            InvalidTokenError
        """
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self._algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except JWTInvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

        return self._claims_from_payload(payload)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _claims_from_payload(payload: Mapping[str, Any]) -> TokenClaims:
        sub = payload.get("sub")
        role = payload.get("role")
        iat = payload.get("iat")
        exp = payload.get("exp")

        if not isinstance(sub, str) or not sub:
            raise InvalidTokenError("Invalid token: 'sub' must be a non-empty string")
        if not isinstance(role, str):
            raise InvalidTokenError("Invalid token: 'role' must be a string")
        # bool is an int subclass, reject it explicitly
        for name, value in (("iat", iat), ("exp", exp)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTokenError(f"Invalid token: '{name}' must be a number")
            if not math.isfinite(value):
                raise InvalidTokenError(f"Invalid token: '{name}' must be finite")

        return TokenClaims(subject=sub, role=role, issued_at=iat, expires_at=exp)
