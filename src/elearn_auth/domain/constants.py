from __future__ import annotations

from enum import Enum

from .exceptions import InvalidRoleError


class Role(str, Enum):
    USER = "USER"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: Role | str) -> Role:
        """
        Coerce a role name (case-insensitive, surrounding blanks ignored)
        into a Role. Spring-style "ROLE_" prefixes are accepted.

        Raises:
            InvalidRoleError for anything outside the closed set.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            raise InvalidRoleError(f"Invalid role: {value!r}")

        name = value.strip().upper()
        name = name.removeprefix("ROLE_")
        try:
            return cls(name)
        except ValueError as exc:
            raise InvalidRoleError(f"Invalid role: {value!r}") from exc


class MatchKind(Enum):
    EXACT = "exact"
    PREFIX = "prefix"


class GateDecision(Enum):
    """Terminal state the authentication gate reached for a request."""
    PUBLIC_PASSTHROUGH = "public_passthrough"
    NO_CREDENTIALS = "no_credentials"
    REJECTED = "rejected"
    VALIDATED = "validated"
    ALREADY_AUTHENTICATED = "already_authenticated"


BEARER_PREFIX = "Bearer "
