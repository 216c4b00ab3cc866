# src/elearn_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .constants import MatchKind, Role


# --- Identity value objects ----------------------------------------------


@dataclass(frozen=True, slots=True)
class EmailAddress:
    """
    Simple email value object.

    Validation is kept light on purpose to avoid being too strict.
    """
    value: str

    def __post_init__(self) -> None:
        if "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value!r}")

    def __str__(self) -> str:
        return self.value


# --- Routing value objects -----------------------------------------------


@dataclass(frozen=True, slots=True)
class RouteRule:
    """
    One public-route rule.

    - EXACT:  the request path must equal `path`
    - PREFIX: the request path must start with `path`
    """
    path: str
    match_kind: MatchKind = MatchKind.EXACT

    def matches(self, request_path: str) -> bool:
        if self.match_kind is MatchKind.EXACT:
            return request_path == self.path
        return request_path.startswith(self.path)

    @classmethod
    def exact(cls, path: str) -> RouteRule:
        return cls(path, MatchKind.EXACT)

    @classmethod
    def prefix(cls, path: str) -> RouteRule:
        return cls(path, MatchKind.PREFIX)

    @classmethod
    def parse(cls, text: str) -> RouteRule:
        """
        Parse the compact config form: "/courses" is exact,
        "/swagger-ui/*" is a prefix rule for "/swagger-ui/".
        """
        text = text.strip()
        if text.endswith("*"):
            return cls.prefix(text[:-1])
        return cls.exact(text)

    def __str__(self) -> str:
        if self.match_kind is MatchKind.PREFIX:
            return f"{self.path}*"
        return self.path


# --- Access value objects ------------------------------------------------


def _normalize(values: Iterable[Role | str]) -> Tuple[Role, ...]:
    """
    Normalize an iterable of roles into a tuple of Role members.
    If a plain string is passed, treat it as a single role.
    """
    if isinstance(values, str):
        values = (values,)
    return tuple(Role.parse(v) for v in values)


@dataclass(frozen=True, slots=True)
class RoleRequirement:
    """
    Declarative description of a role check: the principal's role must be
    one of `any_of`.
    """

    any_of: Tuple[Role, ...] = ()

    def __init__(self, any_of: Iterable[Role | str] | None = None) -> None:
        object.__setattr__(self, "any_of", _normalize(any_of or ()))

    def is_satisfied_by(self, role: Role) -> bool:
        return role in self.any_of


def require_roles(*roles: Role | str) -> RoleRequirement:
    return RoleRequirement(any_of=roles)
