from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ...domain.entities import Principal
from ...domain.exceptions import AuthenticationError, AuthorizationError
from ...domain.value_objects import RoleRequirement


@dataclass(slots=True)
class AuthorizeRoleUseCase:
    """
    Application use case for role-based authorization using declarative
    RoleRequirement objects.

    Takes:
      - the request's principal (None for anonymous requests)
      - an iterable of RoleRequirement objects

    and raises if any requirement is not satisfied. This is where the
    gate's "no principal" outcome becomes a client-visible rejection.
    """

    def execute(
            self,
            principal: Optional[Principal],
            requirements: Iterable[RoleRequirement],
    ) -> Principal:
        """
        Raises:
            AuthenticationError if there is no principal.
            AuthorizationError if a requirement is not satisfied.

        Returns:
            The same Principal if authorization succeeds (for chaining).
        """
        if principal is None:
            raise AuthenticationError("Not authenticated")

        for requirement in requirements:
            if not requirement.is_satisfied_by(principal.role):
                allowed = ", ".join(r.value for r in requirement.any_of)
                raise AuthorizationError(f"Requires one of roles: {allowed}")

        return principal
