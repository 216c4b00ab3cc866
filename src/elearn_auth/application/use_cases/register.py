from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.constants import Role
from ...domain.entities import UserAccount
from ...domain.exceptions import (
    EmailTakenError,
    InvalidRoleError,
    RegistrationError,
    UsernameTakenError,
)
from ...domain.ports import PasswordHasher, UserRegistry
from ...domain.value_objects import EmailAddress

logger = logging.getLogger(__name__)

# Roles a visitor may ask for on signup. Instructors are promoted through the
# application workflow, admins are provisioned out of band.
SELF_SERVICE_ROLES = frozenset({Role.USER})


@dataclass(frozen=True, slots=True)
class SignupRequest:
    name: str
    email: str
    username: str
    password: str
    role: Optional[str] = None


@dataclass(slots=True)
class RegisterUserUseCase:
    """
    Application use case:
    - Check the username and email are free
    - Validate the request fields
    - Store the account with a hashed password and the USER role
    """

    registry: UserRegistry
    password_hasher: PasswordHasher

    def execute(self, request: SignupRequest) -> UserAccount:
        """
        Raises:
            UsernameTakenError / EmailTakenError
            RegistrationError for blank fields, a bad email or a refused role
        """
        if request.username and self.registry.username_exists(request.username):
            raise UsernameTakenError()
        if request.email and self.registry.email_exists(request.email):
            raise EmailTakenError()

        for label, value in (
            ("Name", request.name),
            ("Username", request.username),
            ("Password", request.password),
            ("Email", request.email),
        ):
            if value is None or not value.strip():
                raise RegistrationError(f"{label} cannot be empty")

        try:
            email = EmailAddress(request.email.strip())
        except ValueError as exc:
            raise RegistrationError("Invalid email format") from exc

        role = self._resolve_role(request.role)

        account = UserAccount(
            name=request.name.strip(),
            email=email,
            username=request.username,
            password_hash=self.password_hasher.hash(request.password),
            role=role,
        )
        self.registry.add(account)
        logger.info("Registered user: %s", account.username)
        return account

    @staticmethod
    def _resolve_role(requested: Optional[str]) -> Role:
        if requested is None or not requested.strip():
            return Role.USER
        try:
            role = Role.parse(requested)
        except InvalidRoleError as exc:
            raise RegistrationError(f"Invalid role: {requested!r}") from exc
        if role not in SELF_SERVICE_ROLES:
            raise RegistrationError(
                f"{role.value} registration is not allowed via this endpoint"
            )
        return role


@dataclass(slots=True)
class CheckAvailabilityUseCase:
    registry: UserRegistry

    def username_available(self, username: str) -> bool:
        return not self.registry.username_exists(username)

    def email_available(self, email: str) -> bool:
        return not self.registry.email_exists(email)
