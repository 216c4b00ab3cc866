from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .constants import Role
from .entities import Credential, IssuedToken, TokenClaims, UserAccount


class TokenCodec(Protocol):
    """
    Port for issuing and decoding signed tokens.

    Implementations live in the adapters layer (e.g. the PyJWT codec).
    """

    def issue(self, subject: str, role: Role | str, now: datetime) -> IssuedToken:
        """
        Sign a token for `subject` with `role`, expiring one TTL after `now`.

        Raises:
          - InvalidRoleError for roles outside the closed set
          - ValueError for a blank subject
        """
        ...

    def decode(self, token: str) -> TokenClaims:
        """
        Verify structure and signature and return the claims.

        Should NOT check expiry.
        Raises:
          - InvalidTokenError
        """
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """Return False on mismatch or on an unusable stored hash."""
        ...

    def needs_rehash(self, password_hash: str) -> bool:
        ...


class CredentialStore(Protocol):
    """
    Read side of the user store, consumed by the login flow.
    """

    def find_by_username(self, username: str) -> Optional[Credential]:
        ...


class UserRegistry(Protocol):
    """
    Write side of the user store, consumed by signup and availability checks.
    """

    def username_exists(self, username: str) -> bool:
        ...

    def email_exists(self, email: str) -> bool:
        ...

    def add(self, account: UserAccount) -> None:
        """
        Persist a new account.

        Raises:
          - UsernameTakenError / EmailTakenError on a uniqueness race
        """
        ...
