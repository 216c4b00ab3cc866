from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ...domain.clock import utc_now
from ...domain.entities import IssuedToken
from ...domain.exceptions import InvalidCredentialsError
from ...domain.ports import CredentialStore, PasswordHasher, TokenCodec

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoginUseCase:
    """
    Application use case:
    - Look up the stored credential by username
    - Verify the password with the PasswordHasher port
    - Issue a token whose role comes from the stored credential

    Unknown usernames and wrong passwords fail identically: same exception,
    same message, and a throwaway hash verification so both paths do the
    same amount of work.
    """

    credential_store: CredentialStore
    password_hasher: PasswordHasher
    token_codec: TokenCodec
    clock: Callable[[], datetime] = field(default=utc_now)
    _dummy_hash: Optional[str] = field(default=None, init=False, repr=False)

    def execute(self, username: str, password: str) -> IssuedToken:
        """
        Raises:
            InvalidCredentialsError
        """
        credential = self.credential_store.find_by_username(username) if username else None

        if credential is None:
            self.password_hasher.verify(password or "", self._get_dummy_hash())
            logger.warning("Login failed for username: %s", username)
            raise InvalidCredentialsError()

        if not self.password_hasher.verify(password or "", credential.password_hash):
            logger.warning("Login failed for username: %s", username)
            raise InvalidCredentialsError()

        issued = self.token_codec.issue(credential.username, credential.role, self.clock())
        logger.info("Issued token for user: %s with role: %s",
                    credential.username, credential.role.value)
        return issued

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.password_hasher.hash("not-a-real-password")
        return self._dummy_hash
