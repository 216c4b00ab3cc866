from __future__ import annotations

import threading
from typing import Dict, Iterable, Optional

from ...domain.entities import Credential, UserAccount
from ...domain.exceptions import EmailTakenError, UsernameTakenError
from ...domain.ports import CredentialStore, UserRegistry


class InMemoryUserStore(CredentialStore, UserRegistry):
    """
    Process-local user store implementing both the credential lookup used
    by login and the registry used by signup.

    Suitable for tests, demos and single-process deployments. Usernames are
    case-sensitive; emails are compared case-insensitively.
    """

    def __init__(self, accounts: Iterable[UserAccount] = ()) -> None:
        self._lock = threading.Lock()
        self._by_username: Dict[str, UserAccount] = {}
        self._emails: Dict[str, str] = {}
        for account in accounts:
            self.add(account)

    @staticmethod
    def _email_key(email: str) -> str:
        return email.strip().lower()

    # --- CredentialStore ----------------------------------------------------

    def find_by_username(self, username: str) -> Optional[Credential]:
        account = self._by_username.get(username)
        return account.credential if account else None

    # --- UserRegistry -------------------------------------------------------

    def username_exists(self, username: str) -> bool:
        return username in self._by_username

    def email_exists(self, email: str) -> bool:
        return self._email_key(email) in self._emails

    def add(self, account: UserAccount) -> None:
        email_key = self._email_key(str(account.email))
        with self._lock:
            if account.username in self._by_username:
                raise UsernameTakenError()
            if email_key in self._emails:
                raise EmailTakenError()
            self._by_username[account.username] = account
            self._emails[email_key] = account.username

    # --- helpers ------------------------------------------------------------

    def get_account(self, username: str) -> Optional[UserAccount]:
        return self._by_username.get(username)

    def __len__(self) -> int:
        return len(self._by_username)
