from __future__ import annotations

import bcrypt

from ...domain.ports import PasswordHasher

DEFAULT_ROUNDS = 12

# Hashes written by the legacy delegating encoder carry this id prefix.
LEGACY_PREFIX = "{bcrypt}"


def _strip_legacy_prefix(password_hash: str) -> str:
    return password_hash.removeprefix(LEGACY_PREFIX)


def _hash_rounds(password_hash: str) -> int | None:
    # $2b$12$<53 chars>
    parts = _strip_legacy_prefix(password_hash).split("$")
    if len(parts) < 4:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


class BcryptPasswordHasher(PasswordHasher):
    """
    One-way password hashing with bcrypt.

    Passwords longer than bcrypt's 72-byte input limit are truncated the same
    way on hash and verify, so they keep round-tripping.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    @staticmethod
    def _secret(password: str) -> bytes:
        return password.encode("utf-8")[:72]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Returns:
            str: bcrypt hash (no legacy prefix)
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._secret(password), salt).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against a stored hash, with or without the
        legacy `{bcrypt}` prefix. Unusable hashes verify as False.
        """
        if not password_hash:
            return False
        try:
            stored = _strip_legacy_prefix(password_hash).encode("ascii")
            return bcrypt.checkpw(self._secret(password), stored)
        except (ValueError, UnicodeEncodeError):
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """
        True when the stored hash uses the legacy prefix or a different cost
        than the one configured.
        """
        if password_hash.startswith(LEGACY_PREFIX):
            return True
        return _hash_rounds(password_hash) != self._rounds
