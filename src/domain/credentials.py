"""
Credential hashing - bcrypt password digests.
"""

import base64
import hashlib
from dataclasses import dataclass, field

import bcrypt

from .exceptions import HashingError

DEFAULT_COST = 10


def _prehash(plaintext: str) -> bytes:
    """
    SHA-256 the password and base64 it before bcrypt.

    bcrypt only reads the first 72 bytes (newer releases reject longer
    input), so every password is reduced to a fixed 44-byte key first.
    base64 keeps NUL bytes out of the key.
    """
    return base64.b64encode(hashlib.sha256(plaintext.encode()).digest())


@dataclass
class CredentialHasher:
    """
    One-way salted password hashing using bcrypt.

    bcrypt.checkpw() compares in constant time, so verification cost does
    not depend on where a candidate password diverges from the original.
    """

    cost: int = DEFAULT_COST
    _dummy_hash: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Used when an account does not exist so login timing matches a real check
        self._dummy_hash = bcrypt.hashpw(
            _prehash("dummy_password_for_timing_safety"), bcrypt.gensalt(rounds=self.cost)
        )

    def hash(self, plaintext: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            HashingError: If the password is empty or bcrypt fails
        """
        if not plaintext:
            raise HashingError("Cannot hash an empty password")
        try:
            digest = bcrypt.hashpw(_prehash(plaintext), bcrypt.gensalt(rounds=self.cost))
        except (ValueError, OSError) as e:
            raise HashingError("Password hashing failed") from e
        return digest.decode()

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a candidate password against a stored digest.

        Returns False on mismatch.

        Raises:
            HashingError: If the digest is not a valid bcrypt hash
        """
        try:
            return bcrypt.checkpw(_prehash(plaintext), digest.encode())
        except ValueError as e:
            raise HashingError("Malformed password digest") from e

    def dummy_verify(self, plaintext: str) -> bool:
        """Run a full bcrypt check against a throwaway digest. Always False."""
        try:
            bcrypt.checkpw(_prehash(plaintext), self._dummy_hash)
        except ValueError as e:
            raise HashingError("Password verification failed") from e
        return False
