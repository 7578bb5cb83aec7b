"""Password storage and verification.

Callers never compare passwords themselves; they go through a
CredentialVerifier so the storage scheme can change without touching them.
"""

import logging
from typing import Protocol

import bcrypt

from config import CREDENTIAL_SCHEME

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12


class CredentialVerifier(Protocol):
    """Turns passwords into stored values and checks them back."""

    def encode(self, password: str) -> str:
        ...

    def verify(self, password: str, stored: str) -> bool:
        ...


class PlaintextCredentialVerifier:
    """Stores passwords as-is and compares by equality."""

    def encode(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return password == stored


class BcryptCredentialVerifier:
    """Stores bcrypt hashes of passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _to_bytes(password: str) -> bytes:
        # bcrypt only considers the first 72 bytes
        return password.encode("utf-8")[:72]

    def encode(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._to_bytes(password), salt).decode("utf-8")

    def verify(self, password: str, stored: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            password: Plain text password to verify.
            stored: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise. A stored value that is
            not a bcrypt hash never matches.
        """
        try:
            return bcrypt.checkpw(self._to_bytes(password), stored.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False


def create_credential_verifier(scheme: str = CREDENTIAL_SCHEME) -> CredentialVerifier:
    """Build the verifier for a configured scheme name.

    Raises:
        ValueError: If the scheme is unknown.
    """
    if scheme == "plaintext":
        return PlaintextCredentialVerifier()
    if scheme == "bcrypt":
        return BcryptCredentialVerifier()
    raise ValueError(f"Unknown credential scheme: {scheme}. Must be 'plaintext' or 'bcrypt'.")
