"""
Credential hashing for player accounts.

Secrets and security answers are stored only as salted one-way hashes.
Verification compares in constant time and only ever reports whether the
candidate matched.
"""
from typing import Optional

from werkzeug.security import generate_password_hash, check_password_hash

DEFAULT_HASH_METHOD = "scrypt"


class CredentialService:
    """
    Hash and verify login secrets and security answers.

    Attributes:
        method: werkzeug hashing method used for new hashes; existing hashes
            verify regardless of the method they were made with
    """

    def __init__(self, method: str = DEFAULT_HASH_METHOD):
        self.method = method

    def hash_secret(self, secret: str) -> str:
        """
        Hash a login secret.

        Args:
            secret: Plain-text secret chosen by the user

        Returns:
            Salted hash suitable for storing on the player

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("Secret must not be empty")
        return generate_password_hash(secret, method=self.method)

    @staticmethod
    def verify_secret(stored_hash: Optional[str], candidate: str) -> bool:
        """Check a candidate secret against a stored hash."""
        if not stored_hash or not candidate:
            return False
        return check_password_hash(stored_hash, candidate)

    @staticmethod
    def _normalize_answer(answer: str) -> str:
        return (answer or "").strip().lower()

    def hash_answer(self, answer: str) -> str:
        """Hash a security answer; answers compare case-insensitively."""
        normalized = self._normalize_answer(answer)
        if not normalized:
            raise ValueError("Security answer must not be empty")
        return generate_password_hash(normalized, method=self.method)

    @classmethod
    def verify_answer(cls, stored_hash: Optional[str], candidate: str) -> bool:
        """Check a security answer against a stored hash."""
        normalized = cls._normalize_answer(candidate)
        if not stored_hash or not normalized:
            return False
        return check_password_hash(stored_hash, normalized)
