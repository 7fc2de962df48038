"""
Password hashing for staff accounts.

Hashes are PBKDF2-HMAC-SHA256 with a random per-password salt, stored as
`pbkdf2_sha256$<iterations>$<salt>$<hash>` (salt and hash urlsafe base64).
"""

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
import base64
import os

from shared.constants import PASSWORD_HASH_SCHEME, PBKDF2_ITERATIONS, PBKDF2_SALT_BYTES


class PasswordHasher:
    """Hash and verify passwords."""

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self.iterations = iterations

    @staticmethod
    def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )

    def hash(self, password: str) -> str:
        """
        Derive a storable hash from a plaintext password.

        Args:
            password: User password

        Returns:
            Encoded hash string including scheme, iterations and salt
        """
        salt = os.urandom(PBKDF2_SALT_BYTES)
        derived = self._kdf(salt, self.iterations).derive(password.encode())
        return "$".join([
            PASSWORD_HASH_SCHEME,
            str(self.iterations),
            base64.urlsafe_b64encode(salt).decode(),
            base64.urlsafe_b64encode(derived).decode(),
        ])

    def verify(self, password: str, encoded: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Returns:
            True on match; False on mismatch or a malformed stored hash
        """
        try:
            scheme, iterations, salt_b64, hash_b64 = encoded.split("$")
            if scheme != PASSWORD_HASH_SCHEME:
                return False
            salt = base64.urlsafe_b64decode(salt_b64.encode())
            expected = base64.urlsafe_b64decode(hash_b64.encode())
            kdf = self._kdf(salt, int(iterations))
        except (AttributeError, ValueError):
            return False

        try:
            kdf.verify(password.encode(), expected)
            return True
        except InvalidKey:
            return False
