"""At-rest encryption for the saved Google token.

When `TOKEN_SECRET_KEY` is set the token file holds a Fernet token instead of
the authorized-user JSON, so a copied file does not leak the refresh token.

The Fernet key is stretched from the secret with PBKDF2-HMAC-SHA256
(480,000 iterations) using `ENCRYPTION_SALT`, which defaults to a value
derived from the secret itself.
"""

from __future__ import annotations

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from shift_sync.config import Settings

KDF_ITERATIONS = 480_000


class TokenCipher:
    """Encrypt and decrypt the token file contents.

    Example:
        ```python
        cipher = TokenCipher.from_settings(settings)
        if cipher is not None:
            content = cipher.encrypt(credentials.to_json())
        ```
    """

    def __init__(self, secret_key: str, salt: str):
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt.encode("utf-8"),
            iterations=KDF_ITERATIONS,
        )
        key = base64.urlsafe_b64encode(kdf.derive(secret_key.encode("utf-8")))
        self._fernet = Fernet(key)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenCipher | None:
        """Build the cipher for these settings, or None if encryption is off."""
        if not settings.token_encryption_enabled:
            return None
        return cls(settings.token_secret_key, settings.encryption_salt)

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return ""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a stored token.

        Raises:
            ValueError: If the data was not produced with this key and salt
        """
        if not ciphertext:
            return ""
        try:
            return self._fernet.decrypt(ciphertext.strip().encode("utf-8")).decode("utf-8")
        except InvalidToken as e:
            raise ValueError("Token file could not be decrypted with the configured key") from e
