"""Google authorization for the calendar client.

This module provides:
- The installed-app OAuth consent flow
- Loading, refreshing and saving the authorized-user token
- Optional encryption of the token at rest
"""

from shift_sync.auth.google import CredentialError, GoogleCredentialProvider
from shift_sync.auth.encryption import TokenCipher

__all__ = [
    "GoogleCredentialProvider",
    "CredentialError",
    "TokenCipher",
]
