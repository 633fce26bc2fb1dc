"""AES-256-GCM encryption for credential data at rest."""

import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from flowblocks.exceptions import CredentialCorruption, CredentialError

logger = logging.getLogger(__name__)

_IV_BYTES = 12


class CredentialEncryption:
    """Symmetric encryption wrapper using AES-256-GCM.

    Every ``encrypt`` call draws a fresh 96-bit IV, returned beside the
    ciphertext; both are needed to decrypt. GCM authenticates the payload,
    so any tampering surfaces as :class:`CredentialCorruption`.

    If no key is supplied an ephemeral key is generated and a WARNING is
    logged: data encrypted with it is unrecoverable after restart. Pass
    ``FLOWBLOCKS_CREDENTIAL_ENCRYPTION_KEY`` (URL-safe base64 of 32 bytes) in
    production.
    """

    def __init__(self, key: str = "") -> None:
        if not key:
            self._aead = AESGCM(AESGCM.generate_key(bit_length=256))
            logger.warning(
                "CredentialEncryption: no encryption key provided, generated an ephemeral key. "
                "Credentials will be unrecoverable after process restart. "
                "Set FLOWBLOCKS_CREDENTIAL_ENCRYPTION_KEY to a persistent key."
            )
        else:
            try:
                raw = base64.urlsafe_b64decode(key.encode())
                self._aead = AESGCM(raw)
            except (binascii.Error, ValueError) as exc:
                raise CredentialError(f"Invalid encryption key: {exc}") from exc
            if len(raw) != 32:
                raise CredentialError(f"Invalid encryption key: expected 32 bytes, got {len(raw)}")

    @staticmethod
    def generate_key() -> str:
        """Return a new URL-safe base64 AES-256 key."""
        return base64.urlsafe_b64encode(AESGCM.generate_key(bit_length=256)).decode()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: str) -> tuple[str, str]:
        """Encrypt *plaintext*. Returns ``(data, iv)``, both base64 strings."""
        iv = os.urandom(_IV_BYTES)
        ciphertext = self._aead.encrypt(iv, plaintext.encode(), None)
        return base64.b64encode(ciphertext).decode(), base64.b64encode(iv).decode()

    def decrypt(self, data: str, iv: str) -> str:
        """Decrypt *data* with its *iv* and return the original plaintext.

        Raises:
            CredentialCorruption: if the payload is malformed or tampered with.
        """
        try:
            ciphertext = base64.b64decode(data.encode(), validate=True)
            nonce = base64.b64decode(iv.encode(), validate=True)
            return self._aead.decrypt(nonce, ciphertext, None).decode()
        except (InvalidTag, binascii.Error, ValueError) as exc:
            raise CredentialCorruption("Decryption failed: invalid or tampered payload") from exc
