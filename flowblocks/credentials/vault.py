"""CredentialVault — workspace-scoped, encrypted secret storage.

Secrets are decrypted only when a block is about to call its external
service. Block options carry an opaque credential reference, never the
secret itself.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

from flowblocks.credentials.encryption import CredentialEncryption
from flowblocks.exceptions import CredentialCorruption, CredentialError, CredentialNotFound
from flowblocks.types import CredentialRecord, CredentialType

logger = logging.getLogger(__name__)

# Keys masked before block options or secrets are written to logs.
_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "Authorization",
    "authorization",
    "password",
    "token",
    "api_key",
    "access_token",
    "secret",
})


def sanitize_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *params* with sensitive values replaced by ``'***'``."""
    return {k: "***" if k in _SENSITIVE_KEYS else v for k, v in params.items()}


class CredentialVault:
    """In-process, encrypted credential store scoped to workspaces.

    Args:
        encryption: A configured :class:`CredentialEncryption` instance.
    """

    def __init__(self, encryption: CredentialEncryption) -> None:
        self._enc = encryption
        self._store: dict[str, CredentialRecord] = {}

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def store(
        self,
        *,
        workspace_id: str,
        name: str,
        credential_type: CredentialType,
        data: dict[str, Any],
        credential_id: Optional[str] = None,
    ) -> CredentialRecord:
        """Encrypt *data* and persist the credential record.

        Returns the stored record **without** ``data`` and ``iv`` so callers
        can safely log or return the metadata.

        Raises:
            CredentialError: if *data* is not a dict.
        """
        if not isinstance(data, dict):
            raise CredentialError("Credential data must be a plain dict")

        encrypted, iv = self._enc.encrypt(json.dumps(data))
        fields: dict[str, Any] = dict(
            workspace_id=workspace_id,
            name=name,
            credential_type=credential_type,
            data=encrypted,
            iv=iv,
        )
        if credential_id:
            fields["id"] = credential_id
        record = CredentialRecord(**fields)
        self._store[record.id] = record
        logger.debug("[Vault] Stored credential %s (%s) for workspace %s", record.id, credential_type.value, workspace_id)
        return record.model_copy(update={"data": "", "iv": ""})

    def get_credentials(self, credential_id: str, workspace_id: str) -> Optional[CredentialRecord]:
        """Return the encrypted record, or None for an unknown ID or workspace mismatch."""
        record = self._store.get(credential_id)
        if record is None or record.workspace_id != workspace_id:
            return None
        return record

    def decrypt(self, record: CredentialRecord) -> dict[str, Any]:
        """Decrypt a record's payload into its secret fields.

        Raises:
            CredentialCorruption: undecryptable payload or non-object JSON.
        """
        plaintext = self._enc.decrypt(record.data, record.iv)
        try:
            data = json.loads(plaintext)
        except json.JSONDecodeError as exc:
            raise CredentialCorruption(
                f"Credential '{record.id}' payload is not valid JSON",
                credential_id=record.id,
            ) from exc
        if not isinstance(data, dict):
            raise CredentialCorruption(
                f"Credential '{record.id}' payload is not an object",
                credential_id=record.id,
            )
        return data

    def retrieve(self, credential_id: str, workspace_id: str) -> dict[str, Any]:
        """Load and decrypt a credential.

        Raises:
            CredentialNotFound: unknown ID or workspace mismatch.
            CredentialCorruption: decryption failure.
        """
        record = self.get_credentials(credential_id, workspace_id)
        if record is None:
            raise CredentialNotFound(
                f"Credential '{credential_id}' not found",
                credential_id=credential_id,
            )
        return self.decrypt(record)

    def update(
        self,
        credential_id: str,
        workspace_id: str,
        data: dict[str, Any],
    ) -> CredentialRecord:
        """Re-encrypt and overwrite the credential data.

        Raises:
            CredentialNotFound: unknown ID or workspace mismatch.
        """
        record = self.get_credentials(credential_id, workspace_id)
        if record is None:
            raise CredentialNotFound(
                f"Credential '{credential_id}' not found",
                credential_id=credential_id,
            )

        encrypted, iv = self._enc.encrypt(json.dumps(data))
        updated = record.model_copy(update={"data": encrypted, "iv": iv, "updated_at": datetime.utcnow()})
        self._store[credential_id] = updated
        return updated.model_copy(update={"data": "", "iv": ""})

    def delete(self, credential_id: str, workspace_id: str) -> bool:
        """Remove a credential from the vault.

        Raises:
            CredentialNotFound: unknown ID or workspace mismatch.
        """
        if self.get_credentials(credential_id, workspace_id) is None:
            raise CredentialNotFound(
                f"Credential '{credential_id}' not found",
                credential_id=credential_id,
            )
        del self._store[credential_id]
        logger.debug("[Vault] Deleted credential %s for workspace %s", credential_id, workspace_id)
        return True

    def list(self, workspace_id: str) -> list[CredentialRecord]:
        """Return metadata for all credentials belonging to *workspace_id*."""
        return [
            r.model_copy(update={"data": "", "iv": ""})
            for r in self._store.values()
            if r.workspace_id == workspace_id
        ]
