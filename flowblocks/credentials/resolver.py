"""Credential resolution seam between block executors and secret storage.

Executors depend on the :class:`CredentialResolver` protocol only, so tests
and alternative stores can stand in for the vault.
"""

from typing import Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from flowblocks.credentials.vault import CredentialVault
from flowblocks.exceptions import CredentialCorruption
from flowblocks.types import CredentialRecord

S = TypeVar("S", bound=BaseModel)


class Credential:
    """A resolved, still-encrypted credential."""

    def __init__(self, record: CredentialRecord, vault: CredentialVault) -> None:
        self.record = record
        self._vault = vault

    @property
    def id(self) -> str:
        return self.record.id

    def decrypt(self, schema: type[S]) -> S:
        """Decrypt and parse the secret fields against *schema*.

        Raises:
            CredentialCorruption: decryption failure or schema mismatch.
        """
        data = self._vault.decrypt(self.record)
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            raise CredentialCorruption(
                f"Credential '{self.record.id}' does not match {schema.__name__}: {exc.error_count()} error(s)",
                credential_id=self.record.id,
            ) from exc


@runtime_checkable
class CredentialResolver(Protocol):
    """Looks up a credential reference inside a workspace."""

    def resolve(self, credential_id: str, workspace_id: str) -> Optional[Credential]:
        """Return the credential, or None if it does not exist for the workspace."""
        ...


class VaultCredentialResolver:
    """:class:`CredentialResolver` backed by a :class:`CredentialVault`."""

    def __init__(self, vault: CredentialVault) -> None:
        self._vault = vault

    def resolve(self, credential_id: str, workspace_id: str) -> Optional[Credential]:
        record = self._vault.get_credentials(credential_id, workspace_id)
        if record is None:
            return None
        return Credential(record, self._vault)
