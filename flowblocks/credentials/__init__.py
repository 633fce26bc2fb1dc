"""Credential Vault — encrypted, workspace-scoped secret storage."""

from flowblocks.credentials.encryption import CredentialEncryption
from flowblocks.credentials.vault import CredentialVault
from flowblocks.credentials.resolver import Credential, CredentialResolver, VaultCredentialResolver

__all__ = [
    "CredentialEncryption", "CredentialVault",
    "Credential", "CredentialResolver", "VaultCredentialResolver",
]
