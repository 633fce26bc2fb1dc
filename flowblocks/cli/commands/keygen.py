"""flowblocks keygen — Generate a credential encryption key."""

from rich.console import Console

console = Console()


def keygen():
    """Print a new AES-256 key for FLOWBLOCKS_CREDENTIAL_ENCRYPTION_KEY.

    Example:
        flowblocks keygen >> .env
    """
    from flowblocks.credentials.encryption import CredentialEncryption

    console.print(CredentialEncryption.generate_key(), highlight=False, soft_wrap=True)
