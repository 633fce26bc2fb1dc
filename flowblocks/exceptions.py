"""Typed exception hierarchy. Every error flowblocks can raise."""


class FlowblocksError(Exception):
    """Base exception for all flowblocks errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(FlowblocksError):
    """A block or executor is wired up incorrectly."""
    pass


class BlockNotSupported(FlowblocksError):
    """No executor is registered for the requested block type."""
    def __init__(self, message: str, block_type: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.block_type = block_type


class CredentialError(FlowblocksError):
    """Credential retrieval or decryption failed."""
    def __init__(self, message: str, credential_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.credential_id = credential_id


class CredentialNotFound(CredentialError):
    """Credential ID not found or does not belong to this workspace."""
    pass


class CredentialCorruption(CredentialError):
    """Stored secret could not be decrypted or does not match its schema.

    Never caught by block executors: it signals a storage-layer problem.
    """
    pass


class UpstreamError(FlowblocksError):
    """An external API answered with an unusable payload."""
    def __init__(self, message: str, url: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.url = url
