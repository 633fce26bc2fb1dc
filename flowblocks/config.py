"""Application configuration. All env vars defined here with defaults."""

from pydantic_settings import BaseSettings
from typing import Optional


class FlowblocksConfig(BaseSettings):
    # ── App ──
    app_name: str = "flowblocks"
    log_level: str = "INFO"

    # ── Credentials ──
    credential_encryption_key: Optional[str] = None   # base64 AES-256 key; ephemeral if unset

    # ── HTTP ──
    http_timeout_seconds: float = 30.0

    # ── Integrations ──
    hinova_base_url: str = "https://api.hinova.com.br/api/sga/v2"

    model_config = {"env_prefix": "FLOWBLOCKS_", "env_file": ".env", "extra": "ignore"}


config = FlowblocksConfig()
