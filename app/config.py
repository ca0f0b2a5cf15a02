"""Application configuration and settings."""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.constants import SUPPORTED_NETWORKS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "TxLens"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = Field(default=8080, description="Server port")
    log_level: str = "INFO"

    # Data sources
    data_source: Literal["static", "live"] = Field(
        default="static",
        description="'static' serves fixture data, 'live' queries RPC nodes and Blockchair",
    )
    rpc_urls: dict[str, str] = Field(
        default_factory=dict,
        description='JSON object mapping network to RPC URL, e.g. {"ethereum-mainnet": "https://..."}',
    )
    rpc_timeout_seconds: float = 15.0

    # Blockchair API (bitcoin-mainnet in live mode)
    blockchair_api_key: SecretStr = Field(default=SecretStr(""))
    blockchair_base_url: str = "https://api.blockchair.com"
    blockchair_timeout_seconds: float = 30.0

    # CORS Configuration
    allowed_origins: str = Field(
        default="",
        description="Comma-separated list of allowed origins for CORS",
    )

    @field_validator("rpc_urls")
    @classmethod
    def check_rpc_networks(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject RPC URLs for networks the service cannot describe."""
        unknown = sorted(set(v) - set(SUPPORTED_NETWORKS))
        if unknown:
            raise ValueError(f"RPC URLs configured for unknown networks: {unknown}")
        return {network: url.strip() for network, url in v.items() if url.strip()}

    @field_validator("port")
    @classmethod
    def set_port(cls, v: int) -> int:
        """Use PORT from the hosting platform if available."""
        return int(os.getenv("PORT", v))


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
