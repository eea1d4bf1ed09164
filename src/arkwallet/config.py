"""Application configuration using pydantic-settings.

Settings are read from the environment (prefix ``ARKWALLET_``) or a local
``.env`` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARKWALLET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Wallet service
    # ======================
    wallet_api_url: str = Field(
        default="http://localhost:8080", description="Base URL of the wallet service"
    )
    request_timeout: float = Field(
        default=30.0, description="HTTP timeout in seconds (transport only)"
    )
    default_network: str = Field(
        default="offchain", description="Network used when none is given (offchain/onchain)"
    )

    # ======================
    # Risk heuristic
    # ======================
    consolidation_multiplier: int = Field(
        default=10,
        ge=1,
        description="Warn when the largest UTXO exceeds the required amount times this",
    )

    # ======================
    # Concurrency
    # ======================
    discard_stale_responses: bool = Field(
        default=False,
        description="Drop responses of superseded same-operation calls instead of last-write-wins",
    )

    # ======================
    # Dry-run backend
    # ======================
    simulator_host: str = Field(default="127.0.0.1", description="Dry-run backend host")
    simulator_port: int = Field(default=8080, description="Dry-run backend port")
    simulator_fee_rate: float = Field(
        default=2.0, description="Dry-run backend fee rate in sat/vbyte"
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict for diagnostics output."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "wallet_api_url": self.wallet_api_url,
            "request_timeout": self.request_timeout,
            "default_network": self.default_network,
            "risk": {
                "consolidation_multiplier": self.consolidation_multiplier,
            },
            "discard_stale_responses": self.discard_stale_responses,
            "simulator": {
                "host": self.simulator_host,
                "port": self.simulator_port,
                "fee_rate": self.simulator_fee_rate,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
