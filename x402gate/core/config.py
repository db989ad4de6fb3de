"""
Application configuration.
All settings are loaded from environment variables (or .env).
Constructed once at startup by create_app(); invalid values fail fast.
"""
import re
from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


CRONOS_MAINNET = "cronos-mainnet"
CRONOS_TESTNET = "cronos-testnet"

# Stablecoin contracts accepted by the Cronos x402 facilitator
USDCE_MAINNET = "0xf951eC28187D9E5Ca673Da8FE6757E6f0Be5F77C"
DEV_USDCE_TESTNET = "0xc01efAaF7C5C61bEbFAeb358E1161b537b8bC0e0"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    IMPORTANT: merchant_address has no default - it MUST be set.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # CORS: comma-separated origins. Empty = default list in main.py.
    cors_origins: str = ""

    # ===========================================
    # X402 PAYWALL
    # ===========================================
    network: str = CRONOS_TESTNET  # cronos-testnet, cronos-mainnet
    merchant_address: str  # Required, no default
    asset: str = ""  # Empty = USDC.e contract for the selected network
    price_base_units: str = "1000000"
    public_resource_url: str = "http://localhost:8787/api/secret"
    resource_description: str = "Unlock /api/data"
    max_timeout_seconds: int = 300
    resource_mime_type: str = "application/json"

    # ===========================================
    # SERVER
    # ===========================================
    host: str = "0.0.0.0"
    port: int = 8787
    # >1 only makes sense with a shared entitlement backend (redis/sql)
    uvicorn_workers: int = 1

    # ===========================================
    # FACILITATOR
    # ===========================================
    facilitator_url: str = "https://facilitator.cronoslabs.org/v2/x402"
    facilitator_timeout: float = 30.0

    # ===========================================
    # ENTITLEMENT STORE
    # ===========================================
    entitlement_backend: Literal["memory", "redis", "sql"] = "memory"
    redis_url: str | None = None
    database_url: str | None = None

    # ===========================================
    # CIRCUIT BREAKER
    # ===========================================
    cb_failure_threshold: int = 5
    cb_open_seconds: int = 30

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    request_id_header: str = "X-Request-Id"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("merchant_address")
    @classmethod
    def validate_merchant_address(cls, v: str) -> str:
        """Payee must be a 20-byte hex address."""
        v = v.strip()
        if not v:
            raise ValueError("merchant_address is required")
        if not _ADDRESS_RE.match(v):
            raise ValueError("merchant_address must be a 0x-prefixed 40 hex char address")
        return v

    @field_validator("price_base_units")
    @classmethod
    def validate_price(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit() or int(v) <= 0:
            raise ValueError("price_base_units must be a positive integer string")
        return v

    @field_validator("max_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_timeout_seconds must be positive")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_backend_urls(self) -> "Settings":
        """Selected entitlement backend must have its connection URL."""
        if self.entitlement_backend == "redis" and not self.redis_url:
            raise ValueError("redis_url is required when entitlement_backend=redis")
        if self.entitlement_backend == "sql" and not self.database_url:
            raise ValueError("database_url is required when entitlement_backend=sql")
        return self

    @property
    def resolved_asset(self) -> str:
        """Asset contract: explicit ASSET or USDC.e for the network."""
        if self.asset.strip():
            return self.asset.strip()
        if self.network == CRONOS_MAINNET:
            return USDCE_MAINNET
        return DEV_USDCE_TESTNET

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Settings singleton for the running process."""
    return Settings()
