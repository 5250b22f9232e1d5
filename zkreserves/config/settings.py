"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# BN254 scalar field order
BN254_SCALAR_FIELD = 21888242871839275222246405745257275088548364400416034343698204186575808495617


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RegistryMode(str, Enum):
    """Proof registry operation mode."""

    MOCK = "mock"
    TESTNET = "testnet"
    MAINNET = "mainnet"


class HashSettings(BaseSettings):
    """
    Field hash configuration.

    Every producer and verifier must agree on these values; a different
    modulus yields different leaves, roots and commitments.
    """

    model_config = SettingsConfigDict(env_prefix="HASH_")

    algorithm: str = "sha256"
    modulus: int = BN254_SCALAR_FIELD

    @field_validator("modulus")
    @classmethod
    def modulus_must_be_large(cls, v: int) -> int:
        """Reject moduli too small to hold a 64-bit amount."""
        if v <= 2**64:
            raise ValueError("Hash modulus must exceed 2**64")
        return v


class RegistrySettings(BaseSettings):
    """Proof registry configuration."""

    model_config = SettingsConfigDict(env_prefix="REGISTRY_")

    mode: RegistryMode = RegistryMode.MOCK

    # Read only by an on-chain client; the mock registry ignores them and
    # testnet/mainnet modes are rejected until such a client exists.
    rpc_url: str = Field(
        default="https://api.cartridge.gg/x/starknet/sepolia",
        description="JSON-RPC endpoint of the registry network (on-chain modes only)",
    )
    contract_address: str = Field(
        default="0x0",
        description="Deployed registry contract address (on-chain modes only)",
    )

    # Matches the registry contract's proof TTL (28 days)
    proof_ttl_seconds: int = Field(default=28 * 24 * 3600, ge=1)


class ProverSettings(BaseSettings):
    """External proving toolchain configuration."""

    model_config = SettingsConfigDict(env_prefix="PROVER_")

    api_url: str = "http://127.0.0.1:8080"
    timeout_seconds: float = 120.0
    max_retries: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=2.0, ge=0)


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class ServicePorts(BaseSettings):
    """Service port configuration."""

    verification: int = Field(default=8004, alias="VERIFICATION_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    # Service ports
    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Commitment hashing
    hash: HashSettings = Field(default_factory=HashSettings)

    # Collaborators
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    prover: ProverSettings = Field(default_factory=ProverSettings)

    # Security
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
