"""Application settings with environment variable support."""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROVIDER_NAMES = ["threatfox", "urlhaus", "malwarebazaar", "feodo"]


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All settings can be overridden via ``CAMPAIGN_CORRELATOR_*`` environment
    variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMPAIGN_CORRELATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider endpoints
    threatfox_url: str = Field(
        default="https://threatfox-api.abuse.ch/api/v1/",
        description="ThreatFox API endpoint",
    )
    urlhaus_url: str = Field(
        default="https://urlhaus-api.abuse.ch/v1/url/",
        description="URLhaus URL lookup endpoint",
    )
    malwarebazaar_url: str = Field(
        default="https://mb-api.abuse.ch/api/v1/",
        description="MalwareBazaar API endpoint",
    )
    feodo_url: str = Field(
        default="https://feodotracker.abuse.ch/downloads/ipblocklist_recommended.json",
        description="Feodo Tracker recommended C2 blocklist",
    )
    abusech_auth_key: Optional[str] = Field(
        default=None,
        description="abuse.ch Auth-Key sent with provider requests",
    )
    enabled_providers: List[str] = Field(
        default_factory=lambda: list(PROVIDER_NAMES),
        description="Providers queried during signal gathering",
    )
    malwarebazaar_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum MalwareBazaar samples per query",
    )

    # Gathering
    request_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Per-request HTTP timeout in seconds",
    )
    gather_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Overall deadline for the gathering phase in seconds",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        description="Worker threads used to query providers concurrently",
    )

    # Knowledge base
    knowledge_base_file: Optional[str] = Field(
        default=None,
        description="Custom malware family knowledge base YAML file",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Enable JSON formatted logging",
    )

    @field_validator("enabled_providers")
    @classmethod
    def validate_providers(cls, v: List[str]) -> List[str]:
        """Validate provider names."""
        normalized = [name.strip().lower() for name in v if name.strip()]
        unknown = [name for name in normalized if name not in PROVIDER_NAMES]
        if unknown:
            raise ValueError(f"Unknown providers: {unknown}. Must be among {PROVIDER_NAMES}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @property
    def auth_headers(self) -> dict:
        """Headers carrying the abuse.ch Auth-Key, if configured."""
        if self.abusech_auth_key:
            return {"Auth-Key": self.abusech_auth_key}
        return {}


# Global settings instance (can be overridden)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings instance.

    Returns:
        Settings instance (singleton pattern)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
