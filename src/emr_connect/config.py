"""
EMR Connect Configuration

Centralized configuration management using Pydantic Settings.
Supports environment variables and .env files.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from emr_connect.vendors import VendorTag


class EMRConnectSettings(BaseSettings):
    """Library settings."""

    model_config = SettingsConfigDict(
        env_prefix="EMR_CONNECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True
    redact_identifiers: bool = True

    # Vendor dispatch
    fallback_vendor: VendorTag = VendorTag.EPIC
    strict_vendor_resolution: bool = False


@lru_cache()
def get_settings() -> EMRConnectSettings:
    """
    Get cached settings instance.

    Returns:
        EMRConnectSettings: The library settings
    """
    return EMRConnectSettings()
