"""
PDF Service Configuration.

Environment-driven settings for the PDF rendering microservice. Settings are
loaded once at startup; the allow-list policy derived from them is built once
and handed to the request pipeline.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .services.allow_list import AllowListPolicy

DEFAULT_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--single-process",
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-extensions",
    "--disable-sync",
    "--hide-scrollbars",
    "--mute-audio",
]


class Settings(BaseSettings):
    # =========================================================================
    # API SETTINGS
    # =========================================================================
    api_title: str = "Printer PDF Service API"
    api_version: str = "1.0.0"
    service_name: str = Field(default="pdf-service", description="Name reported by /health")
    debug: bool = Field(default=False, description="Enable verbose logging")
    log_level: str = Field(default="INFO", description="Logging level")

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3002,
        validation_alias="PDF_SERVICE_PORT",
        description="Server port",
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed origins for CORS",
    )
    cors_credentials: bool = False
    cors_methods: List[str] = ["GET"]
    cors_headers: List[str] = ["*"]

    # =========================================================================
    # TARGET POLICY
    # =========================================================================
    allowed_domains: str = Field(
        default="",
        description="Comma-separated allowed domains (subdomains included), or '*' for any host",
    )
    pdf_target_base_url: Optional[str] = Field(
        default=None,
        description="Base URL used when a relative path is requested",
    )

    # =========================================================================
    # BROWSER SETTINGS
    # =========================================================================
    browser_headless: bool = Field(default=True, description="Run Chromium in headless mode")
    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS),
        description="Extra Chromium command-line flags",
    )
    blocked_resource_types: List[str] = Field(
        default=["image", "media", "font"],
        description="Request resource types aborted while rendering",
    )
    settle_delay_ms: int = Field(
        default=750,
        description="Pause after navigation before the PDF is captured",
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True

    def allow_list_policy(self) -> AllowListPolicy:
        """
        Build the host allow-list policy from ``allowed_domains``.

        Raises:
            AllowListNotConfigured: If the value is neither '*' nor a non-empty domain list
        """
        return AllowListPolicy.from_string(self.allowed_domains)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
