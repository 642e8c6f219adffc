"""Settings for podpeek.

Created: 2026-10-18

Values come from ``PODPEEK_*`` environment variables or a ``.env`` file in
the working directory. Use ``get_settings()`` everywhere; tests either pass
a ``Settings(...)`` instance explicitly or call ``get_settings.cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PODPEEK_",
        env_file=".env",
        extra="ignore",
    )

    # kubectl
    kubectl_path: str = Field(default="kubectl", description="kubectl binary to invoke")
    kubeconfig: str | None = Field(default=None, description="Passed as --kubeconfig")
    kube_context: str | None = Field(default=None, description="Passed as --context")

    # Downloads
    download_dir: Path = Field(
        default_factory=lambda: Path.home() / "Downloads",
        description="Local directory downloaded files are written to",
    )
    default_download_name: str = Field(
        default="download", description="File name used when a path has no last segment"
    )

    # Timeouts (seconds)
    load_timeout: float = Field(default=30.0, gt=0)
    copy_timeout: float = Field(default=300.0, gt=0)

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
