"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMATS = ("json", "console")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TAX_ESTIMATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # Tax data
    federal_brackets_path: Path | None = None
    """Federal bracket schedule (JSON or YAML). Defaults to the bundled 2022 schedule."""

    @field_validator("log_format", mode="before")
    @classmethod
    def parse_log_format(cls, value: object) -> str | None:
        """Normalize the log format and reject unknown renderers."""
        if value is None:
            return None
        text = str(value).strip().lower()
        if not text:
            return None
        if text not in LOG_FORMATS:
            raise ValueError(
                f"TAX_ESTIMATOR_LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {value!r}"
            )
        return text

    @field_validator("federal_brackets_path", mode="before")
    @classmethod
    def parse_federal_brackets_path(cls, value: object) -> object:
        """Treat an empty path as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    suggestions = [
        "Allowed values for TAX_ESTIMATOR_LOG_FORMAT are: json, console.",
        "TAX_ESTIMATOR_FEDERAL_BRACKETS_PATH must be a file path.",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {exc}\n"
        + "\n".join(suggestions)
    ) from exc
