"""
Configuration for the transcript summarizer.

Provides environment-based configuration with Pydantic settings. The API
credential is required; every other value has a default.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tldr.errors import ConfigurationError
from tldr.summarization.providers import SamplingParams

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_LOG_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class Settings(BaseSettings):
    """Settings for tokenization, completion and artifact storage."""

    # Completion backend
    openai_api_key: SecretStr = Field(
        validation_alias=AliasChoices("OPENAI_API_KEY", "TLDR_OPENAI_API_KEY"),
    )
    openai_api_base: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_API_BASE", "TLDR_OPENAI_API_BASE"),
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("TLDR_MODEL", "OPENAI_MODEL"),
    )
    request_timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices("TLDR_REQUEST_TIMEOUT"),
    )
    max_concurrency: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("TLDR_MAX_CONCURRENCY"),
        description="Upper bound on in-flight batch calls; unset means unbounded",
    )

    # Sampling
    temperature: float = Field(
        default=0.7,
        validation_alias=AliasChoices("TLDR_TEMPERATURE"),
    )
    top_p: float = Field(
        default=0.9,
        validation_alias=AliasChoices("TLDR_TOP_P"),
    )
    frequency_penalty: float = Field(
        default=0.5,
        validation_alias=AliasChoices("TLDR_FREQUENCY_PENALTY"),
    )
    presence_penalty: float = Field(
        default=0.0,
        validation_alias=AliasChoices("TLDR_PRESENCE_PENALTY"),
    )

    # Chunking
    tokenizer_model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("TLDR_TOKENIZER_MODEL"),
    )
    max_tokens: int = Field(
        default=2048,
        gt=0,
        validation_alias=AliasChoices("TLDR_MAX_TOKENS"),
    )
    word_group_size: int = Field(
        default=50,
        gt=0,
        validation_alias=AliasChoices("TLDR_WORD_GROUP_SIZE"),
    )

    # Data directory
    data_dir: Path = Field(
        default=Path("data"),
        validation_alias=AliasChoices("DATA_DIR", "TLDR_DATA_DIR"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = Field(
        default="text",
        validation_alias=AliasChoices("LOG_FORMAT"),
        description="Log format: 'json' or 'text'",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("openai_api_key")
    @classmethod
    def require_api_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("API key must not be blank")
        return v

    @field_validator("max_concurrency", mode="before")
    @classmethod
    def parse_max_concurrency(cls, v):
        if v in ("", None, 0, "0"):
            return None
        return v

    @field_validator("max_concurrency")
    @classmethod
    def check_max_concurrency(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("max_concurrency must be positive")
        return v

    def sampling_params(self) -> SamplingParams:
        """Build sampling parameters for the completion client."""
        return SamplingParams(
            temperature=self.temperature,
            top_p=self.top_p,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty,
        )


def load_settings(**overrides) -> Settings:
    """Load settings, converting validation failures to ConfigurationError.

    Args:
        **overrides: Values taking precedence over the environment

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the credential is missing or a value is invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        if any("api_key" in f.lower() for f in fields):
            raise ConfigurationError(
                "OPENAI_API_KEY not found in environment or .env file."
            ) from e
        raise ConfigurationError(f"Invalid configuration: {', '.join(fields)}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure logging based on settings.

    Args:
        settings: Optional settings instance, uses cached settings if not provided
    """
    import sys

    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including fields passed via ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        import json

        log_record = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_ATTRS and not key.startswith("_"):
                log_record[key] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)
