"""Configuration management using pydantic-settings."""
import logging
import sys
from typing import Any, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog


class EngineSettings(BaseSettings):
    """Engine-wide settings loaded from environment variables.

    All settings prefixed with CUSTOMS_ (e.g., CUSTOMS_LOG_LEVEL=DEBUG)
    """

    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (false = colored console output)"
    )

    model_config = SettingsConfigDict(
        env_prefix="CUSTOMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class ClassificationSettings(BaseSettings):
    """Classifier configuration.

    All settings prefixed with CLASSIFY_ (e.g., CLASSIFY_CATEGORY_FUZZY_THRESHOLD=95)
    """

    category_fuzzy_threshold: Optional[float] = Field(
        default=92.0,
        ge=0,
        le=100,
        description=(
            "RapidFuzz score (0-100) for resolving a category that is not an exact "
            "synonym; unset to require exact synonyms"
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="CLASSIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class MatchingSettings(BaseSettings):
    """Declaration/item matching configuration.

    All settings prefixed with MATCH_ (e.g., MATCH_FUZZY_THRESHOLD=0.45)
    """

    fuzzy_threshold: float = Field(
        default=0.34,
        ge=0,
        le=1,
        description="Similarity >= this pairs a declaration line in the fuzzy tier"
    )
    strict_threshold: float = Field(
        default=0.45,
        ge=0,
        le=1,
        description="Stricter fuzzy threshold for callers that need fewer false pairs"
    )
    resolve_accept_threshold: float = Field(
        default=0.55,
        ge=0,
        le=1,
        description="Similarity >= this accepts a directory product as an item's SKU source"
    )
    resolve_early_stop: float = Field(
        default=0.8,
        ge=0,
        le=1,
        description="Stop searching name variants once a candidate scores this high"
    )

    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class SkuSettings(BaseSettings):
    """SKU synthesis configuration.

    All settings prefixed with SKU_ (e.g., SKU_MAX_LENGTH=24)
    """

    max_length: int = Field(
        default=20,
        ge=4,
        le=64,
        description="Maximum length of a synthesized SKU"
    )
    imperfect_code: str = Field(
        default="IM",
        min_length=1,
        max_length=4,
        description="Suffix token appended to SKUs of imperfect/flagged goods"
    )

    model_config = SettingsConfigDict(
        env_prefix="SKU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class ReconcileSettings(BaseSettings):
    """Declaration reconciliation configuration.

    All settings prefixed with RECONCILE_
    """

    append_sku_to_description: bool = Field(
        default=False,
        description="Append ' - SKU <sku>' to descriptions of reconciled lines"
    )
    description_max_length: int = Field(
        default=100,
        ge=10,
        le=255,
        description="Maximum description length when the SKU suffix is appended"
    )

    model_config = SettingsConfigDict(
        env_prefix="RECONCILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instances
settings = EngineSettings()
classification_settings = ClassificationSettings()
matching_settings = MatchingSettings()
sku_settings = SkuSettings()
reconcile_settings = ReconcileSettings()


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog for JSON (or console) logging."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    shared_processors: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_json)
