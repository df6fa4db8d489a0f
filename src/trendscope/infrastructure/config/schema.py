"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

PLACEHOLDER_THUMBNAIL = (
    "https://images.unsplash.com/photo-1616423640778-28d1b53229bd"
    "?auto=format&fit=crop&q=80&w=320&h=180"
)


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheConfig(BaseModel):
    """Raw upstream response cache (diskcache)."""

    directory: Path = Field(
        default=Path("./.cache/trendscope"),
        validation_alias=AliasChoices("dir", "directory"),
        description="Diskcache SQLite DB path",
    )
    ttl_seconds: int = Field(
        default=3600,
        description="Default TTL for cache entries (seconds)",
    )
    search_ttl_seconds: int = Field(
        default=300,
        description="TTL for cached raw provider payloads (seconds). 0 = disabled.",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel cache ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("ttl_seconds", "search_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache TTLs must be >= 0")
        return v


class RankingConfig(BaseModel):
    """Heuristics for engagement estimation and ranking.

    Score formula:
        likes * like_weight + comments * comment_weight + shares * share_weight

    Conversion rates are assumed industry averages, not measured values.
    """

    like_rate: float = Field(default=0.05, description="Likes per view.")
    like_jitter: float = Field(
        default=0.01, description="Upper bound of random extra likes per view."
    )
    comment_rate: float = Field(default=0.005, description="Comments per view.")
    comment_jitter: float = Field(
        default=0.002, description="Upper bound of random extra comments per view."
    )
    share_rate: float = Field(default=0.01, description="Shares per view.")
    share_jitter: float = Field(
        default=0.005, description="Upper bound of random extra shares per view."
    )

    like_weight: int = Field(default=1, description="Score weight of a like.")
    comment_weight: int = Field(default=5, description="Score weight of a comment.")
    share_weight: int = Field(default=10, description="Score weight of a share.")

    synthetic_base: int = Field(
        default=100_000,
        description="Synthetic views for the very first upstream position.",
    )
    synthetic_decay: int = Field(
        default=5_000,
        description="Synthetic views lost per upstream position.",
    )
    synthetic_floor: int = Field(
        default=5_000,
        description="Lower bound of the synthetic positional weight.",
    )
    synthetic_jitter: int = Field(
        default=20_000,
        description="Exclusive upper bound of the random synthetic jitter.",
    )

    page_size: int = Field(
        default=10, description="Results requested from the provider per page."
    )
    has_more_threshold: int = Field(
        default=8,
        description="Raw records per page at which more pages are assumed.",
    )

    placeholder_thumbnail: str = Field(default=PLACEHOLDER_THUMBNAIL)
    default_published: str = Field(default="近期发布")
    default_duration: str = Field(default="短视频")

    @field_validator(
        "like_rate",
        "like_jitter",
        "comment_rate",
        "comment_jitter",
        "share_rate",
        "share_jitter",
    )
    @classmethod
    def _validate_rates(cls, v: float) -> float:
        if v < 0:
            raise ValueError("conversion rates must be >= 0")
        return v

    @model_validator(mode="after")
    def _validate_paging(self) -> "RankingConfig":
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")
        if not 0 < self.has_more_threshold <= self.page_size:
            raise ValueError("has_more_threshold must be in (0, page_size]")
        if self.synthetic_floor <= 0:
            raise ValueError("synthetic_floor must be > 0")
        if self.synthetic_jitter <= 0:
            raise ValueError("synthetic_jitter must be > 0")
        return self


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/serpapi/logging/cache/ranking).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="trendscope", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout for every upstream request; expiry is a fetch failure.",
    )
    http_user_agent: str = Field(
        default="Trendscope/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Search provider (YAML section: serpapi.*)
    serpapi_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "serpapi_api_key",
            AliasPath("serpapi", "api_key"),
        ),
        description="SerpApi key. Requests fail with a config error when unset.",
    )
    serpapi_base_url: str = Field(
        default="https://serpapi.com/search.json",
        validation_alias=AliasChoices(
            "serpapi_base_url",
            AliasPath("serpapi", "base_url"),
        ),
    )
    search_language: str = Field(
        default="zh-cn",
        validation_alias=AliasChoices(
            "search_language",
            AliasPath("serpapi", "language"),
        ),
        description="Provider interface language (hl).",
    )
    image_region: str = Field(
        default="cn",
        validation_alias=AliasChoices(
            "image_region",
            AliasPath("serpapi", "image_region"),
        ),
        description="Provider country for image search (gl).",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("serpapi_api_key")
    @classmethod
    def _blank_key_is_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The API key is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "serpapi": {
                "api_key": "***" if self.serpapi_api_key else None,
                "base_url": self.serpapi_base_url,
                "language": self.search_language,
                "image_region": self.image_region,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "dir": str(self.cache.directory),
                "ttl_seconds": self.cache.ttl_seconds,
                "search_ttl_seconds": self.cache.search_ttl_seconds,
                "max_concurrent": self.cache.max_concurrent,
            },
            "ranking": self.ranking.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - TRENDSCOPE_ENVIRONMENT
    - TRENDSCOPE_HTTP_TIMEOUT_SECONDS
    - TRENDSCOPE_LOG_LEVEL
    - TRENDSCOPE_CACHE_DIR
    - SERPAPI_KEY (or TRENDSCOPE_SERPAPI_API_KEY)
    """

    model_config = SettingsConfigDict(
        env_prefix="TRENDSCOPE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    serpapi_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TRENDSCOPE_SERPAPI_API_KEY", "SERPAPI_KEY"),
    )
    serpapi_base_url: Optional[str] = None
    search_language: Optional[str] = None
    image_region: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_dir: Optional[Path] = None
    cache_search_ttl_seconds: Optional[int] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
