from typing import Any

from kungfu import cache
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docgraph.constants import (
    CORPUS_EXTENSIONS,
    DEFAULT_PHASES,
    DEFAULT_STALE_THRESHOLD_DAYS,
)
from docgraph.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    stale_threshold_days: int = Field(
        default=DEFAULT_STALE_THRESHOLD_DAYS,
        alias="STALE_THRESHOLD_DAYS",
        description="Documents not updated for longer than this are flagged as stale",
    )
    strict_related_topics: bool = Field(
        default=False,
        alias="STRICT_RELATED_TOPICS",
        description="Report dangling related topics as errors instead of warnings",
    )
    require_all_depths: bool = Field(
        default=False,
        alias="REQUIRE_ALL_DEPTHS",
        description="Report topics missing a depth as errors instead of warnings",
    )

    # JSON list: ["02-design", "06-operations"]
    known_phases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PHASES),
        alias="KNOWN_PHASES",
    )
    content_glob: str | None = Field(
        default=None,
        alias="CONTENT_GLOB",
        description="File pattern matched below the content root (default: *.md, *.mdx)",
    )

    @field_validator("known_phases", mode="before")
    @classmethod
    def parse_known_phases(cls, v: str | list[str] | None) -> list[str]:
        if v is None:
            return list(DEFAULT_PHASES)
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v

    def content_patterns(self) -> tuple[str, ...]:
        return (self.content_glob,) if self.content_glob else CORPUS_EXTENSIONS


@cache
def get_settings() -> Settings:
    return Settings()


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<config>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def load_settings() -> Settings:
    """
    Settings from the environment.

    Raises:
        ConfigurationError: If an environment value is invalid.
    """
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid environment configuration: {_format_validation_error(e)}"
        ) from e


class ValidationConfig(BaseModel):
    """Effective options for one validation run (settings plus caller overrides)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    stale_threshold_days: int = Field(
        default=DEFAULT_STALE_THRESHOLD_DAYS, ge=0, strict=True
    )
    strict_related_topics: bool = False
    require_all_depths: bool = False
    known_phases: tuple[str, ...] = DEFAULT_PHASES

    @classmethod
    def build(
        cls, settings: Settings | None = None, **overrides: Any
    ) -> "ValidationConfig":
        """
        Merge settings with explicit overrides.

        Overrides set to None are ignored so CLI flags can pass through unset.

        Raises:
            ConfigurationError: If any option is unknown or invalid.
        """
        unknown = sorted(set(overrides) - set(cls.model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")

        base = settings if settings is not None else load_settings()

        values: dict[str, Any] = {name: getattr(base, name) for name in cls.model_fields}
        values["known_phases"] = tuple(values["known_phases"])
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {_format_validation_error(e)}"
            ) from e


__all__ = ["Settings", "ValidationConfig", "get_settings", "load_settings"]
