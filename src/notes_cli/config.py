"""Settings for the notes CLI.

The service address is a fixed constant (see constants.BASE_URL); settings
only cover logging and telemetry.

Settings Management:
    1. Global singleton (simple cases):
        set_settings(my_settings)
        settings = get_settings()

    2. Context-based (tests, embedding):
        with SettingsContext(my_settings):
            settings = get_settings()  # Returns my_settings

Settings Loading Priority (highest to lowest):
    1. Environment variables (NOTES_* prefix)
    2. Project config (./.notes-cli/settings.json)
    3. User config (~/.notes-cli/settings.json)
    4. .env file
    5. Default values
"""

from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Generator, Literal, Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings as PydanticBaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

__all__ = [
    "NotesSettings",
    "SettingsContext",
    "get_settings",
    "set_settings",
    "reload_settings",
]

CONFIG_DIR_NAME = ".notes-cli"


def _get_json_config_source(
    settings_cls: Type[PydanticBaseSettings],
    json_file: Path,
) -> PydanticBaseSettingsSource | None:
    """Create a JSON config source if the file exists.

    Args:
        settings_cls: The settings class
        json_file: Path to JSON config file

    Returns:
        JsonConfigSettingsSource if file exists, None otherwise
    """
    if not json_file.is_file():
        return None

    from pydantic_settings import JsonConfigSettingsSource

    return JsonConfigSettingsSource(settings_cls, json_file=json_file)


class NotesSettings(PydanticBaseSettings):
    """Logging and telemetry settings for the notes CLI."""

    model_config = SettingsConfigDict(
        env_prefix="NOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(
        default="notes-cli",
        title="Service Name",
        description="OpenTelemetry service.name resource attribute",
    )

    # Logging configuration
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        title="Log Level",
        description="Logging verbosity level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="Log output format (console for dev, json for production)",
    )

    # Telemetry
    telemetry_exporter: Literal["otlp", "console", "none"] = Field(
        default="otlp",
        title="Telemetry Exporter",
        description="Where finished spans are sent",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        title="OTLP Endpoint",
        description="OTLP/HTTP traces endpoint; falls back to OTEL_EXPORTER_OTLP_* env vars",
    )

    @field_validator("log_level", "log_format", "telemetry_exporter", mode="before")
    @classmethod
    def lowercase_choice(cls, v: object) -> object:
        """Accept NOTES_LOG_LEVEL=INFO and friends."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Layer JSON config files between the environment and .env.

        JSON sources are only included if the files exist.
        """
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
        ]

        project_json = _get_json_config_source(
            settings_cls,
            Path.cwd() / CONFIG_DIR_NAME / "settings.json",
        )
        if project_json:
            sources.append(project_json)

        user_json = _get_json_config_source(
            settings_cls,
            Path.home() / CONFIG_DIR_NAME / "settings.json",
        )
        if user_json:
            sources.append(user_json)

        sources.append(dotenv_settings)

        return tuple(sources)


# Context variable for settings (takes precedence over global singleton)
_settings_context: ContextVar[NotesSettings | None] = ContextVar(
    "settings_context", default=None
)

_settings_instance: NotesSettings | None = None


def get_settings() -> NotesSettings:
    """Get the current settings instance.

    Resolution order:
    1. Context variable (set via SettingsContext)
    2. Global singleton (set via set_settings)
    3. Fresh NotesSettings instance (created on first access)
    """
    context_settings = _settings_context.get()
    if context_settings is not None:
        return context_settings

    global _settings_instance
    if _settings_instance is None:
        _settings_instance = NotesSettings()
    return _settings_instance


def set_settings(settings: NotesSettings) -> None:
    """Set the global settings instance."""
    global _settings_instance
    _settings_instance = settings


@contextmanager
def SettingsContext(settings: NotesSettings) -> Generator[NotesSettings, None, None]:
    """Context manager for isolated settings.

    Example:
        with SettingsContext(test_settings) as s:
            assert get_settings() is s

    Args:
        settings: Settings to use within the context

    Yields:
        The settings instance
    """
    token = _settings_context.set(settings)
    try:
        yield settings
    finally:
        _settings_context.reset(token)


def reload_settings() -> NotesSettings:
    """Drop the cached singleton and build settings again from the sources."""
    global _settings_instance
    _settings_instance = None
    _settings_context.set(None)
    return get_settings()
