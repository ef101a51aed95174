"""
Read and write the configuration file.

The settings are read, in order of precedence, from the arguments
given at construction, from the doctree.toml file in the current
folder, and from environment variables prefixed with DOCTREE_ (use
a double underscore for nested fields, as in
DOCTREE_TABS__STRATEGY=stash).

Example of doctree.toml:

```toml
[tabs]
category = "tabs"
strategy = "interleaved"
group_consecutive = false

[logging]
level = "INFO"
```
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

TabsStrategy = Literal['interleaved', 'stash']
LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

DEFAULT_CONFIG_FILE = "doctree.toml"
ENV_PREFIX = "DOCTREE_"


class TabsSettings(BaseModel):
    """
    Settings of the tabs transformation.

    Attributes:
        category: the admonition category that marks tabs
        strategy: 'interleaved' for HTML markers interleaved with the
            original content nodes, 'stash' for one HTML block per
            tab with the content stored in the node metadata
        group_consecutive: merge adjacent tabs admonitions into one
            set of tabs
    """

    category: str = Field(
        default="tabs",
        description="Admonition category that marks a tabs block",
    )
    strategy: TabsStrategy = Field(
        default='interleaved',
        description="Rewrite strategy for tabs admonitions",
    )
    group_consecutive: bool = Field(
        default=False,
        description="Merge adjacent tabs admonitions",
    )

    model_config = SettingsConfigDict(frozen=True, extra='forbid')

    @field_validator('category', mode='after')
    @classmethod
    def validate_category(cls, category: str) -> str:
        cleaned = category.strip()
        if not cleaned:
            raise ValueError("The tabs category is empty")
        if any(c.isspace() for c in cleaned):
            raise ValueError(
                "The tabs category cannot contain whitespace"
            )
        return cleaned


class LoggingSettings(BaseModel):
    """Settings of the package loggers."""

    level: LogLevel = Field(
        default='INFO', description="Level of the package loggers"
    )

    model_config = SettingsConfigDict(frozen=True, extra='forbid')

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, level: Any) -> Any:
        return level.strip().upper() if isinstance(level, str) else level


class Settings(BaseSettings):
    """
    A pydantic settings object containing the fields with the
    configuration information.

    Attributes:
        tabs: settings of the tabs transformation
        logging: settings of the package loggers
    """

    tabs: TabsSettings = Field(
        default_factory=TabsSettings,
        description="Tabs transformation settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging settings",
    )

    model_config = SettingsConfigDict(
        toml_file=DEFAULT_CONFIG_FILE,
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        frozen=True,
        extra='forbid',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources."""
        return (
            init_settings,
            TomlConfigSettingsSource(settings_cls),
            env_settings,
        )

    def __str__(self) -> str:
        return serialize_settings(self)


def serialize_settings(sets: BaseSettings) -> str:
    """Transform the settings into a string in TOML format.

    Args:
        sets: The settings object to serialize

    Returns:
        TOML formatted string representation of settings
    """
    import tomlkit

    doc = tomlkit.document()
    doc.add(tomlkit.comment("Configuration file"))
    doc.add(tomlkit.nl())

    data: dict[str, Any] = sets.model_dump()
    for key, value in data.items():
        if isinstance(value, dict):
            tbl = tomlkit.table()
            for kkey, vvalue in value.items():  # type: ignore
                # None values can't be serialized to TOML
                if vvalue is not None:
                    tbl[kkey] = vvalue
            doc[key] = tbl
        elif value is not None:
            doc[key] = value

    return str(tomlkit.dumps(doc))  # type: ignore


def export_settings(
    settings: BaseSettings, file_path: str | Path | None = None
) -> None:
    """Save settings to file in TOML format.

    Args:
        settings: A settings object to save
        file_path: The settings file path (defaults to doctree.toml)

    Raises:
        OSError: If file cannot be written
    """
    if file_path is None:
        file_path = DEFAULT_CONFIG_FILE

    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        f.write(serialize_settings(settings))


def create_default_config_file(
    file_path: str | Path | None = None,
) -> None:
    """Create a settings file with the default values, replacing any
    existing file.

    Args:
        file_path: Target file path (defaults to doctree.toml)
    """
    if file_path is None:
        file_path = DEFAULT_CONFIG_FILE

    file_path = Path(file_path)

    if file_path.exists():
        # otherwise, it will be read in
        file_path.unlink()

    export_settings(Settings(), file_path)


def load_settings(file_path: str | Path | None = None) -> Settings:
    """Load settings from TOML file.

    Args:
        file_path: Path to settings file (defaults to doctree.toml)

    Returns:
        Loaded settings object

    Raises:
        FileNotFoundError: If settings file doesn't exist
        ValueError: If settings file is invalid
    """
    if file_path is None:
        file_path = DEFAULT_CONFIG_FILE

    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Settings file not found: {file_path}")

    class FileSettings(Settings):
        model_config = SettingsConfigDict(
            toml_file=str(file_path),
            env_prefix=ENV_PREFIX,
            env_nested_delimiter="__",
            frozen=True,
            extra='forbid',
        )

    try:
        return FileSettings()
    except Exception as e:
        raise ValueError(
            f"Failed to load settings from {file_path}: "
            + format_pydantic_error_message(str(e))
        ) from e


def format_pydantic_error_message(error_message: str) -> str:
    """Filter out verbose lines from pydantic error messages.

    Args:
        error_message: Raw pydantic error message

    Returns:
        Cleaned error message without verbose help text
    """
    lines = error_message.split('\n')
    filtered_lines = [
        line
        for line in lines
        if "For further information visit" not in line
    ]
    return '\n'.join(filtered_lines)


def configure_logging(settings: Settings | None = None) -> None:
    """Set the level of the package loggers from the settings.

    Args:
        settings: the settings (read from file and environment if
            None)
    """
    from doctree.utils.logging import set_log_level

    if settings is None:
        settings = Settings()
    set_log_level(settings.logging.level)
