"""
Configuration settings for epreuve.

- Settings: global options loaded from epreuve.yaml and environment
- Context / PropertyStore: context-scoped property lookup
  (e.g. reports.dir in the project context)
"""

from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from epreuve.exceptions import ConfigurationError

DEFAULT_CONFIG_FILE = "epreuve.yaml"


class Settings(BaseSettings):
    """Settings loaded from config file and environment."""

    # Output
    log_levels: str = "warn,info"
    decorated: bool = True
    color: bool = True

    # Reports
    reports_dir: Optional[str] = None
    capture_output: bool = False
    reprint_threshold: int = 50

    # Logging
    log_dir: Optional[str] = None
    log_level: str = "INFO"

    # Context-scoped properties: {context: {key: value}}
    properties: Dict[str, Dict[str, str]] = {}

    model_config = SettingsConfigDict(env_prefix="EPREUVE_", case_sensitive=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats values passed in from the YAML file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_config(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority: Environment variables > YAML file > defaults

    Args:
        path: Config file (default: ./epreuve.yaml when present)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the file is unreadable or values are invalid
    """
    if path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE
        explicit = False
    else:
        config_path = Path(path)
        explicit = True

    config_dict = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config: {e}", str(config_path))
        if yaml_config:
            if not isinstance(yaml_config, dict):
                raise ConfigurationError(
                    "Config file must contain a mapping", str(config_path)
                )
            config_dict = yaml_config
    elif explicit:
        raise ConfigurationError("Config file not found", str(config_path))

    try:
        return Settings(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", str(config_path))


class Context:
    """
    Named property context (e.g. "project").

    Instances obtained through named() are interned.
    """

    _interned: Dict[str, "Context"] = {}

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def named(cls, name: str) -> "Context":
        """Get the interned context for a name."""
        context = cls._interned.get(name)
        if context is None:
            context = cls(name)
            cls._interned[name] = context
        return context

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Context({self.name!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Context) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)


class PropertyStore:
    """
    Context-scoped key lookup.

    Empty values count as absent.
    """

    def __init__(self, properties: Optional[Dict[str, Dict[str, str]]] = None):
        """
        Initialize property store.

        Args:
            properties: Mapping of context name to {key: value}
        """
        self._properties: Dict[str, Dict[str, str]] = {
            context: dict(values) for context, values in (properties or {}).items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "PropertyStore":
        """Build from settings; reports_dir seeds project reports.dir."""
        store = cls(settings.properties)
        if settings.reports_dir:
            store.set("reports.dir", settings.reports_dir, Context.named("project"))
        return store

    def get(self, key: str, context: Union[Context, str]) -> Optional[str]:
        """
        Look up a property.

        Args:
            key: Property key (e.g. "reports.dir")
            context: Context or context name

        Returns:
            Value, or None when missing or empty
        """
        value = self._properties.get(str(context), {}).get(key)
        if value is None or str(value) == "":
            return None
        return str(value)

    def set(self, key: str, value: str, context: Union[Context, str]) -> None:
        self._properties.setdefault(str(context), {})[key] = value
