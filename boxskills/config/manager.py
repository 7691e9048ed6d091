"""Configuration manager for boxskills."""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from boxskills.config.defaults import (
    CONFIG_PATH_VARIABLE,
    DEFAULT_CONFIG,
    ENVIRONMENT_VARIABLES,
    ESCAPED_FIELDS,
    FIELD_DESCRIPTIONS,
    REQUIRED_FIELDS,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Exception raised for configuration errors."""
    pass


def unescape(value: str) -> str:
    """Decode backslash escape sequences in a configuration value.

    Private keys are stored in the environment on a single line with
    literal ``\\n`` sequences; this turns them back into real newlines
    (and handles the other standard escapes the same way).

    Args:
        value: Raw value as read from the environment or file

    Returns:
        Value with escape sequences decoded
    """
    if not value or "\\" not in value:
        return value
    return value.encode("latin-1", "backslashreplace").decode("unicode_escape")


class ConfigManager:
    """Loads, validates and exposes configuration.

    Configuration is built once per process from three layers, later layers
    taking precedence: built-in defaults, an optional YAML file, and the
    environment variables listed in ``ENVIRONMENT_VARIABLES``. Escaped
    private keys are decoded during loading so the rest of the code only
    ever sees ready-to-use values.

    Attributes:
        config: Dictionary containing all configuration values
        config_path: Path to the loaded configuration file, if any

    Examples:
        >>> config = ConfigManager.load()
        >>> config.get("metadata.keywords_template")
        'box-skills-keywords-demo'
    """

    def __init__(self, config: Dict[str, Any], config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config: Configuration dictionary
            config_path: Path to the configuration file (optional)
        """
        self.config = config
        self.config_path = config_path

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        validate: bool = True
    ) -> "ConfigManager":
        """Load configuration from defaults, file and environment.

        Args:
            config_path: Path to a YAML configuration file (optional). Falls
                back to the ``BOX_SKILLS_CONFIG`` environment variable.
            environ: Environment mapping to read (defaults to ``os.environ``)
            validate: Whether to check that all required fields are set

        Returns:
            ConfigManager instance with loaded configuration

        Raises:
            ConfigError: If configuration cannot be loaded or validated
        """
        if environ is None:
            environ = os.environ

        if not config_path:
            config_path = environ.get(CONFIG_PATH_VARIABLE)

        config = copy.deepcopy(DEFAULT_CONFIG)
        path = None

        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
            logger.info(f"Loading configuration from: {path}")
            config = cls._merge_with_defaults(cls._load_yaml(path))

        cls._apply_environment(config, environ)
        cls._decode_escaped_fields(config)

        if validate:
            cls._validate_required_fields(config)

        return cls(config, path)

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        """Read the YAML overrides file.

        An empty file yields no overrides.

        Raises:
            ConfigError: If the file is unreadable, not YAML, or not a mapping
        """
        try:
            with open(path, 'r') as f:
                overrides = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if overrides is None:
            return {}
        if not isinstance(overrides, dict):
            raise ConfigError(
                f"Configuration file {path} must contain a mapping of sections, "
                f"got {type(overrides).__name__}"
            )
        return overrides

    @staticmethod
    def _merge_with_defaults(overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay file values onto a copy of ``DEFAULT_CONFIG``, section by section."""
        def overlay(base: dict, updates: dict) -> dict:
            merged = copy.deepcopy(base)
            for key, value in updates.items():
                if isinstance(merged.get(key), dict) and isinstance(value, dict):
                    merged[key] = overlay(merged[key], value)
                else:
                    merged[key] = value
            return merged

        return overlay(DEFAULT_CONFIG, overrides)

    @classmethod
    def _apply_environment(cls, config: Dict[str, Any], environ: Mapping[str, str]) -> None:
        """Overlay environment variables onto the configuration.

        Values are cast to the type of the default they replace.

        Raises:
            ConfigError: If a value cannot be cast
        """
        for variable, field_path in ENVIRONMENT_VARIABLES.items():
            if variable not in environ:
                continue

            raw = environ[variable]
            default = cls._get_nested_value(DEFAULT_CONFIG, field_path)
            try:
                value = cls._cast(raw, default)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for {variable} ({field_path}): {raw!r}"
                ) from e

            cls._set_nested_value(config, field_path, value)
            logger.debug(f"Configuration {field_path} set from ${variable}")

    @staticmethod
    def _cast(raw: str, default: Any) -> Any:
        """Cast a raw environment string to the type of ``default``."""
        if isinstance(default, bool):
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {raw}")
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        return raw

    @classmethod
    def _decode_escaped_fields(cls, config: Dict[str, Any]) -> None:
        """Decode escape sequences in the fields listed in ``ESCAPED_FIELDS``."""
        for field_path in ESCAPED_FIELDS:
            value = cls._get_nested_value(config, field_path)
            if isinstance(value, str):
                cls._set_nested_value(config, field_path, unescape(value))

    @staticmethod
    def _validate_required_fields(config: Dict[str, Any]) -> None:
        """Validate that all required fields are present.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigError: If required fields are missing
        """
        missing = []

        for field_path in REQUIRED_FIELDS:
            value = ConfigManager._get_nested_value(config, field_path)
            if not value:
                missing.append(field_path)

        if missing:
            raise ConfigError(
                "Missing required configuration fields:\n"
                + "\n".join(
                    f"  - {FIELD_DESCRIPTIONS.get(field, field)}" for field in missing
                )
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "box.client_id")
            default: Default value to return if key not found

        Returns:
            Configuration value or default
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "processing.dry_run")
            value: Value to set
        """
        self._set_nested_value(self.config, key, value)

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        """Look up a dotted key such as ``download.max_file_size``.

        Returns:
            The value, or None when any part of the path is absent
        """
        node = config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        """Assign a dotted key, creating intermediate sections as needed."""
        *sections, leaf = key.split(".")
        node = config
        for section in sections:
            if not isinstance(node.get(section), dict):
                node[section] = {}
            node = node[section]
        node[leaf] = value

    def __repr__(self) -> str:
        source = self.config_path or "environment"
        return f"<ConfigManager source={source}>"
