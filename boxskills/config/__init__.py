"""Configuration management for boxskills."""

from boxskills.config.manager import ConfigManager, ConfigError
from boxskills.config.defaults import DEFAULT_CONFIG

__all__ = ["ConfigManager", "ConfigError", "DEFAULT_CONFIG"]
