"""Configuration loader for library settings."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .parser_config import AppConfig, set_default_fold_encoding, set_default_parser_config

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file exists but cannot be used."""

    pass


class ConfigLoader:
    """Load and validate library configuration."""

    DEFAULT_CONFIG_PATHS = [
        Path("~/.mailround/config.json"),
        Path("config/mailround.json"),
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_path: Optional custom config file path
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_app_config(self) -> AppConfig:
        """
        Load configuration from the first config file found.

        Returns:
            AppConfig instance (defaults when no file exists)

        Raises:
            ConfigError: If a config file is not valid JSON or fails validation
        """
        if self._config is not None:
            return self._config

        config_paths = [self.config_path] if self.config_path else self.DEFAULT_CONFIG_PATHS

        for config_path in config_paths:
            if config_path and config_path.expanduser().exists():
                try:
                    with open(config_path.expanduser(), "r", encoding="utf-8") as f:
                        config_data = json.load(f)
                    self._config = AppConfig(**config_data)
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ConfigError(f"Invalid config in {config_path}: {e}") from e
                logger.debug("Loaded configuration from %s", config_path)
                return self._config

        # Return default config if no file found
        self._config = AppConfig()
        return self._config

    def apply(self) -> AppConfig:
        """
        Install process-wide settings from the loaded configuration.

        The parser section becomes the default for parse() calls made without
        a config, and the fold section the fold rules of newly built headers.
        When charsets.load_standard_charsets is set, the default charset
        registry is extended with every codec Python knows about.

        Returns:
            The applied AppConfig
        """
        # imported here so loading config never drags in the service layer
        from ..services.header.charset import default_charsets, register_standard_charsets

        config = self.load_app_config()
        set_default_parser_config(config.parser)
        set_default_fold_encoding(config.fold)
        if config.charsets.load_standard_charsets:
            register_standard_charsets(default_charsets())
        return config

    def reload(self) -> AppConfig:
        """Reload configuration from file."""
        self._config = None
        return self.load_app_config()
