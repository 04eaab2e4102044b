"""Configuration management"""

from .config_loader import ConfigError, ConfigLoader
from .parser_config import (
    DEFAULT_FOLD_ENCODING,
    DO_NOT_FOLD,
    DO_NOT_FOLD_ENCODING,
    UNLIMITED_DEPTH,
    AppConfig,
    CharsetConfig,
    FoldEncoding,
    ParserConfig,
    default_fold_encoding,
    default_parser_config,
    set_default_fold_encoding,
    set_default_parser_config,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "DEFAULT_FOLD_ENCODING",
    "DO_NOT_FOLD",
    "DO_NOT_FOLD_ENCODING",
    "UNLIMITED_DEPTH",
    "AppConfig",
    "CharsetConfig",
    "FoldEncoding",
    "ParserConfig",
    "default_fold_encoding",
    "default_parser_config",
    "set_default_fold_encoding",
    "set_default_parser_config",
]
