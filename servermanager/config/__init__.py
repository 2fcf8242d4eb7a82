# Config package
from .codec import (
    parse_config,
    serialize_config,
    parse_ini,
    serialize_ini,
    ConfigDocument,
    ConfigError,
    ConfigParseError,
    UnsupportedConfigFormat,
    JSON,
    INI,
)
from .server_config import get_config_path, load_server_config, save_server_config

__all__ = [
    'parse_config',
    'serialize_config',
    'parse_ini',
    'serialize_ini',
    'ConfigDocument',
    'ConfigError',
    'ConfigParseError',
    'UnsupportedConfigFormat',
    'JSON',
    'INI',
    'get_config_path',
    'load_server_config',
    'save_server_config',
]
