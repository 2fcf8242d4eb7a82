"""Load and save a server's own config file, located through the catalog."""
import logging
import os
from typing import Tuple

from ..catalog import get_catalog_entry, ServerCatalogEntry
from .codec import ConfigDocument, ConfigError, parse_config, serialize_config

logger = logging.getLogger(__name__)


def _config_entry(app_id: int) -> ServerCatalogEntry:
    entry = get_catalog_entry(app_id)
    if entry is None:
        raise ConfigError(f"Unknown server app ID: {app_id}")
    if not entry.supports_config:
        raise ConfigError(f"{entry.display_name} has no editable config file")
    return entry


def get_config_path(app_id: int, install_path: str) -> str:
    """Absolute path of the config file for a server install."""
    entry = _config_entry(app_id)
    return os.path.join(install_path, *entry.config_relative_path.split('/'))


def load_server_config(app_id: int, install_path: str) -> Tuple[ConfigDocument, str]:
    """Read and parse a server's config.

    Returns:
        (document, format)

    Raises:
        ConfigError: server unknown or without config support
        ConfigParseError: malformed JSON config
        FileNotFoundError: config file missing
    """
    entry = _config_entry(app_id)
    path = get_config_path(app_id, install_path)
    with open(path, 'r', encoding='utf-8-sig') as f:
        text = f.read()
    logger.info(f"[Config] Loaded {entry.config_format} config for {entry.display_name} from {path}")
    return parse_config(text, entry.config_format), entry.config_format


def save_server_config(app_id: int, install_path: str, doc: ConfigDocument) -> str:
    """Serialize doc in the server's format and write it. Returns the path written."""
    entry = _config_entry(app_id)
    path = get_config_path(app_id, install_path)
    text = serialize_config(doc, entry.config_format)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    logger.info(f"[Config] Saved {entry.config_format} config for {entry.display_name} to {path}")
    return path
