"""
Known Steam dedicated server applications.

The catalog is plain data: one immutable record per app id. Entries differ
only in their field values, never in behaviour.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class ServerCatalogEntry:
    """Static description of one supported dedicated server"""
    app_id: int
    display_name: str
    expected_folder_name: str  # matched case-insensitively under common/
    executable_name: str
    save_relative_path: str
    config_relative_path: Optional[str] = None  # None = no config editing
    config_format: Optional[str] = None  # 'json' or 'ini'

    @property
    def supports_config(self) -> bool:
        return self.config_relative_path is not None


_ENTRIES = (
    ServerCatalogEntry(
        app_id=2278520,
        display_name="Enshrouded Dedicated Server",
        expected_folder_name="EnshroudedServer",
        executable_name="enshrouded_server.exe",
        save_relative_path="savegame",
        config_relative_path="enshrouded_server.json",
        config_format="json",
    ),
    ServerCatalogEntry(
        app_id=892970,
        display_name="Valheim Server",
        expected_folder_name="Valheim dedicated server",
        executable_name="valheim_server.exe",
        save_relative_path="savegame",
    ),
    ServerCatalogEntry(
        app_id=1623730,
        display_name="Palworld Dedicated Server",
        expected_folder_name="PalServer",
        executable_name="pal_server.exe",
        save_relative_path="savegame",
        config_relative_path="Pal/Saved/Config/WindowsServer/PalWorldSettings.ini",
        config_format="ini",
    ),
)

# Declaration order is the discovery scan order
SERVER_CATALOG: Mapping[int, ServerCatalogEntry] = MappingProxyType(
    {entry.app_id: entry for entry in _ENTRIES}
)


def get_catalog_entry(app_id: int) -> Optional[ServerCatalogEntry]:
    """Return the catalog entry for app_id, or None if it is not a known server."""
    try:
        return SERVER_CATALOG.get(int(app_id))
    except (TypeError, ValueError):
        return None
