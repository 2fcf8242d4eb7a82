# Backend package for the Steam dedicated server manager.
# Discovery, lifecycle, backups and config editing for locally installed servers.

from .catalog import SERVER_CATALOG, ServerCatalogEntry, get_catalog_entry
from .models import DiscoveredServer

__version__ = "1.0.0"
