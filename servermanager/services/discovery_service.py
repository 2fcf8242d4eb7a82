"""
Installed-server discovery.

For every catalog entry, library roots are scanned in order until the server
is found. A library counts as holding the server when its common/ folder has
a directory named after the app id, a directory matching the expected folder
name, or (when the app manifest is present) any directory at all. A manifest
with an unreadable common/ folder is reported as a placeholder install.
"""
import logging
import os
from typing import Any, Dict, List, Optional

import aiohttp

from ..catalog import SERVER_CATALOG, ServerCatalogEntry
from ..models import DiscoveredServer
from ..settings import load_settings
from ..utils.library import manifest_filename, parse_library_folders
from ..utils.process import is_process_running
from ..utils.steam_paths import resolve_steam_root
from .artwork_service import create_http_session, fetch_cover_art

logger = logging.getLogger(__name__)


def _list_directories(path: str) -> List[str]:
    """Names of sub-directories of path, sorted. Raises OSError if unreadable."""
    with os.scandir(path) as entries:
        names = []
        for entry in entries:
            try:
                if entry.is_dir():
                    names.append(entry.name)
            except OSError:
                continue
    return sorted(names)


def match_install_folder(
    directories: List[str],
    entry: ServerCatalogEntry,
    manifest_exists: bool
) -> Optional[str]:
    """Pick the install folder for entry among directories, or None."""
    app_folder = str(entry.app_id)
    if app_folder in directories:
        return app_folder

    expected = entry.expected_folder_name.lower()
    for name in directories:
        if name.lower() == expected:
            return name

    # Non-standard folder name: trust the manifest and take the first folder
    if manifest_exists and directories:
        return directories[0]

    return None


async def _probe_library(
    entry: ServerCatalogEntry,
    library_root: str,
    session: aiohttp.ClientSession,
    settings: Dict[str, Any]
) -> Optional[DiscoveredServer]:
    """Look for entry in one library root."""
    common_path = os.path.join(library_root, "common")
    manifest_path = os.path.join(library_root, manifest_filename(entry.app_id))

    try:
        manifest_exists = os.path.exists(manifest_path)
    except (OSError, ValueError):
        manifest_exists = False
    if manifest_exists:
        logger.info(f"[Discovery] Found manifest for {entry.display_name} ({entry.app_id}) at: {manifest_path}")

    try:
        directories = _list_directories(common_path)
    except OSError as e:
        logger.debug(f"[Discovery] Can't read {common_path} for {entry.display_name}: {e}")
        if not manifest_exists:
            return None
        # Manifest without files yet: installing
        return DiscoveredServer(
            name=entry.display_name,
            app_id=entry.app_id,
            install_path=common_path,
            is_running=False,
            cover_art=await fetch_cover_art(entry.app_id, session, settings["cover_art_timeout"]),
        )

    folder = match_install_folder(directories, entry, manifest_exists)
    if folder is None:
        return None

    install_path = os.path.join(common_path, folder)
    logger.info(f"[Discovery] Found {entry.display_name}: {folder} at {install_path}")
    return DiscoveredServer(
        name=entry.display_name,
        app_id=entry.app_id,
        install_path=install_path,
        is_running=is_process_running(entry.executable_name, timeout=settings["command_timeout"]),
        cover_art=await fetch_cover_art(entry.app_id, session, settings["cover_art_timeout"]),
    )


async def find_installed_servers(
    path_or_volume_hint: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None
) -> List[DiscoveredServer]:
    """Find every known dedicated server installed under a Steam root.

    Args:
        path_or_volume_hint: Steam root path, bare volume ('D:') or None to
            auto-detect.
        session: Optional HTTP session for cover art lookups.

    Returns:
        At most one DiscoveredServer per app id, in catalog order.
    """
    steam_root = await resolve_steam_root(path_or_volume_hint)
    if not steam_root:
        logger.warning("[Discovery] Steam installation not found")
        return []

    logger.info(f"[Discovery] Searching for servers in: {steam_root}")
    library_roots = await parse_library_folders(steam_root)
    logger.info(f"[Discovery] Library paths found: {library_roots}")

    settings = load_settings()
    if session is None:
        async with create_http_session() as own_session:
            servers = await _scan(library_roots, own_session, settings)
    else:
        servers = await _scan(library_roots, session, settings)

    logger.info(f"[Discovery] Total servers found: {len(servers)}")
    return servers


async def _scan(
    library_roots: List[str],
    session: aiohttp.ClientSession,
    settings: Dict[str, Any]
) -> List[DiscoveredServer]:
    servers: List[DiscoveredServer] = []
    for entry in SERVER_CATALOG.values():
        for library_root in library_roots:
            server = await _probe_library(entry, library_root, session, settings)
            if server is not None:
                servers.append(server)
                break
    return servers
