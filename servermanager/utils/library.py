"""
Targeted extraction from Steam's library descriptors.

Only two values are ever needed: library "path" entries from
libraryfolders.vdf and "buildid" from appmanifest_<id>.acf. Both the
nested (modern) and flat (legacy) libraryfolders dialects yield the same
"path" "<value>" token pair, so a regex covers them without a VDF parser.
"""
import logging
import os
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

LIBRARY_FOLDERS_FILE = "libraryfolders.vdf"
LIBRARY_PATH_RE = re.compile(r'"path"\s+"([^"]+)"')
BUILD_ID_RE = re.compile(r'"buildid"\s+"(\d+)"', re.IGNORECASE)


def manifest_filename(app_id: int) -> str:
    return f"appmanifest_{app_id}.acf"


def _read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return f.read()


async def parse_library_folders(steam_root: str) -> List[str]:
    """List every steamapps directory known to this Steam install.

    The install's own steamapps always comes first, followed by each library
    path from libraryfolders.vdf in order of appearance. Duplicates are kept.
    """
    default_root = os.path.join(steam_root, "steamapps")
    library_roots = [default_root]

    library_file = os.path.join(default_root, LIBRARY_FOLDERS_FILE)
    try:
        content = _read_text(library_file)
    except OSError as e:
        logger.debug(f"[Library] No readable {LIBRARY_FOLDERS_FILE} at {library_file}: {e}")
        return library_roots

    for raw_path in LIBRARY_PATH_RE.findall(content):
        # VDF escapes backslashes ("D:\\SteamLibrary")
        library_path = raw_path.replace('\\\\', '\\')
        if library_path:
            library_roots.append(os.path.join(library_path, "steamapps"))

    logger.debug(f"[Library] Library roots for {steam_root}: {library_roots}")
    return library_roots


def parse_build_id(content: str) -> Optional[str]:
    """Extract the buildid digits from manifest text."""
    match = BUILD_ID_RE.search(content)
    return match.group(1) if match else None


async def get_server_build_id(app_id: int, library_root: str) -> Optional[str]:
    """Read the installed build id of app_id from its manifest in library_root.

    A missing manifest and a manifest without buildid both return None.
    """
    manifest_path = os.path.join(library_root, manifest_filename(app_id))
    try:
        content = _read_text(manifest_path)
    except OSError as e:
        logger.debug(f"[Library] Could not read manifest for app {app_id}: {e}")
        return None

    build_id = parse_build_id(content)
    if build_id is None:
        logger.warning(f"[Library] Could not parse buildid from manifest for app {app_id}")
        return None

    logger.info(f"[Library] App {app_id} current buildid: {build_id}")
    return build_id
