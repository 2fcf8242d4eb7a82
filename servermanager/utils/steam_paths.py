"""
Steam installation discovery across platforms.

Windows asks the registry first and falls back to the usual Program Files
locations; macOS and Linux each have one conventional per-user location.
Every probe failure is treated as "not found", nothing here raises.
"""
import asyncio
import logging
import os
import re
import subprocess
from typing import Dict, List, Optional

from .platform import get_platform, WINDOWS, MACOS, LINUX
from .process import run_command

logger = logging.getLogger(__name__)

STEAM_REGISTRY_KEY = r"HKEY_CURRENT_USER\Software\Valve\Steam"
REGISTRY_STEAM_PATH_RE = re.compile(r"SteamPath\s+REG_SZ\s+(.+)")
DRIVE_LETTER_RE = re.compile(r"[A-Z]:\\")

# Default volume when drive enumeration fails on Windows
DEFAULT_VOLUME = "C:"

# Install locations probed under a volume named by the caller, in order
VOLUME_STEAM_SUBPATHS = [
    ("Program Files (x86)", "Steam"),
    ("Program Files", "Steam"),
    ("Steam",),
    ("Games", "Steam"),
]

# Mount point parents offered on non-Windows systems
MOUNT_PARENTS: Dict[str, List[str]] = {
    MACOS: ["/Volumes"],
    LINUX: ["/mnt", "/media"],
}

# Per-volume locations checked by get_common_steam_paths
COMMON_STEAM_SUBPATHS: Dict[str, List[tuple]] = {
    WINDOWS: [
        ("Program Files", "Steam"),
        ("Program Files (x86)", "Steam"),
        ("SteamLibrary",),
    ],
    MACOS: [
        ("Library", "Application Support", "Steam"),
        (".steam",),
    ],
    LINUX: [
        (".steam",),
        (".var", "app", "com.valvesoftware.Steam"),
    ],
}


def _volume_root(volume: str) -> str:
    """Turn 'D:' into 'D:\\' so joins are absolute rather than drive-relative."""
    if volume.endswith((os.sep, '/', '\\')):
        return volume
    return volume + os.sep


def _first_existing(candidates: List[str]) -> Optional[str]:
    for candidate in candidates:
        try:
            if os.path.exists(candidate):
                return candidate
        except (OSError, ValueError):
            continue
    return None


def _is_path_hint(hint: str) -> bool:
    return '/' in hint or '\\' in hint


async def resolve_steam_root(hint: Optional[str] = None) -> Optional[str]:
    """Resolve the Steam root to scan.

    Args:
        hint: None for auto-detection, a path (anything containing a
            separator, used as-is without validation) or a bare volume
            designator such as 'D:'.

    Returns:
        Steam root directory, or None if nothing was found
    """
    if hint is None:
        return await find_steam_path()
    if _is_path_hint(hint):
        return hint
    return await find_steam_path_on_volume(hint)


async def find_steam_path_on_volume(volume: str) -> Optional[str]:
    """Probe the conventional install folders on one volume."""
    if not volume or not volume.strip():
        return None

    root = _volume_root(volume.strip())
    candidates = [os.path.join(root, *parts) for parts in VOLUME_STEAM_SUBPATHS]
    found = _first_existing(candidates)
    if found:
        logger.info(f"[SteamPaths] Found Steam on {volume}: {found}")
    else:
        logger.debug(f"[SteamPaths] No Steam install on {volume}")
    return found


async def _query_registry_steam_path() -> Optional[str]:
    """Read SteamPath from the current user's registry hive."""
    try:
        returncode, stdout, stderr = await run_command(
            ['reg', 'query', STEAM_REGISTRY_KEY, '/v', 'SteamPath']
        )
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"[SteamPaths] Registry query failed: {e}")
        return None

    if returncode != 0:
        logger.debug(f"[SteamPaths] Registry query returned {returncode}: {stderr.strip()}")
        return None

    match = REGISTRY_STEAM_PATH_RE.search(stdout)
    if not match:
        return None
    return match.group(1).strip()


def _windows_fallback_paths() -> List[str]:
    program_files = os.environ.get("PROGRAMFILES", "C:\\Program Files")
    return [
        "C:\\Program Files (x86)\\Steam",
        "C:\\Program Files\\Steam",
        os.path.join(program_files, "Steam"),
    ]


async def find_steam_path() -> Optional[str]:
    """Auto-detect the Steam install for the current user."""
    platform = get_platform()

    if platform == WINDOWS:
        registry_path = await _query_registry_steam_path()
        if registry_path:
            logger.info(f"[SteamPaths] Steam path from registry: {registry_path}")
            return registry_path
        found = _first_existing(_windows_fallback_paths())
    elif platform == MACOS:
        found = _first_existing([os.path.expanduser("~/Library/Application Support/Steam")])
    else:
        found = _first_existing([os.path.expanduser("~/.steam/steam")])

    if found:
        logger.info(f"[SteamPaths] Using Steam install at {found}")
    else:
        logger.warning("[SteamPaths] Steam installation not found")
    return found


def list_available_volumes() -> List[str]:
    """List volumes worth offering as Steam locations.

    Windows drive letters come from fsutil; other systems get their
    conventional mount point parents.
    """
    platform = get_platform()
    if platform != WINDOWS:
        return list(MOUNT_PARENTS.get(platform, MOUNT_PARENTS[LINUX]))

    try:
        result = subprocess.run(
            ['fsutil', 'fsinfo', 'drives'],
            capture_output=True, text=True, check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"[SteamPaths] Error listing drives: {e}")
        return [DEFAULT_VOLUME]

    drives = sorted({match.rstrip('\\') for match in DRIVE_LETTER_RE.findall(result.stdout)})
    return drives or [DEFAULT_VOLUME]


def get_common_steam_paths() -> List[str]:
    """Return conventional Steam locations that exist on any available volume."""
    platform = get_platform()
    subpaths = COMMON_STEAM_SUBPATHS.get(platform, COMMON_STEAM_SUBPATHS[LINUX])

    paths = []
    for volume in list_available_volumes():
        root = _volume_root(volume) if platform == WINDOWS else volume
        for parts in subpaths:
            candidate = os.path.join(root, *parts)
            try:
                if os.path.exists(candidate):
                    paths.append(candidate)
            except (OSError, ValueError):
                continue
    return paths
