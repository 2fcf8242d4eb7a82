"""
Save-data backups.

Each backup zips a server's save folder into
<backup root>/<server name>/<UTC timestamp>.zip using the platform's own
archiver (PowerShell Compress-Archive on Windows, zip elsewhere).
"""
import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from ..catalog import get_catalog_entry
from ..utils.platform import is_windows
from ..utils.process import run_command

logger = logging.getLogger(__name__)

BACKUP_EXTENSION = ".zip"


def backup_filename(now: Optional[datetime] = None) -> str:
    """Sortable, filesystem-safe name with second precision (2024-01-31T18-05-09.zip)."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S") + BACKUP_EXTENSION


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def archive_command(save_path: str, backup_file: str) -> List[str]:
    """Archiver invocation for the host OS.

    zip runs from the save folder's parent so the archive holds the folder
    by name, the same layout Compress-Archive produces.
    """
    if is_windows():
        ps_command = (
            f"Compress-Archive -Path {_ps_quote(save_path)} "
            f"-DestinationPath {_ps_quote(backup_file)} -Force"
        )
        return ['powershell', '-NoProfile', '-Command', ps_command]
    return ['zip', '-r', '-q', backup_file, os.path.basename(os.path.normpath(save_path))]


def ensure_backup_location(backup_path: str) -> bool:
    """Create backup_path if needed. False if it cannot be created."""
    try:
        os.makedirs(backup_path, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"[Backup] Cannot create backup directory {backup_path}: {e}")
        return False


async def backup_server_save(app_id: int, install_path: str, backup_root_path: str) -> Optional[str]:
    """Zip the save folder of a server.

    Args:
        app_id: Steam app ID of the server
        install_path: Server install directory
        backup_root_path: Base directory for backups

    Returns:
        Path of the new archive, or None if there was nothing to back up or
        the archive could not be created.
    """
    entry = get_catalog_entry(app_id)
    if entry is None:
        logger.error(f"[Backup] Unknown server app ID: {app_id}")
        return None

    save_path = os.path.join(install_path, entry.save_relative_path)
    if not os.path.exists(save_path):
        logger.warning(f"[Backup] Save directory not found: {save_path}")
        return None

    backup_dir = os.path.join(backup_root_path, entry.display_name)
    if not ensure_backup_location(backup_dir):
        return None

    backup_file = os.path.abspath(os.path.join(backup_dir, backup_filename()))
    logger.info(f"[Backup] Creating backup from {save_path} to {backup_file}")

    cmd = archive_command(save_path, backup_file)
    try:
        returncode, _, stderr = await run_command(
            cmd,
            cwd=None if is_windows() else os.path.dirname(os.path.normpath(save_path))
        )
    except (OSError, asyncio.TimeoutError) as e:
        logger.error(f"[Backup] Failed to run {cmd[0]}: {e}")
        return None

    if returncode != 0:
        logger.error(f"[Backup] Failed to create backup ({cmd[0]} exited {returncode}): {stderr.strip()}")
        return None

    logger.info(f"[Backup] Backup created successfully: {backup_file}")
    return backup_file
