"""
Server lifecycle: start, stop and update-then-restart.

Servers are launched detached from this process so they outlive the
manager. Stopping is a forced kill by executable name.
"""
import asyncio
import logging
import os
import subprocess
from typing import Any, Dict, Optional

from ..catalog import get_catalog_entry
from ..settings import get_setting
from ..utils.library import get_server_build_id
from ..utils.platform import is_windows
from ..utils.process import kill_process

logger = logging.getLogger(__name__)


def _unknown_app(app_id: int) -> Dict[str, Any]:
    return {'success': False, 'error': f"Unknown server app ID: {app_id}"}


def _spawn_detached(exe_path: str, cwd: str) -> subprocess.Popen:
    kwargs: Dict[str, Any] = {
        'cwd': cwd,
        'stdin': subprocess.DEVNULL,
        'stdout': subprocess.DEVNULL,
        'stderr': subprocess.DEVNULL,
    }
    if is_windows():
        kwargs['creationflags'] = (
            getattr(subprocess, 'DETACHED_PROCESS', 0)
            | getattr(subprocess, 'CREATE_NEW_PROCESS_GROUP', 0)
        )
    else:
        kwargs['start_new_session'] = True
    return subprocess.Popen([exe_path], **kwargs)


async def start_server(app_id: int, install_path: str) -> Dict[str, Any]:
    """Launch a server's executable from its install directory."""
    entry = get_catalog_entry(app_id)
    if entry is None:
        return _unknown_app(app_id)

    logger.info(f"[Lifecycle] Starting server {app_id} at: {install_path}")

    if not os.path.isdir(install_path):
        logger.error(f"[Lifecycle] Install directory not found: {install_path}")
        return {'success': False, 'error': f"Install directory not found: {install_path}"}

    exe_path = os.path.join(install_path, entry.executable_name)
    if not os.path.exists(exe_path):
        logger.error(f"[Lifecycle] Server executable not found: {exe_path}")
        return {
            'success': False,
            'error': f"Server executable not found at: {exe_path}. Please verify the installation path."
        }

    try:
        proc = _spawn_detached(exe_path, install_path)
    except OSError as e:
        logger.error(f"[Lifecycle] Spawn error for {entry.executable_name}: {e}")
        return {'success': False, 'error': str(e)}

    logger.info(f"[Lifecycle] Server spawned: {entry.executable_name} (pid {proc.pid})")
    return {'success': True, 'pid': proc.pid}


async def stop_server(app_id: int) -> Dict[str, Any]:
    """Force-stop a server. Stopping a server that is not running succeeds."""
    entry = get_catalog_entry(app_id)
    if entry is None:
        return _unknown_app(app_id)

    stopped = await kill_process(entry.executable_name)
    logger.info(f"[Lifecycle] Stop command sent for server {app_id}")
    return {'success': True, 'stopped': stopped}


async def auto_update_server(
    app_id: int,
    install_path: str,
    library_root: str,
    wait_seconds: Optional[float] = None
) -> Dict[str, Any]:
    """Stop a server, give Steam time to update it and restart it if the build changed.

    Steam applies the update itself; a changed buildid in the app manifest is
    the only signal that it did.
    """
    entry = get_catalog_entry(app_id)
    if entry is None:
        return _unknown_app(app_id)

    if wait_seconds is None:
        wait_seconds = get_setting("update_wait_seconds")

    current_build_id = await get_server_build_id(app_id, library_root)
    logger.info(f"[Lifecycle] Current buildid for app {app_id}: {current_build_id}")

    await kill_process(entry.executable_name)
    logger.info(f"[Lifecycle] Waiting {wait_seconds}s for Steam to apply updates to {app_id}")
    await asyncio.sleep(wait_seconds)

    new_build_id = await get_server_build_id(app_id, library_root)
    if new_build_id is None or new_build_id == current_build_id:
        logger.info(f"[Lifecycle] No update available for server {app_id}")
        return {'success': False, 'error': 'No update available'}

    logger.info(f"[Lifecycle] Update detected for server {app_id} ({current_build_id} -> {new_build_id}), restarting")
    result = await start_server(app_id, install_path)
    if not result.get('success'):
        return result

    return {
        'success': True,
        'previous_build_id': current_build_id,
        'build_id': new_build_id,
    }
