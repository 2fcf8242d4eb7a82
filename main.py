import sys
import asyncio
import logging
from typing import Any, Dict, Optional

from servermanager import __version__, get_catalog_entry
from servermanager.config import (
    ConfigError,
    load_server_config,
    save_server_config,
)
from servermanager.services import (
    auto_update_server,
    backup_server_save,
    ensure_backup_location,
    find_installed_servers,
    start_server,
    stop_server,
)
from servermanager.settings import get_setting, set_setting
from servermanager.utils import (
    get_common_steam_paths,
    get_platform,
    get_server_build_id,
)
from servermanager.utils.log import setup_logging
from servermanager.utils.process import run_command

setup_logging()
logger = logging.getLogger("servermanager")


class Plugin:
    """RPC surface called by the desktop shell.

    Every method returns a dict with a 'success' flag; failures carry an
    'error' message instead of raising.
    """

    async def get_app_version(self) -> str:
        return __version__

    async def check_diagnostics(self) -> Dict[str, Any]:
        """Report whether the host can run the external tools the manager needs."""
        diagnostics: Dict[str, Any] = {'platform': get_platform()}
        try:
            returncode, _, _ = await run_command([sys.executable, '--version'])
            diagnostics['can_execute_processes'] = returncode == 0
        except (OSError, asyncio.TimeoutError):
            diagnostics['can_execute_processes'] = False

        try:
            steam_paths = get_common_steam_paths()
            diagnostics['steam_found'] = len(steam_paths) > 0
            diagnostics['steam_paths'] = steam_paths
        except Exception as e:
            logger.error(f"[Diagnostics] Error looking up Steam paths: {e}")
            diagnostics['steam_found'] = False
            diagnostics['steam_error'] = str(e)
        return diagnostics

    async def get_steam_paths(self) -> Dict[str, Any]:
        try:
            return {'success': True, 'paths': get_common_steam_paths()}
        except Exception as e:
            logger.error(f"[SteamPaths] Error getting Steam paths: {e}")
            return {'success': False, 'error': str(e), 'paths': []}

    async def get_steam_servers(self, path: Optional[str] = None) -> Dict[str, Any]:
        """Discover installed servers under path (Steam root or volume) or the default install."""
        try:
            servers = await find_installed_servers(path)
            return {'success': True, 'servers': [s.to_wire() for s in servers]}
        except Exception as e:
            logger.error(f"[Discovery] Error finding Steam servers: {e}", exc_info=True)
            return {'success': False, 'error': str(e), 'servers': []}

    async def get_server_build_id(self, app_id: int, library_root: str) -> Dict[str, Any]:
        build_id = await get_server_build_id(app_id, library_root)
        return {'success': build_id is not None, 'build_id': build_id}

    async def run_server(self, app_id: int, install_path: str) -> Dict[str, Any]:
        try:
            return await start_server(app_id, install_path)
        except Exception as e:
            logger.error(f"[Lifecycle] Error starting server {app_id}: {e}")
            return {'success': False, 'error': str(e)}

    async def stop_server(self, app_id: int) -> Dict[str, Any]:
        try:
            return await stop_server(app_id)
        except Exception as e:
            logger.error(f"[Lifecycle] Error stopping server {app_id}: {e}")
            return {'success': False, 'error': str(e)}

    async def auto_update_server(self, app_id: int, install_path: str, steam_path: str) -> Dict[str, Any]:
        """Update-and-restart cycle. steam_path is the library root holding the manifest."""
        try:
            return await auto_update_server(app_id, install_path, steam_path)
        except Exception as e:
            logger.error(f"[Lifecycle] Error during auto-update of {app_id}: {e}")
            return {'success': False, 'error': str(e)}

    async def backup_server_save(
        self,
        app_id: int,
        install_path: str,
        backup_path: Optional[str] = None
    ) -> Dict[str, Any]:
        backup_path = backup_path or get_setting("backup_path")
        if not backup_path:
            return {'success': False, 'error': 'No backup location configured'}

        logger.info(f"[Backup] Backing up server {app_id} to {backup_path}")
        try:
            backup_file = await backup_server_save(app_id, install_path, backup_path)
        except Exception as e:
            logger.error(f"[Backup] Error creating backup: {e}")
            return {'success': False, 'error': str(e)}

        if backup_file is None:
            return {'success': False, 'error': 'Failed to create backup'}
        return {'success': True, 'backup_path': backup_file}

    async def set_backup_location(self, backup_path: str) -> Dict[str, Any]:
        if not ensure_backup_location(backup_path):
            return {'success': False, 'error': f"Cannot create backup directory: {backup_path}"}
        set_setting("backup_path", backup_path)
        logger.info(f"[Backup] Backup location set to: {backup_path}")
        return {'success': True}

    async def get_server_config(self, app_id: int, install_path: str) -> Dict[str, Any]:
        try:
            content, fmt = load_server_config(app_id, install_path)
            return {'success': True, 'content': content, 'format': fmt}
        except FileNotFoundError as e:
            return {'success': False, 'error': f"Config file not found: {e.filename}"}
        except (ConfigError, OSError) as e:
            logger.error(f"[Config] Error loading config for {app_id}: {e}")
            return {'success': False, 'error': str(e)}

    async def save_server_config(self, app_id: int, install_path: str, content: Dict[str, Any]) -> Dict[str, Any]:
        if get_catalog_entry(app_id) is None:
            return {'success': False, 'error': f"Unknown server app ID: {app_id}"}
        try:
            path = save_server_config(app_id, install_path, content)
            return {'success': True, 'path': path}
        except (ConfigError, OSError) as e:
            logger.error(f"[Config] Error saving config for {app_id}: {e}")
            return {'success': False, 'error': str(e)}
