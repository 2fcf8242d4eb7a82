# Services package
from .artwork_service import fetch_cover_art, cover_art_url, create_http_session
from .backup_service import backup_server_save, backup_filename, ensure_backup_location
from .discovery_service import find_installed_servers, match_install_folder
from .lifecycle_service import start_server, stop_server, auto_update_server

__all__ = [
    'fetch_cover_art',
    'cover_art_url',
    'create_http_session',
    'backup_server_save',
    'backup_filename',
    'ensure_backup_location',
    'find_installed_servers',
    'match_install_folder',
    'start_server',
    'stop_server',
    'auto_update_server',
]
