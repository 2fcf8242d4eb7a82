# Utils package
from .platform import get_platform, is_windows, WINDOWS, MACOS, LINUX
from .steam_paths import (
    resolve_steam_root,
    find_steam_path,
    find_steam_path_on_volume,
    list_available_volumes,
    get_common_steam_paths,
)
from .library import parse_library_folders, parse_build_id, get_server_build_id
from .process import is_process_running, kill_process

__all__ = [
    'get_platform',
    'is_windows',
    'WINDOWS',
    'MACOS',
    'LINUX',
    'resolve_steam_root',
    'find_steam_path',
    'find_steam_path_on_volume',
    'list_available_volumes',
    'get_common_steam_paths',
    'parse_library_folders',
    'parse_build_id',
    'get_server_build_id',
    'is_process_running',
    'kill_process',
]
