"""OS family detection shared by every platform-specific branch."""

import sys

WINDOWS = 'windows'
MACOS = 'macos'
LINUX = 'linux'


def get_platform() -> str:
    """Return 'windows', 'macos' or 'linux' for the running interpreter.

    Anything that is neither Windows nor macOS is treated as a Linux-like
    Unix (BSDs included).
    """
    if sys.platform.startswith('win'):
        return WINDOWS
    if sys.platform == 'darwin':
        return MACOS
    return LINUX


def is_windows() -> bool:
    return get_platform() == WINDOWS
