"""
Process helpers: liveness checks, stopping servers and running external tools.

Liveness is a deliberately loose heuristic. On Windows the tasklist output
only has to contain the image name; elsewhere pgrep -f matches the whole
command line, so any process mentioning the executable counts as running.
"""
import asyncio
import logging
import ntpath
import os
import subprocess
from typing import Any, List, Optional, Tuple

from ..settings import get_setting
from .platform import is_windows

logger = logging.getLogger(__name__)


# Default for timeout arguments: read command_timeout from settings
FROM_SETTINGS = object()


def _command_timeout(timeout: Any = FROM_SETTINGS) -> Optional[float]:
    if timeout is FROM_SETTINGS:
        return get_setting("command_timeout")
    return timeout


def is_process_running(executable_name: str, timeout: Any = FROM_SETTINGS) -> bool:
    """Check whether a process with this executable name is running.

    Never raises; any failure of the underlying utility means "not running".
    Callers checking many servers pass timeout (None for no bound) so the
    settings file is read once per pass.
    """
    timeout = _command_timeout(timeout)
    try:
        if is_windows():
            exe_name = ntpath.basename(executable_name)
            result = subprocess.run(
                ['tasklist', '/FI', f'IMAGENAME eq {exe_name}'],
                capture_output=True, text=True, check=True,
                timeout=timeout,
            )
            running = exe_name in result.stdout
            logger.debug(f"[Process] Check for {exe_name}: {'RUNNING' if running else 'NOT FOUND'}")
            return running

        subprocess.run(
            ['pgrep', '-f', executable_name],
            capture_output=True, check=True,
            timeout=timeout,
        )
        logger.debug(f"[Process] Check for {executable_name}: RUNNING")
        return True
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"[Process] Check for {executable_name}: NOT FOUND ({e})")
        return False


async def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    timeout: Any = FROM_SETTINGS
) -> Tuple[int, str, str]:
    """Run an external command and wait for it without blocking other tasks.

    Returns (returncode, stdout, stderr). Raises OSError if the program cannot
    be started and asyncio.TimeoutError if the timeout (the command_timeout setting unless
    given) is exceeded.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    timeout = _command_timeout(timeout)
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning(f"[Process] Command timed out after {timeout}s: {cmd[0]}")
        raise
    return (
        proc.returncode,
        stdout.decode(errors='replace') if stdout else '',
        stderr.decode(errors='replace') if stderr else '',
    )


async def kill_process(executable_name: str) -> bool:
    """Force-stop every process started from executable_name.

    Returns True if the kill utility reported a match. A process that was not
    running is not an error.
    """
    exe_stem = os.path.splitext(ntpath.basename(executable_name))[0]
    if is_windows():
        cmd = ['taskkill', '/F', '/IM', f'{exe_stem}.exe']
    else:
        cmd = ['pkill', '-f', exe_stem]

    try:
        returncode, _, stderr = await run_command(cmd)
    except (OSError, asyncio.TimeoutError) as e:
        logger.warning(f"[Process] Could not run {cmd[0]} for {exe_stem}: {e}")
        return False

    if returncode != 0:
        logger.debug(f"[Process] {exe_stem} was not running ({stderr.strip()})")
        return False
    logger.info(f"[Process] Stopped {exe_stem}")
    return True
