"""Root logger configuration for the server manager process."""

import logging
import os
import sys
from typing import Optional

from ..settings import LOG_FILE, get_setting

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = LOG_FILE) -> None:
    """Configure root logging once: stdout plus an optional log file.

    Level precedence: argument, SSM_LOG_LEVEL, settings file, INFO.
    """
    level_name = (level or os.environ.get("SSM_LOG_LEVEL") or get_setting("log_level") or "INFO").upper()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            os.makedirs(os.path.dirname(log_file), exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            print(f"Could not open log file {log_file}: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )
