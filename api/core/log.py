"""
Logging setup for the API process.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger once. Later calls only adjust the level.
    """
    resolved = (level or settings.log_level()).upper()
    if not isinstance(logging.getLevelName(resolved), int):
        resolved = "INFO"
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(resolved)
        return
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
