"""
Logging setup for applications embedding meshprov.

meshprov itself never configures handlers; each module logs through its own
``logging.getLogger(__name__)`` logger:

- ``meshprov.core.provisioner``: DEBUG for every allocation accepted or ignored,
  with the AllocationRejection value when ignored.
- ``meshprov.core.ranges``: DEBUG when a RangeSet mutation coalesces ranges.
- ``meshprov.io.network``: DEBUG for admissions and saves, WARNING for overlaps
  admitted under ``conflict_policy="warn"``.
"""

from __future__ import annotations

import logging
from pathlib import Path


def configure_logging(level: int | str = logging.INFO, log_paths: list[str] | None = None) -> None:
    """
    Route meshprov's loggers to stderr (and optional files) via the root logger.

    Does nothing when the root logger already has handlers, so an application's
    own logging setup always wins. Passing ``"DEBUG"`` surfaces allocation and
    coalescing decisions from ``meshprov.core``.

    Args:
        level: Logging level, as an int or a level name such as "DEBUG".
        log_paths: Optional files to log to in addition to stderr.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    handlers: list[logging.Handler] | None = None
    if log_paths:
        handlers = [logging.StreamHandler()]
        for entry in log_paths:
            path = Path(entry)
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(path, encoding="utf-8"))
    kwargs: dict = {
        "level": level,
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    }
    if handlers:
        kwargs["handlers"] = handlers
    logging.basicConfig(**kwargs)
