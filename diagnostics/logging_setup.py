from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

LOGGER_NAMES = ("mapper_bus", "mapper_core")
_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"
_HANDLER: Optional[logging.Handler] = None


def configure_logging(level: str = "WARNING", log_path: Optional[Path] = None) -> Dict[str, str]:
    global _HANDLER
    if log_path is not None:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
        handlers = "file"
    else:
        handler = logging.StreamHandler(sys.stderr)
        handlers = "stderr"
    handler.setFormatter(logging.Formatter(_FORMAT))
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        logger.propagate = False
        if _HANDLER is not None:
            logger.removeHandler(_HANDLER)
        logger.addHandler(handler)
    if _HANDLER is not None:
        _HANDLER.close()
    _HANDLER = handler

    return {
        "log_path": str(log_path) if log_path is not None else "",
        "format": "kv",
        "handlers": handlers,
        "logger_names": ",".join(LOGGER_NAMES),
        "level": logging.getLevelName(numeric_level),
    }
