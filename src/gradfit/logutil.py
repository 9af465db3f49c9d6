from __future__ import annotations

import logging
import pathlib
import sys
from typing import Optional

FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(name: str = "gradfit", log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)
    fmt = logging.Formatter(FORMAT)

    # repeated calls (tests, CLI re-entry) must not stack handlers
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        sh = logging.StreamHandler(sys.stdout); sh.setFormatter(fmt); logger.addHandler(sh)
    if log_file:
        path = pathlib.Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        known = {getattr(h, "baseFilename", None) for h in logger.handlers}
        if str(path.resolve()) not in known:
            fh = logging.FileHandler(path); fh.setFormatter(fmt); logger.addHandler(fh)
    return logger
