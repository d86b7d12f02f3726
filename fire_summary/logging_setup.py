"""Logging setup for the fire summary pipeline."""
from __future__ import annotations
import logging
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
QUIET_LOGGERS = ("fiona", "pyogrio", "matplotlib", "PIL")


def setup_logging(level: str = "INFO", fmt: str | None = None, log_file: str | Path | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level.

    With ``log_file`` the run is also written to that file (directory created if absent).
    """
    root = logging.getLogger()
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    fmt = fmt or DEFAULT_FORMAT
    if root.handlers:
        root.setLevel(lvl)  # already configured (pytest, notebook, second run)
    else:
        logging.basicConfig(level=lvl, format=fmt)
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        already = any(isinstance(h, logging.FileHandler) and Path(h.baseFilename) == path.resolve()
                      for h in root.handlers)
        if not already:
            handler = logging.FileHandler(path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(fmt))
            root.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
