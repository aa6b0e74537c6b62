# src/dla_growth/utils.py
from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    Configure the dedicated ``dla_growth`` logger.

    Logs go to a single console handler and do not propagate to the root
    logger, which keeps numba's compiler chatter out of the output. Calling
    this again replaces the handler instead of adding a second one.
    """
    logger = logging.getLogger("dla_growth")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load growth parameters from a JSON or TOML file.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
