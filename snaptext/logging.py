# snaptext/logging.py
from __future__ import annotations
from typing import Union
import logging

_ROOT = "snaptext"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"


def _root_logger() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Loggers live under the "snaptext" namespace so one handler and one level
    cover the whole package.
    """
    root = _root_logger()
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def set_level(level: Union[int, str]) -> None:
    if isinstance(level, str):
        level = level.upper()
    _root_logger().setLevel(level)
