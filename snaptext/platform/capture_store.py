from __future__ import annotations
from datetime import datetime
from pathlib import Path
from typing import Union
import uuid

from snaptext.uris import path_to_uri


class DirectoryCaptureStore:
    """Fresh, never-reused file locations for camera captures under one directory."""

    def __init__(self, directory: Union[str, Path], prefix: str = "IMG", suffix: str = ".jpg"):
        self.directory = Path(directory)
        self.prefix = prefix
        self.suffix = suffix

    def new_output_location(self) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = f"{self.prefix}_{stamp}_{uuid.uuid4().hex[:8]}{self.suffix}"
        return path_to_uri(self.directory / name)
