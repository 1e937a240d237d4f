from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from snaptext.errors import ConfigError
from snaptext.preprocess.model import PreprocessConfig


@dataclass(frozen=True)
class SnaptextConfig:
    lang: str = "eng"
    # seconds, None waits forever. Expiry abandons the call but cannot stop a
    # running Tesseract process; it keeps its worker until it returns, so raise
    # ocr_workers if later recognitions should not queue behind a hung one.
    recognition_timeout: Optional[float] = 30.0
    capture_dir: str = "captures"
    camera_index: int = 0
    mime_filter: str = "image/*"
    ocr_workers: int = 1
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)

    def __post_init__(self) -> None:
        if not self.lang:
            raise ConfigError("lang must not be empty")
        if self.recognition_timeout is not None and self.recognition_timeout <= 0:
            raise ConfigError("recognition_timeout must be > 0 when provided")
        if self.camera_index < 0:
            raise ConfigError("camera_index must be >= 0")
        if "/" not in self.mime_filter:
            raise ConfigError("mime_filter must look like 'type/subtype', e.g. 'image/*'")
        if self.ocr_workers < 1:
            raise ConfigError("ocr_workers must be >= 1")

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> SnaptextConfig:
        known = {f.name for f in fields(SnaptextConfig)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        values = dict(d)
        try:
            if isinstance(values.get("preprocess"), dict):
                values["preprocess"] = PreprocessConfig(**values["preprocess"])
            return SnaptextConfig(**values)
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e

    def with_overrides(self, **overrides: Any) -> SnaptextConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_config(path: Union[str, Path]) -> SnaptextConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config not found: {path.resolve()}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return SnaptextConfig.from_dict(data)
