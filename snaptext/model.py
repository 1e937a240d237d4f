from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Optional, Sequence

import numpy as np


class ImageSource(Enum):
    CAMERA = "camera"
    GALLERY = "gallery"

    @property
    def label(self) -> str:
        return self.name


class Permission(Enum):
    CAMERA = "camera"
    WRITE_STORAGE = "write_storage"
    READ_STORAGE = "read_storage"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class RequestCode(IntEnum):
    CAMERA = 100
    STORAGE = 101


@dataclass(frozen=True)
class PermissionGrants:
    """
    Outcome of one permission request, keyed by permission.
    An empty mapping means the request was interrupted before the user answered.
    """
    outcomes: Dict[Permission, bool] = field(default_factory=dict)

    @classmethod
    def from_results(cls, permissions: Sequence[Permission], results: Sequence[bool]) -> PermissionGrants:
        if len(permissions) != len(results):
            raise ValueError(
                f"got {len(results)} grant result(s) for {len(permissions)} permission(s)"
            )
        return cls(dict(zip(permissions, (bool(r) for r in results))))

    def granted(self, permission: Permission) -> bool:
        return self.outcomes.get(permission, False)

    def all_granted(self, *permissions: Permission) -> bool:
        return bool(permissions) and all(self.granted(p) for p in permissions)

    def is_empty(self) -> bool:
        return not self.outcomes


class AcquisitionStatus(Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class AcquisitionResult:
    status: AcquisitionStatus
    uri: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, uri: str) -> AcquisitionResult:
        return cls(AcquisitionStatus.SUCCESS, uri=uri)

    @classmethod
    def cancelled(cls) -> AcquisitionResult:
        return cls(AcquisitionStatus.CANCELLED)

    @classmethod
    def failed(cls, error: str) -> AcquisitionResult:
        return cls(AcquisitionStatus.FAILED, error=error)


class AcquisitionPhase(Enum):
    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    AWAITING_EXTERNAL_RESULT = "awaiting_external_result"


class RecognitionPhase(Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    AWAITING_RECOGNITION = "awaiting_recognition"


@dataclass(frozen=True, eq=False)
class InputImage:
    """Decoded image handed to the recognition service."""
    pixels: np.ndarray
    uri: str

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])
