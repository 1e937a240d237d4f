from __future__ import annotations
from concurrent.futures import Future
from typing import Protocol, Sequence

from snaptext.model import AcquisitionResult, Permission, PermissionGrants, RequestCode


class PermissionAuthority(Protocol):
    def is_granted(self, permission: Permission) -> bool: ...

    def request(
        self, permissions: Sequence[Permission], request_code: RequestCode
    ) -> Future[PermissionGrants]: ...


class CaptureStore(Protocol):
    """Hands out a fresh location for the camera to write into."""
    def new_output_location(self) -> str: ...


class CameraCapability(Protocol):
    def capture(self, output_uri: str) -> Future[AcquisitionResult]: ...


class GalleryPicker(Protocol):
    def pick(self, mime_filter: str) -> Future[AcquisitionResult]: ...
