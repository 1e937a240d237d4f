# snaptext/platform/camera.py
from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

import cv2

from snaptext.logging import get_logger
from snaptext.model import AcquisitionResult
from snaptext.uris import uri_to_path

logger = get_logger("OpenCVCamera")

Confirm = Callable[[str], bool]


class OpenCVCamera:
    """
    Camera capability backed by cv2.VideoCapture.
    Grabs one frame on a worker thread and writes it to the given location.
    If a confirm callback is set and returns False, the file is removed and
    the capture counts as cancelled.
    """

    def __init__(self, device_index: int = 0, warmup_frames: int = 5, confirm: Optional[Confirm] = None):
        self.device_index = device_index
        self.warmup_frames = max(1, warmup_frames)
        self.confirm = confirm
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="camera")

    def capture(self, output_uri: str) -> Future[AcquisitionResult]:
        return self._executor.submit(self._capture, output_uri)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _capture(self, output_uri: str) -> AcquisitionResult:
        path = uri_to_path(output_uri)
        cap = cv2.VideoCapture(self.device_index)
        try:
            if not cap.isOpened():
                return AcquisitionResult.failed(f"camera {self.device_index} is not available")

            # First frames are often dark while auto-exposure settles
            frame = None
            for _ in range(self.warmup_frames):
                ok, frame = cap.read()
                if not ok:
                    return AcquisitionResult.failed(f"could not read a frame from camera {self.device_index}")
        finally:
            cap.release()

        path.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(path), frame):
            return AcquisitionResult.failed(f"could not write {path}")
        logger.info(f"Captured {frame.shape[1]}x{frame.shape[0]} frame to {path}")

        if self.confirm is not None and not self.confirm(output_uri):
            path.unlink(missing_ok=True)
            return AcquisitionResult.cancelled()
        return AcquisitionResult.succeeded(output_uri)
