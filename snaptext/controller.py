"""Capture-recognize controller.

Owns the screen state (selected image reference, recognized text) and drives
two independent flows:

* acquisition: permission check -> camera or gallery -> display image
* recognition: decode -> OCR call -> display text

External capabilities answer with futures. Every completion is posted back
onto the event loop, so state only ever changes on the UI thread.
"""
from __future__ import annotations
from concurrent.futures import CancelledError, Future
from typing import Any, Callable, Optional, Sequence

from snaptext.config import SnaptextConfig
from snaptext.errors import RecognitionTimeout
from snaptext.logging import get_logger
from snaptext.model import (
    AcquisitionPhase,
    AcquisitionResult,
    AcquisitionStatus,
    ImageSource,
    Permission,
    PermissionGrants,
    RecognitionPhase,
    RequestCode,
)
from snaptext.ocr.ports import TextRecognitionService
from snaptext.platform.ports import CameraCapability, CaptureStore, GalleryPicker, PermissionAuthority
from snaptext.preprocess.ports import ImageDecoder
from snaptext.ui.looper import EventLoop, TimerHandle
from snaptext.ui.ports import ProgressIndicator, ScreenView

logger = get_logger(__name__)

PICK_IMAGE_FIRST = "Pick Image First"
CANCELLED = "Cancelled"
CAMERA_PERMISSIONS_REQUIRED = "Camera and Storage permission are required."
STORAGE_PERMISSION_REQUIRED = "Storage permission is required."
PREPARING_IMAGE = "Preparing Image"
RECOGNIZING_TEXT = "Recognizing text"

CAMERA_PERMISSIONS = (Permission.CAMERA, Permission.WRITE_STORAGE)
STORAGE_PERMISSIONS = (Permission.READ_STORAGE,)


class _RecognitionAttempt:
    def __init__(self, future: Future[str]):
        self.future = future
        self.timer: Optional[TimerHandle] = None


class CaptureRecognizeController:
    def __init__(
        self,
        *,
        view: ScreenView,
        indicator: ProgressIndicator,
        loop: EventLoop,
        permissions: PermissionAuthority,
        capture_store: CaptureStore,
        camera: CameraCapability,
        gallery: GalleryPicker,
        decoder: ImageDecoder,
        recognizer: TextRecognitionService,
        config: Optional[SnaptextConfig] = None,
    ):
        self._view = view
        self._indicator = indicator
        self._loop = loop
        self._permissions = permissions
        self._capture_store = capture_store
        self._camera = camera
        self._gallery = gallery
        self._decoder = decoder
        self._recognizer = recognizer
        self.config = config or SnaptextConfig()

        self.image_uri: Optional[str] = None
        self.recognized_text: Optional[str] = None
        self.acquisition_phase = AcquisitionPhase.IDLE
        self.recognition_phase = RecognitionPhase.IDLE

        self._attempt: Optional[_RecognitionAttempt] = None
        self._closed = False

    def __enter__(self) -> CaptureRecognizeController:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def is_busy(self) -> bool:
        return (
            self.acquisition_phase is not AcquisitionPhase.IDLE
            or self.recognition_phase is not RecognitionPhase.IDLE
        )

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Acquisition
    # -------------------------------------------------------------------------
    def choose_image_source(self) -> None:
        self._ensure_open()
        self._view.show_source_menu(list(ImageSource), self._on_source_selected)

    def acquire_from_camera(self) -> None:
        self._ensure_open()
        if all(self._permissions.is_granted(p) for p in CAMERA_PERMISSIONS):
            self._capture_with_camera()
        else:
            self._request_permissions(CAMERA_PERMISSIONS, RequestCode.CAMERA)

    def acquire_from_gallery(self) -> None:
        self._ensure_open()
        if all(self._permissions.is_granted(p) for p in STORAGE_PERMISSIONS):
            self._pick_from_gallery()
        else:
            self._request_permissions(STORAGE_PERMISSIONS, RequestCode.STORAGE)

    def handle_permission_result(self, request_code: int, grants: PermissionGrants) -> None:
        if self._closed:
            return
        self.acquisition_phase = AcquisitionPhase.IDLE

        if grants.is_empty():
            logger.info(f"Permission request {request_code} was interrupted")
            return

        if request_code == RequestCode.CAMERA:
            if grants.all_granted(*CAMERA_PERMISSIONS):
                self._capture_with_camera()
            else:
                self._notify(CAMERA_PERMISSIONS_REQUIRED)
        elif request_code == RequestCode.STORAGE:
            if grants.all_granted(*STORAGE_PERMISSIONS):
                self._pick_from_gallery()
            else:
                self._notify(STORAGE_PERMISSION_REQUIRED)
        else:
            logger.debug(f"Ignoring permission result for unknown request code {request_code}")

    def _on_source_selected(self, source: Optional[ImageSource]) -> None:
        if source is ImageSource.CAMERA:
            self.acquire_from_camera()
        elif source is ImageSource.GALLERY:
            self.acquire_from_gallery()
        else:
            logger.debug("Source menu dismissed")

    def _request_permissions(self, permissions: Sequence[Permission], request_code: RequestCode) -> None:
        self.acquisition_phase = AcquisitionPhase.AWAITING_PERMISSION
        future = self._permissions.request(permissions, request_code)
        self._deliver(future, self._on_permissions_answered, request_code)

    def _on_permissions_answered(self, request_code: RequestCode, future: Future[PermissionGrants]) -> None:
        if self._closed:
            return
        try:
            grants = future.result()
        except Exception as e:
            logger.warning(f"Permission request {int(request_code)} failed: {e!r}")
            grants = PermissionGrants()
        self.handle_permission_result(request_code, grants)

    def _capture_with_camera(self) -> None:
        # Committed to image_uri only once the camera reports success
        output_uri = self._capture_store.new_output_location()
        self.acquisition_phase = AcquisitionPhase.AWAITING_EXTERNAL_RESULT
        logger.info(f"Launching camera, output={output_uri}")
        self._deliver(self._camera.capture(output_uri), self._on_acquisition_done, output_uri)

    def _pick_from_gallery(self) -> None:
        self.acquisition_phase = AcquisitionPhase.AWAITING_EXTERNAL_RESULT
        logger.info(f"Launching gallery picker, filter={self.config.mime_filter}")
        self._deliver(self._gallery.pick(self.config.mime_filter), self._on_acquisition_done, None)

    def _on_acquisition_done(self, output_uri: Optional[str], future: Future[AcquisitionResult]) -> None:
        if self._closed:
            return
        self.acquisition_phase = AcquisitionPhase.IDLE

        try:
            result = future.result()
        except CancelledError:
            result = AcquisitionResult.cancelled()
        except Exception as e:
            result = AcquisitionResult.failed(str(e))

        if result.status is AcquisitionStatus.CANCELLED:
            self._notify(CANCELLED)
            return

        uri = result.uri or output_uri
        if result.status is AcquisitionStatus.FAILED or uri is None:
            error = result.error or "no image was returned"
            logger.warning(f"Image acquisition failed: {error}")
            self._notify(f"Failed to acquire image due to {error}")
            return

        self.image_uri = uri
        self._view.show_image(uri)
        logger.info(f"Selected image {uri}")

    # -------------------------------------------------------------------------
    # Recognition
    # -------------------------------------------------------------------------
    def recognize_text(self) -> Optional[Future[str]]:
        """
        Start a recognition call for the selected image.
        Returns the in-flight future, or None when no call was made.
        """
        self._ensure_open()
        if self.image_uri is None:
            self._notify(PICK_IMAGE_FIRST)
            return None
        if self._attempt is not None:
            logger.info("Recognition already in progress; ignoring request")
            return self._attempt.future

        self.recognition_phase = RecognitionPhase.PREPARING
        self._indicator.show(PREPARING_IMAGE)
        try:
            image = self._decoder.decode(self.image_uri)
        except Exception as e:
            self._finish_recognition()
            self._notify(f"Failed to prepare image due to {e}")
            return None

        self.recognition_phase = RecognitionPhase.AWAITING_RECOGNITION
        self._indicator.set_message(RECOGNIZING_TEXT)
        try:
            future = self._recognizer.process(image)
        except Exception as e:
            logger.warning(f"Could not start recognition: {e}")
            self._finish_recognition()
            self._notify(f"Failed to recognize text due to {e}")
            return None
        attempt = _RecognitionAttempt(future)
        self._attempt = attempt

        timeout = self.config.recognition_timeout
        if timeout is not None:
            attempt.timer = self._loop.call_later(timeout, self._on_recognition_timeout, attempt, timeout)
        self._deliver(attempt.future, self._on_recognition_done, attempt)
        return attempt.future

    def _on_recognition_done(self, attempt: _RecognitionAttempt, future: Future[str]) -> None:
        if attempt is not self._attempt:
            logger.debug("Ignoring result of a recognition that is no longer current")
            return
        self._finish_recognition()

        try:
            text = future.result()
        except CancelledError:
            self._notify("Failed to recognize text due to recognition was cancelled")
            return
        except Exception as e:
            logger.warning(f"Recognition failed: {e}")
            self._notify(f"Failed to recognize text due to {e}")
            return

        self.recognized_text = text
        self._view.show_text(text)
        logger.info(f"Recognized {len(text)} character(s)")

    def _on_recognition_timeout(self, attempt: _RecognitionAttempt, timeout: float) -> None:
        if attempt is not self._attempt:
            return
        attempt.future.cancel()
        self._finish_recognition()
        error = RecognitionTimeout(f"recognition timed out after {timeout:g}s")
        logger.warning(str(error))
        self._notify(f"Failed to recognize text due to {error}")

    def _finish_recognition(self) -> None:
        attempt, self._attempt = self._attempt, None
        if attempt is not None and attempt.timer is not None:
            attempt.timer.cancel()
        self._indicator.dismiss()
        self.recognition_phase = RecognitionPhase.IDLE

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    def close(self) -> None:
        """Tear down the screen: drop state, cancel in-flight work, ignore late callbacks."""
        if self._closed:
            return
        self._closed = True
        if self._attempt is not None:
            self._attempt.future.cancel()
        self._finish_recognition()
        self.acquisition_phase = AcquisitionPhase.IDLE
        self.image_uri = None
        self.recognized_text = None

    # ---------- internal helpers ----------

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("controller is closed")

    def _deliver(self, future: Future, handler: Callable[..., None], *args: Any) -> None:
        future.add_done_callback(lambda f: self._loop.post(handler, *args, f))

    def _notify(self, message: str) -> None:
        logger.info(f"Notify: {message}")
        self._view.show_toast(message)
