from __future__ import annotations
from typing import Callable, Optional

from snaptext.config import SnaptextConfig
from snaptext.controller import CaptureRecognizeController
from snaptext.logging import get_logger
from snaptext.model import Permission
from snaptext.ocr.ports import OCREngine
from snaptext.ocr.service import OCRService
from snaptext.ocr.tesseract_ocr import TesseractOCREngine
from snaptext.platform.camera import OpenCVCamera
from snaptext.platform.capture_store import DirectoryCaptureStore
from snaptext.platform.gallery import FileGalleryPicker
from snaptext.platform.permissions import LocalPermissionAuthority
from snaptext.preprocess.service import PillowImageDecoder
from snaptext.ui.looper import EventLoop
from snaptext.ui.ports import ProgressIndicator, ScreenView

logger = get_logger(__name__)

ReadLine = Callable[[str], str]


def _answer_yes(answer: str, default: bool = False) -> bool:
    answer = answer.strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


class SnaptextApp:
    """
    Wires the controller to the local adapters and owns their worker pools.
    All interactive questions (permissions, file path, keep photo) go through read_line.
    """

    def __init__(
        self,
        config: SnaptextConfig,
        *,
        view: ScreenView,
        indicator: ProgressIndicator,
        read_line: ReadLine = input,
        grant_all: bool = False,
        engine: Optional[OCREngine] = None,
        loop: Optional[EventLoop] = None,
    ):
        self.config = config
        self.loop = loop or EventLoop()

        self.permissions = LocalPermissionAuthority(
            granted=list(Permission) if grant_all else (),
            prompt=lambda p: _answer_yes(read_line(f"Allow {p.label} access? [y/N] ")),
        )
        self.camera = OpenCVCamera(
            device_index=config.camera_index,
            confirm=lambda uri: _answer_yes(read_line(f"Keep photo {uri}? [Y/n] "), default=True),
        )
        self.ocr = OCRService(
            engine or TesseractOCREngine(lang=config.lang),
            max_workers=config.ocr_workers,
        )
        self.controller = CaptureRecognizeController(
            view=view,
            indicator=indicator,
            loop=self.loop,
            permissions=self.permissions,
            capture_store=DirectoryCaptureStore(config.capture_dir),
            camera=self.camera,
            gallery=FileGalleryPicker(lambda mime: read_line(f"Image path ({mime}, blank to cancel): ")),
            decoder=PillowImageDecoder(config.preprocess),
            recognizer=self.ocr,
            config=config,
        )

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Pump the event loop until no acquisition or recognition is in flight."""
        return self.loop.run_until(lambda: not self.controller.is_busy, timeout=timeout)

    def close(self) -> None:
        self.controller.close()
        self.ocr.shutdown()
        self.camera.shutdown()
        logger.debug("Application closed")

    def __enter__(self) -> SnaptextApp:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
