# snaptext/ocr/service.py
from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
import os

import cv2

from snaptext.errors import RecognitionError
from snaptext.logging import get_logger
from snaptext.model import InputImage
from snaptext.ocr.ports import OCREngine

logger = get_logger(__name__)


class OCRService:
    """
    Runs the injected engine off the caller's thread.
    process() returns a future so the UI thread never blocks on OCR.
    """

    def __init__(self, engine: OCREngine, *, max_workers: int = 1, cap_native_threads: bool = True):
        """
        :param engine: Any implementation of OCREngine (e.g., TesseractOCREngine)
        :param max_workers: size of the recognition worker pool.
                            A call abandoned after a timeout still holds its worker
                            until the engine returns.
        :param cap_native_threads: If True, reduce native lib threads (OpenMP/OpenCV)
                                   so a single recognition does not saturate the machine.
        """
        self.engine = engine
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ocr")

        if cap_native_threads:
            os.environ.setdefault("OMP_THREAD_LIMIT", "1")
            cv2.setNumThreads(1)

    def recognize(self, image: InputImage) -> str:
        """
        Do OCR on a single decoded image and return text.
        Engine errors are logged and re-raised as RecognitionError.
        """
        try:
            return self.engine.recognize(image)
        except RecognitionError:
            raise
        except Exception as e:
            logger.error(f"OCRService.recognize failed: {e}")
            raise RecognitionError(str(e)) from e

    def process(self, image: InputImage) -> Future[str]:
        return self._executor.submit(self.recognize, image)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)
