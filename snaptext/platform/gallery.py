from __future__ import annotations
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Optional
import mimetypes

from snaptext.logging import get_logger
from snaptext.model import AcquisitionResult
from snaptext.uris import path_to_uri

logger = get_logger(__name__)

Chooser = Callable[[str], Optional[str]]


def matches_mime_filter(mime_type: Optional[str], mime_filter: str) -> bool:
    """'image/*' matches any image type; 'image/png' only itself."""
    if not mime_type:
        return False
    want_type, _, want_sub = mime_filter.partition("/")
    got_type, _, got_sub = mime_type.partition("/")
    if want_type not in ("*", got_type):
        return False
    return want_sub in ("*", got_sub)


class FileGalleryPicker:
    """
    Gallery picker over the local filesystem. The chooser is asked for a path
    (it receives the content filter); a blank answer cancels the pick.
    """

    def __init__(self, chooser: Chooser):
        self._chooser = chooser

    def pick(self, mime_filter: str = "image/*") -> Future[AcquisitionResult]:
        future: Future[AcquisitionResult] = Future()
        try:
            answer = self._chooser(mime_filter)
        except EOFError:
            answer = None
        future.set_result(self._resolve(answer, mime_filter))
        return future

    def _resolve(self, answer: Optional[str], mime_filter: str) -> AcquisitionResult:
        if answer is None or not answer.strip():
            return AcquisitionResult.cancelled()

        path = Path(answer.strip()).expanduser()
        if not path.is_file():
            return AcquisitionResult.failed(f"{path} does not exist")

        mime_type, _ = mimetypes.guess_type(path.name)
        if not matches_mime_filter(mime_type, mime_filter):
            return AcquisitionResult.failed(f"{path.name} is not {mime_filter}")

        logger.debug(f"Picked {path} ({mime_type})")
        return AcquisitionResult.succeeded(path_to_uri(path))
