from concurrent.futures import Future
from typing import Protocol

from snaptext.model import InputImage


class OCREngine(Protocol):
    """
    OCR Engine interface (port).
    Implementations accept a decoded image and return plain text (no bboxes).
    """
    def recognize(self, image: InputImage) -> str:
        ...


class TextRecognitionService(Protocol):
    """
    Asynchronous recognition call. The future resolves to the recognized text,
    or fails with RecognitionError carrying the engine's message.
    """
    def process(self, image: InputImage) -> "Future[str]":
        ...
