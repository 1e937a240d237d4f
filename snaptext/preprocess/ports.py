# snaptext/preprocess/ports.py
from typing import Protocol

import numpy as np
from PIL import Image

from snaptext.model import InputImage


class ImagePreprocessorPort(Protocol):
    """
    Preprocessing capability: takes a decoded RGB image, returns a pixel array for OCR.
    """
    def preprocess(self, image: Image.Image) -> np.ndarray: ...


class ImageDecoder(Protocol):
    """
    Turns a selected image reference into a decoded image.
    Raises ImageDecodeError when the reference cannot be opened or decoded.
    """
    def decode(self, uri: str) -> InputImage: ...
