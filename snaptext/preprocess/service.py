from __future__ import annotations
from typing import Optional

import numpy as np
from PIL import Image, ImageOps

from snaptext.errors import ImageDecodeError
from snaptext.logging import get_logger
from snaptext.model import InputImage
from snaptext.preprocess.model import PreprocessConfig
from snaptext.preprocess.pillow_preprocesser import PillowImagePreprocessor
from snaptext.preprocess.ports import ImagePreprocessorPort
from snaptext.uris import uri_to_path

logger = get_logger("PreprocessorService")


class PreprocessService:
    """
    Core-level use case for image preprocessing.
    Wraps a specific preprocessor (adapter) implementing ImagePreprocessorPort.
    """

    def __init__(self, preprocessor: type[ImagePreprocessorPort]):
        """
        Accepts the preprocessor *class* (adapter type), not instance,
        so we can construct it dynamically with config.
        """
        self._preprocessor_cls = preprocessor

    def run(self, image: Image.Image, config: PreprocessConfig) -> np.ndarray:
        """
        Runs the preprocessing pipeline on a single decoded image.
        Falls back to the unprocessed pixels if the adapter cannot be built or fails.
        """
        try:
            preprocessor = self._preprocessor_cls(**config.to_kwargs())
            return preprocessor.preprocess(image)
        except Exception as e:
            logger.error(f"PreprocessService.run failed: {e}")
            return np.array(image)


class PillowImageDecoder:
    """
    Opens the selected image reference with Pillow and prepares it for OCR.
    """

    def __init__(
        self,
        config: Optional[PreprocessConfig] = None,
        preprocessor: type[ImagePreprocessorPort] = PillowImagePreprocessor,
    ):
        self.config = config or PreprocessConfig()
        self._service = PreprocessService(preprocessor)

    def decode(self, uri: str) -> InputImage:
        try:
            path = uri_to_path(uri)
            with Image.open(path) as img:
                # Respect EXIF orientation from phone cameras
                rgb = ImageOps.exif_transpose(img).convert("RGB")
        except Exception as e:
            logger.warning(f"Could not decode {uri}: {e}")
            raise ImageDecodeError(str(e)) from e

        pixels = self._service.run(rgb, self.config)
        logger.debug(f"Decoded {uri} to {pixels.shape}")
        return InputImage(pixels=pixels, uri=uri)
