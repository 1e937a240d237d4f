# snaptext/preprocess/pillow_preprocesser.py
from typing import Optional

import cv2
import numpy as np
from PIL import Image, ImageEnhance

from snaptext.logging import get_logger

logger = get_logger("PillowImagePreprocessor")

MAX_PIXELS = 150_000_000


class PillowImagePreprocessor:
    """
    Concrete implementation of ImagePreprocessorPort using PIL + OpenCV.
    Single-image API: PIL image (RGB) -> numpy array (RGB, or 2-D when grayscale).
    """

    def __init__(
        self,
        *,
        contrast: float = 1.0,
        grayscale: bool = False,
        upscale_factor: Optional[float] = None,
        denoise: bool = False,
        denoise_strength: int = 10,
        denoise_template_window_size: int = 7,
    ):
        self.contrast = contrast
        self.grayscale = grayscale
        self.upscale_factor = upscale_factor
        self.denoise = denoise
        self.denoise_strength = denoise_strength
        self.denoise_template_window_size = denoise_template_window_size

    # ---------- internal helpers ----------

    def _enhance_contrast(self, pil_image: Image.Image) -> Image.Image:
        if self.contrast != 1.0:
            enhancer = ImageEnhance.Contrast(pil_image)
            return enhancer.enhance(self.contrast)
        return pil_image

    def _upscale(self, image: np.ndarray) -> np.ndarray:
        if self.upscale_factor and self.upscale_factor > 1.0:
            orig_h, orig_w = image.shape[:2]
            new_w = int(orig_w * self.upscale_factor)
            new_h = int(orig_h * self.upscale_factor)

            if new_w * new_h > MAX_PIXELS:
                logger.warning(
                    f"Skipping upscale: target [{new_w}x{new_h}] exceeds {MAX_PIXELS} pixels"
                )
                return image

            return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_CUBIC)
        return image

    def _apply_denoise(self, image: np.ndarray) -> np.ndarray:
        if image.ndim == 2:
            return cv2.fastNlMeansDenoising(
                image,
                h=self.denoise_strength,
                templateWindowSize=self.denoise_template_window_size,
            )
        return cv2.fastNlMeansDenoisingColored(
            image,
            h=self.denoise_strength,
            hColor=self.denoise_strength,
            templateWindowSize=self.denoise_template_window_size,
        )

    # ---------- main API ----------

    def preprocess(self, image: Image.Image) -> np.ndarray:
        """
        Perform preprocessing on a single decoded image.
        On any failure the unprocessed pixels are returned.
        """
        try:
            pil_img = self._enhance_contrast(image)

            if self.grayscale:
                pil_img = pil_img.convert("L")

            img = np.array(pil_img)
            img = self._upscale(img)

            if self.denoise:
                if img.dtype != np.uint8:
                    img = img.astype(np.uint8)
                img = self._apply_denoise(img)

            return img

        except Exception:
            logger.exception("Failed to preprocess image")
            return np.array(image)
