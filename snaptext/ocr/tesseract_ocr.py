# snaptext/ocr/tesseract_ocr.py
from __future__ import annotations
from collections import defaultdict
from typing import Dict, List, Tuple

import pytesseract
from pytesseract import Output

from snaptext.logging import get_logger
from snaptext.model import InputImage

logger = get_logger(__name__)


def join_lines(data: Dict[str, list]) -> str:
    """
    Rebuild plain text from Tesseract word-level data: words are grouped by
    (block, paragraph, line) and lines come out in that order.
    """
    lines: Dict[Tuple[int, int, int], List[str]] = defaultdict(list)

    for i, word in enumerate(data["text"]):
        txt = str(word).strip()
        if not txt:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines[key].append(txt)

    line_texts = [" ".join(lines[k]) for k in sorted(lines.keys())]
    return "\n".join(line_texts).strip()


class TesseractOCREngine:
    """
    Tesseract-backed OCR engine that implements the OCREngine port.
    - Accepts a decoded image
    - Returns a single string with line breaks
    - Errors propagate to the caller
    """

    def __init__(self, lang: str = "eng", tesseract_config: str = ""):
        self.lang = lang
        self.tesseract_config = tesseract_config
        logger.info(f"TesseractOCREngine initialized with lang={self.lang}")

    def recognize(self, image: InputImage) -> str:
        data = pytesseract.image_to_data(
            image.pixels,
            output_type=Output.DICT,
            lang=self.lang,
            config=self.tesseract_config,
        )
        return join_lines(data)
