from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class PreprocessConfig:
    contrast: float = 1.0
    grayscale: bool = False
    upscale_factor: Optional[float] = None
    denoise: bool = False
    denoise_strength: int = 10
    denoise_template_window_size: int = 7  # odd, >=3

    def __post_init__(self) -> None:
        if self.contrast <= 0:
            raise ValueError("contrast must be > 0")
        if self.upscale_factor is not None and self.upscale_factor <= 0:
            raise ValueError("upscale_factor must be > 0 when provided")
        if self.denoise:
            if self.denoise_strength <= 0:
                raise ValueError("denoise_strength must be > 0 when denoise=True")
            if self.denoise_template_window_size < 3 or self.denoise_template_window_size % 2 == 0:
                raise ValueError("denoise_template_window_size must be odd and >= 3")

    def to_kwargs(self) -> Dict[str, Any]:
        return dict(
            contrast=self.contrast,
            grayscale=self.grayscale,
            upscale_factor=self.upscale_factor,
            denoise=self.denoise,
            denoise_strength=self.denoise_strength,
            denoise_template_window_size=self.denoise_template_window_size,
        )
