"""Pillow + numpy implementation of the image-analysis capability.

Channel statistics follow the usual scanner heuristics:

* sharpness  - mean channel standard deviation, saturating at 50
* brightness - mean channel mean over 255
* contrast   - widest channel value range over 255
* color balance - variance of the R/G/B means below 500 (grayscale passes)
"""

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from docverify.imaging.base import BaseImageAnalyzer
from docverify.imaging.exceptions import ImageAnalysisError
from docverify.imaging.models import ImageMetadata, ImageQualityResult, Resolution

_SHARPNESS_STDEV_SCALE = 50.0
_COLOR_BALANCE_MAX_VARIANCE = 500.0
_PASSTHROUGH_MODES = frozenset({"L", "LA", "RGB", "RGBA"})


class PillowImageAnalyzer(BaseImageAnalyzer):
    """Computes image quality proxies from per-channel pixel statistics."""

    def analyze(self, image_bytes: bytes) -> ImageQualityResult:
        image = self._open(image_bytes)
        pixels = self._channel_pixels(image)

        means = pixels.mean(axis=0)
        stdevs = pixels.std(axis=0)
        ranges = pixels.max(axis=0) - pixels.min(axis=0)

        sharpness = min(float(stdevs.mean()) / _SHARPNESS_STDEV_SCALE, 1.0)
        brightness = float(means.mean()) / 255.0
        contrast = float(ranges.max()) / 255.0
        color_balance_ok = self._color_balance_ok(means)
        resolution = Resolution(width=image.width, height=image.height)

        return ImageQualityResult(
            resolution=resolution,
            sharpness=sharpness,
            brightness=brightness,
            contrast=contrast,
            color_balance_ok=color_balance_ok,
            file_size=len(image_bytes),
            format=(image.format or "").lower() or None,
            score=quality_score(
                resolution_ok=resolution.acceptable,
                sharpness=sharpness,
                brightness=brightness,
                contrast=contrast,
                color_balance_ok=color_balance_ok,
            ),
        )

    def inspect(self, image_bytes: bytes) -> ImageMetadata:
        image = self._open(image_bytes)
        dpi = image.info.get("dpi")
        resolved_dpi: float | None = None
        if isinstance(dpi, (tuple, list)) and dpi:
            resolved_dpi = float(dpi[0])
        return ImageMetadata(
            format=(image.format or "").lower() or None,
            has_exif=bool(image.getexif()),
            has_alpha="A" in image.mode or "transparency" in image.info,
            dpi=resolved_dpi,
        )

    @staticmethod
    def _open(image_bytes: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise ImageAnalysisError(f"Cannot decode image: {exc}") from exc
        return image

    @staticmethod
    def _channel_pixels(image: Image.Image) -> np.ndarray:
        """Return an (N, channels) float array of pixel values."""
        if image.mode not in _PASSTHROUGH_MODES:
            image = image.convert("RGB")
        arr = np.asarray(image, dtype=np.float32)
        if arr.ndim == 2:
            arr = arr[..., np.newaxis]
        if arr.size == 0:
            raise ImageAnalysisError("Image has no pixels")
        return arr.reshape(-1, arr.shape[-1])

    @staticmethod
    def _color_balance_ok(means: np.ndarray) -> bool:
        if means.shape[0] < 3:
            return True
        rgb = means[:3]
        return float(np.mean((rgb - rgb.mean()) ** 2)) < _COLOR_BALANCE_MAX_VARIANCE


def quality_score(
    *,
    resolution_ok: bool,
    sharpness: float,
    brightness: float,
    contrast: float,
    color_balance_ok: bool,
) -> float:
    """Composite image quality score in [0, 1]."""
    score = (
        (0.3 if resolution_ok else 0.0)
        + (0.2 if sharpness > 0.6 else sharpness * 0.2)
        + (0.2 if 0.4 < brightness < 0.8 else 0.1)
        + (0.15 if contrast > 0.5 else contrast * 0.15)
        + (0.15 if color_balance_ok else 0.0)
    )
    return max(0.0, min(1.0, score))
