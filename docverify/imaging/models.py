from dataclasses import dataclass

MIN_ACCEPTABLE_WIDTH = 800
MIN_ACCEPTABLE_HEIGHT = 600


@dataclass(frozen=True)
class Resolution:
    """Pixel dimensions of the analyzed image."""

    width: int = 0
    height: int = 0

    @property
    def acceptable(self) -> bool:
        return self.width >= MIN_ACCEPTABLE_WIDTH and self.height >= MIN_ACCEPTABLE_HEIGHT


@dataclass(frozen=True)
class ImageQualityResult:
    """Output of the image quality stage. All ratios are normalized to [0, 1]."""

    resolution: Resolution
    sharpness: float = 0.0
    brightness: float = 0.0
    contrast: float = 0.0
    color_balance_ok: bool = False
    file_size: int = 0
    format: str | None = None
    score: float = 0.0
    error: str | None = None

    @classmethod
    def neutral(cls, error: str, file_size: int = 0) -> "ImageQualityResult":
        """Fail-soft result used when the image cannot be analyzed."""
        return cls(resolution=Resolution(), file_size=file_size, score=0.5, error=error)


@dataclass(frozen=True)
class ImageMetadata:
    """Embedded metadata used by the tamper heuristic."""

    format: str | None = None
    has_exif: bool = False
    has_alpha: bool = False
    dpi: float | None = None
    error: str | None = None
