from abc import ABC, abstractmethod

from docverify.imaging.models import ImageMetadata, ImageQualityResult


class BaseImageAnalyzer(ABC):
    """Contract for all image-analysis adapters."""

    @abstractmethod
    def analyze(self, image_bytes: bytes) -> ImageQualityResult:
        """Measure resolution, sharpness, brightness, contrast and color balance.

        Args:
            image_bytes: Raster image content (JPEG or PNG).

        Returns:
            ImageQualityResult with a composite score in [0, 1].

        Raises:
            ImageAnalysisError: if the image cannot be decoded.
        """

    @abstractmethod
    def inspect(self, image_bytes: bytes) -> ImageMetadata:
        """Read embedded capture metadata (EXIF, alpha channel, DPI).

        Raises:
            ImageAnalysisError: if the image cannot be decoded.
        """
