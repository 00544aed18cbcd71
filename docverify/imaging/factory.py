from docverify.config.settings import Settings
from docverify.imaging.base import BaseImageAnalyzer
from docverify.imaging.pillow_adapter import PillowImageAnalyzer


class ImageAnalyzerFactory:
    """Creates the image analyzer based on settings."""

    ADAPTERS: dict[str, type[BaseImageAnalyzer]] = {
        "pillow": PillowImageAnalyzer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseImageAnalyzer:
        engine = settings.image_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown image engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
