from pathlib import Path

from docverify.classification.base import BaseDocumentClassifier
from docverify.classification.keyword_adapter import KeywordPriorClassifier
from docverify.classification.sklearn_adapter import SklearnModelClassifier
from docverify.config.settings import Settings


class ClassifierFactory:
    """Creates the configured document-type classifier."""

    ENGINES: tuple[str, ...] = ("keyword", "sklearn")

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentClassifier:
        engine = settings.classifier_engine.lower()
        if engine == "keyword":
            return KeywordPriorClassifier()
        if engine == "sklearn":
            path = settings.classifier_model_path.strip()
            if not path:
                raise ValueError("classifier_model_path is required for classifier_engine=sklearn")
            return SklearnModelClassifier(Path(path))
        raise ValueError(
            f"Unknown classifier engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
