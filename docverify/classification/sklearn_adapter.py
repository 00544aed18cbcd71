from collections.abc import Sequence
from pathlib import Path
from typing import Any

import joblib
import numpy as np

from docverify.classification.base import BaseDocumentClassifier
from docverify.classification.exceptions import ClassificationError
from docverify.logging.logger import Log
from docverify.verification.models import DocumentType


class SklearnModelClassifier(BaseDocumentClassifier):
    """Runs a joblib-persisted scikit-learn estimator exposing ``predict_proba``.

    The estimator's ``classes_`` must be document type values; types the
    model was not trained on get probability 0.
    """

    def __init__(self, model_path: Path | None = None, *, estimator: Any = None) -> None:
        if model_path is None and estimator is None:
            raise ValueError("Either model_path or estimator is required")
        self._model_path = model_path
        self._estimator = estimator

    def classify(self, features: Sequence[float]) -> dict[DocumentType, float]:
        estimator = self._load()
        try:
            row = np.asarray([features], dtype=np.float64)
            probabilities = estimator.predict_proba(row)[0]
            classes = [DocumentType(str(c)) for c in estimator.classes_]
        except Exception as exc:
            raise ClassificationError(f"sklearn prediction failed: {exc}") from exc

        distribution = {t: 0.0 for t in DocumentType}
        for document_type, probability in zip(classes, probabilities):
            distribution[document_type] = float(probability)
        return distribution

    def _load(self) -> Any:
        if self._estimator is None:
            Log.info(f"Loading classifier model: {self._model_path}")
            try:
                self._estimator = joblib.load(self._model_path)
            except Exception as exc:
                raise ClassificationError(f"Failed to load classifier model: {exc}") from exc
            Log.info("Classifier model loaded")
        return self._estimator
