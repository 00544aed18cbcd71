from collections.abc import Sequence

import numpy as np

from docverify.classification.base import BaseDocumentClassifier
from docverify.classification.exceptions import ClassificationError
from docverify.classification.features import FEATURE_VECTOR_SIZE, KEYWORD_SLOTS
from docverify.verification.models import DocumentType


class KeywordPriorClassifier(BaseDocumentClassifier):
    """Softmax over the keyword-presence features. No trained model needed."""

    def __init__(self, keyword_weight: float = 3.0) -> None:
        self._keyword_weight = keyword_weight

    def classify(self, features: Sequence[float]) -> dict[DocumentType, float]:
        if len(features) != FEATURE_VECTOR_SIZE:
            raise ClassificationError(
                f"Expected {FEATURE_VECTOR_SIZE} features, got {len(features)}"
            )
        logits = np.zeros(len(DocumentType))
        order = list(DocumentType)
        for slot, document_type, _keywords in KEYWORD_SLOTS:
            logits[order.index(document_type)] += self._keyword_weight * float(features[slot])
        exp = np.exp(logits - logits.max())
        probabilities = exp / exp.sum()
        return {t: float(p) for t, p in zip(order, probabilities)}
