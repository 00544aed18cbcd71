from abc import ABC, abstractmethod
from collections.abc import Sequence

from docverify.verification.models import DocumentType


class BaseDocumentClassifier(ABC):
    """Contract for all document-type classification adapters."""

    @abstractmethod
    def classify(self, features: Sequence[float]) -> dict[DocumentType, float]:
        """Predict a probability distribution over the known document types.

        Args:
            features: Fixed-length vector from ``extract_features``.

        Returns:
            Mapping of every DocumentType to its probability.

        Raises:
            ClassificationError: on any failure.
        """
