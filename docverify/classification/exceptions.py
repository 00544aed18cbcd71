class ClassificationError(Exception):
    """Raised when the document-type classifier cannot produce a prediction."""
