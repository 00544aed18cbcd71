class ImageAnalysisError(Exception):
    """Raised when an image cannot be decoded or analyzed."""
