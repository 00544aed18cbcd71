class VerificationError(Exception):
    """Base exception for all verification-related errors."""


class InvalidDocumentError(VerificationError):
    """Raised when the submitted document has no analyzable content.

    This is the only error a verification surfaces to its caller.
    """


class CapabilityTimeoutError(VerificationError):
    """Raised when an external capability does not answer within its time budget."""
