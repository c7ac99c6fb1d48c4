"""
Custom exceptions for fingertipspy package
"""


class FingertipsError(Exception):
    """Base exception for all fingertipspy errors"""
    pass


class FingertipsTransportError(FingertipsError):
    """Raised when a request to the API fails or returns an unusable response"""
    pass


class FingertipsNotFoundError(FingertipsTransportError):
    """Raised when requested resource is not found"""
    pass


class FingertipsRateLimitError(FingertipsTransportError):
    """Raised when API rate limit is exceeded"""
    pass


class FingertipsValidationError(FingertipsError, ValueError):
    """Raised when input validation fails"""
    pass


class FingertipsLookupError(FingertipsError, LookupError):
    """
    Raised when supplied identifiers or names are not in the fetched metadata.

    Attributes:
        invalid: Sorted list of the values that had no match
    """

    def __init__(self, message: str, invalid=None):
        super().__init__(message)
        self.invalid = list(invalid or [])
