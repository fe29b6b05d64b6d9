"""Error types raised by the rating engine."""
from typing import Optional


class ValidationError(ValueError):
    """Raised when inputs to a rating computation are malformed.

    Covers malformed criteria orders, out-of-range or unknown subscores,
    unknown overall modes and missing profiles. Callers surface it unchanged.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
