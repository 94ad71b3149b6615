# errors.py
from typing import Optional

from models import ErrorKind

class SuperTunesError(Exception):
    """Base class for failures that end a search attempt."""
    kind: ErrorKind

class EncodingError(SuperTunesError):
    """The search text cannot be used as a URL query component."""
    kind = ErrorKind.ENCODING

class FetchError(SuperTunesError):
    """The store could not be reached or answered with a non-2xx status."""
    kind = ErrorKind.FETCH

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class DecodeError(SuperTunesError):
    """The response body does not match the search response schema."""
    kind = ErrorKind.DECODE
