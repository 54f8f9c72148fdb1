"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── FetcherError             (fetch.py)
    │   ├── TransportError
    │   │   ├── RequestTimeoutError
    │   │   └── RequestCancelledError
    │   ├── InvalidUrlError
    │   ├── SerializationError
    │   ├── HttpStatusError
    │   └── ParseError
    └── ValidationError          (validation.py)

``FetcherError`` and ``ValidationError`` are the two tiers the retry
scheduler reasons about; the subclasses keep finer detail for callers.
"""

from mp_fetch.kernel.errors.base import BaseError
from mp_fetch.kernel.errors.fetch import (
    FetcherError,
    HttpStatusError,
    InvalidUrlError,
    ParseError,
    RequestCancelledError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from mp_fetch.kernel.errors.validation import ValidationError

type FetchFailure = FetcherError | ValidationError

__all__ = [
    "BaseError",
    "FetchFailure",
    "FetcherError",
    "HttpStatusError",
    "InvalidUrlError",
    "ParseError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "SerializationError",
    "TransportError",
    "ValidationError",
]
