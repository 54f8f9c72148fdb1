"""
mp_fetch – resilient, schema-validated async HTTP fetch layer.

Import path convention::

    from mp_fetch.fetcher import Fetcher, FetcherOptions
    from mp_fetch.kernel.errors import FetcherError, ValidationError
    from mp_fetch.kernel.types import Err, Ok
    from mp_fetch.adapters.http import HttpxTransport
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
