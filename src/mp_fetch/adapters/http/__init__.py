"""HTTP adapter – wire value types, the HttpTransport port and its httpx implementation."""
from mp_fetch.adapters.http.messages import BodyEncoding, HttpMethod, RawResponse, RequestDescriptor
from mp_fetch.adapters.http.client import HttpTransport, HttpxTransport

__all__ = [
    "BodyEncoding",
    "HttpMethod",
    "HttpTransport",
    "HttpxTransport",
    "RawResponse",
    "RequestDescriptor",
]
