"""Testing fakes – in-memory doubles for the HTTP transport port."""
from mp_fetch.testing.fakes.transport import FakeTransport, json_response, text_response

__all__ = ["FakeTransport", "json_response", "text_response"]
