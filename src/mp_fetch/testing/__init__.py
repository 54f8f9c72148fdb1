"""Testing support – fakes for driving the fetcher without a network."""

from mp_fetch.testing.fakes import FakeTransport, json_response, text_response

__all__ = ["FakeTransport", "json_response", "text_response"]
