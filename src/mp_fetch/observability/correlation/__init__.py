"""Observability – request correlation context."""
from mp_fetch.observability.correlation.context import CorrelationContext, RequestContext

__all__ = ["CorrelationContext", "RequestContext"]
