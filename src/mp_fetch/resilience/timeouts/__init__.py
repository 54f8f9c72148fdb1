"""Resilience – timeout enforcement."""
from mp_fetch.resilience.timeouts.policy import TimeoutPolicy

__all__ = ["TimeoutPolicy"]
