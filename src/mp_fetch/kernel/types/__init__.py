"""Kernel value types – public re-export surface.

Modules:
  result.py – Ok, Err, Result, Outcome
"""

from mp_fetch.kernel.types.result import Err, Ok, Outcome, Result

__all__ = ["Err", "Ok", "Outcome", "Result"]
