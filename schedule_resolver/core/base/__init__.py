"""
Core base classes shared across calendar modules
"""
from .exceptions import (
    BaseCoreException,
    InvalidReferenceDateError,
    InvalidEventTimeError,
)

__all__ = [
    "BaseCoreException",
    "InvalidReferenceDateError",
    "InvalidEventTimeError",
]
