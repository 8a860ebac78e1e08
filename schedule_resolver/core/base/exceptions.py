"""
Core Base Exceptions
"""

class BaseCoreException(Exception):
    """Base exception for core modules"""
    pass

class InvalidReferenceDateError(BaseCoreException, ValueError):
    """Raised when a caller supplies a reference date that is not a real YYYY-MM-DD day"""
    pass

class InvalidEventTimeError(BaseCoreException, ValueError):
    """Raised when a provider event carries neither a dateTime nor a date"""
    pass
