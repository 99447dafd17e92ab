"""
Exceptions raised by the rating engine.
"""

from typing import Optional


class RankerError(Exception):
    """Base class for all rating engine errors."""


class InsufficientPopulation(RankerError, ValueError):
    """
    Raised when a sample asks for more items than the population holds.
    """

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        self.required = required
        self.available = available
        super().__init__(
            message or f"Need at least {required} items, population has {available}"
        )


class InvalidJudgment(RankerError, ValueError):
    """Raised when a submitted judgment does not match the pending sample."""


class StoreUnavailable(RankerError):
    """Raised when the durable store cannot be read or written."""
