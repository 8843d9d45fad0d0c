"""Result type for reporting parse outcomes without exceptions.

Parsers never raise on bad input. They return either a ``Success`` wrapping
the parsed command or a ``Failure`` carrying a user-facing error message and
optional suggestions for the next attempt.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Tuple, TypeVar, Union

T = TypeVar('T')
E = TypeVar('E')


@dataclass(frozen=True)
class Success(Generic[T]):
    """Represents a successful result."""
    value: T

    @property
    def success(self) -> bool:
        return True

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def map(self, fn: Callable[[T], Any]) -> Result[Any, Any]:
        """Transform the success value."""
        try:
            return Success(fn(self.value))
        except Exception as e:
            return Failure(e)

    def unwrap(self) -> T:
        """Get the value or raise if failure."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the value or return default."""
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        value = self.value.to_dict() if hasattr(self.value, "to_dict") else self.value
        return {"success": True, "data": value}


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Represents a failed result.

    Attributes:
        error: User-facing message, or the exception that caused the failure
        suggestions: Hints that may help the user rephrase the command
    """
    error: E
    suggestions: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def map(self, fn: Callable) -> Result[Any, E]:
        """Pass through the failure."""
        return self

    def unwrap(self):
        """Get the value or raise if failure."""
        if isinstance(self.error, Exception):
            raise self.error
        raise ValueError(str(self.error))

    def unwrap_or(self, default):
        """Get the value or return default."""
        return default

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "suggestions": list(self.suggestions),
        }


# Type alias for Result
Result = Union[Success[T], Failure[E]]
