"""Ok/Err results for the boundaries that report failures instead of raising.

The Cart itself raises ``CartError``; settings loading, script parsing and
script replay hand back ``Ok(value)`` or ``Err(error)`` so the command line
can print one message and pick an exit code.
"""

from dataclasses import dataclass
from typing import TypeVar, Generic

T = TypeVar("T")
E = TypeVar("E", bound=Exception)

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

@dataclass(frozen=True)
class Err(Generic[E]):
    """A failure carrying the exception that describes it."""

    error: E

    def __str__(self) -> str:
        return str(self.error)

type Result[T, E] = Ok[T] | Err[E]
