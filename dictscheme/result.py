"""Tagged results returned by the public entry points.

Inside the core, conditions are raised as DictSchemeError subclasses and
propagate unchanged; `capture` turns the first one into a Failure at the
boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from dictscheme import Value
from dictscheme.errors import DictSchemeError
from dictscheme.types.values import values_equal


@dataclass(frozen=True, eq=False)
class Ok:
    value: Value

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> Value:
        return self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and values_equal(self.value, other.value)

    def __hash__(self) -> int:
        return hash((Ok, type(self.value), self.value))


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str
    error: DictSchemeError | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_error(cls, error: DictSchemeError) -> Failure:
        return cls(error.kind, error.message, error)

    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Value:
        if self.error is not None:
            raise self.error
        raise DictSchemeError(f"{self.kind}: {self.message}")

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


Result = Union[Ok, Failure]


def capture(fn: Callable[..., Value], *args, **kwargs) -> Result:
    """Call `fn` and wrap its value, or the condition it raised, in a Result."""
    try:
        return Ok(fn(*args, **kwargs))
    except DictSchemeError as e:
        return Failure.from_error(e)
