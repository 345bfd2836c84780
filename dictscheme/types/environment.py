"""Global environment for dictscheme.

An Environment is a persistent chain of (name, value) frames. Extending never
touches an existing frame: it returns a new frame whose `outer` is the old
chain, so every chain is acyclic and tails are shared. Only top-level
definition sequences use it; lambda parameters are bound by substitution.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional

from dictscheme import Value
from dictscheme.errors import UnboundVariable


class Environment:
    """Immutable association chain from names to values; first match wins."""

    __slots__ = ("frame", "outer")

    def __init__(self, frame: Optional[tuple[str, Value]] = None, outer: Optional[Environment] = None):
        self.frame: tuple[str, Value] | None = frame
        self.outer: Environment | None = outer

    @classmethod
    def empty(cls) -> Environment:
        return cls()

    def extend(self, name: str, value: Value) -> Environment:
        """Return a new environment binding `name` to `value` in front of this one."""
        return Environment((name, value), self)

    def lookup(self, name: str) -> Value:
        """Look up the innermost binding of `name`.

        Raises UnboundVariable if no frame binds it.
        """
        env: Optional[Environment] = self
        while env is not None:
            if env.frame is not None and env.frame[0] == name:
                return env.frame[1]
            env = env.outer
        raise UnboundVariable(name)

    def __contains__(self, name: str) -> bool:
        return any(n == name for n, _ in self)

    def __iter__(self) -> Iterator[tuple[str, Value]]:
        """Yield every frame's binding, innermost first (shadowed ones included)."""
        env: Optional[Environment] = self
        while env is not None:
            if env.frame is not None:
                yield env.frame
            env = env.outer

    @property
    def depth(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            buffer.write(" -> ".join(f"{{{n}: {v!r}}}" for n, v in self))
            buffer.write(">")
            return buffer.getvalue()
