from __future__ import annotations


class EmptyType:
    """The empty list; terminates every proper list and dictionary chain."""

    __slots__ = ()
    _instance: EmptyType | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "Empty"
    def __str__(self): return "'()"

    def __eq__(self, other):
        return isinstance(other, EmptyType)

    def __hash__(self):
        return hash(EmptyType)

    def __reduce__(self):
        return EmptyType, ()


Empty = EmptyType()
