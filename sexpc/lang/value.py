"""Runtime values of the sexpc language. The set is closed: Identifier, Integer, Float, String and Vector. Values are
frozen, so handing the same object to the stack and to the environment behaves like a copy.

Each value has a display form, which is what println writes and what join concatenates. Display forms are bytes,
because strings are byte strings; str() of a value is its display form decoded leniently.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


class Value:
    """Superclass for every runtime value."""

    def __bytes__(self):
        raise NotImplementedError()

    def __str__(self):
        return bytes(self).decode(errors="replace")


@dataclass(frozen=True)
class Identifier(Value):
    """A symbol with no binding. Builtin names flow through evaluation as Identifiers and are dispatched on."""
    name: str

    def __bytes__(self):
        return self.name.encode()


@dataclass(frozen=True)
class Integer(Value):
    value: int

    def __bytes__(self):
        return str(self.value).encode()


@dataclass(frozen=True)
class Float(Value):
    """Reserved: no builtin produces one yet."""
    value: float

    def __bytes__(self):
        if math.isfinite(self.value) and self.value.is_integer():
            return str(int(self.value)).encode()  # 2.0 displays as 2
        if math.isnan(self.value):
            return b"NaN"
        if math.isinf(self.value):
            return repr(self.value).encode()
        return format(Decimal(repr(self.value)), "f").encode()  # positional, never 1e-07


@dataclass(frozen=True)
class String(Value):
    data: bytes

    def __bytes__(self):
        return self.data


@dataclass(frozen=True)
class Vector(Value):
    items: Tuple[Value, ...] = ()

    def __bytes__(self):
        return b"[" + b"".join(bytes(item) for item in self.items) + b"]"
