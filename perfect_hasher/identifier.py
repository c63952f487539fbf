"""
Identifier - opaque handle minted by an identifier table.

Callers never construct identifiers; they only receive them from
assign(). Holding an Identifier therefore means some table really did
allocate that slot (not necessarily the table it is later used with).
"""

from __future__ import annotations
from typing import Union

from .widths import IdentifierWidth


class Identifier:
    """
    Fixed-width slot index wrapped so it can't be fabricated.

    Two identifiers are equal iff their raw integers are equal.
    """

    __slots__ = ('_raw', '_width')

    def __init__(self, *args, **kwargs):
        raise TypeError("Identifiers are minted by identifier tables, not constructed")

    @classmethod
    def _mint(cls, raw: int, width: IdentifierWidth) -> 'Identifier':
        ident = object.__new__(cls)
        object.__setattr__(ident, '_raw', raw)
        object.__setattr__(ident, '_width', width)
        return ident

    def __setattr__(self, name, value):
        raise AttributeError("Identifier is immutable")

    def __delattr__(self, name):
        raise AttributeError("Identifier is immutable")

    def __reduce__(self):
        return (_mint, (self._raw, self._width))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    @property
    def raw(self) -> int:
        """Slot index in the allocating table."""
        return self._raw

    @property
    def width(self) -> IdentifierWidth:
        return self._width

    def __int__(self) -> int:
        return self._raw

    def __index__(self) -> int:
        return self._raw

    def __eq__(self, other) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"Identifier({self._raw}, {self._width.value})"


def _mint(raw: int, width: IdentifierWidth) -> Identifier:
    return Identifier._mint(raw, width)


IdentifierLike = Union[Identifier, int]


__all__ = [
    'Identifier',
    'IdentifierLike',
]
