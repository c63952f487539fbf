"""
Identifier Widths - the unsigned integer space identifiers live in.

Every width is the same algorithm over a different address space:

    U8    ->  256 slots          (small, closed vocabularies)
    U16   ->  65,536 slots
    U32   ->  ~4.3e9 slots
    U64   ->  ~1.8e19 slots      (effectively unbounded)
    WORD  ->  machine word       (numpy.uintp)

Arithmetic wraps over the full unsigned range: there is no sentinel
"out of range" value, so advancing past max lands on 0 and retreating
below 0 lands on max.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict

import numpy as np


_DTYPES: Dict[str, type] = {
    "u8": np.uint8,
    "u16": np.uint16,
    "u32": np.uint32,
    "u64": np.uint64,
    "word": np.uintp,
}


class IdentifierWidth(Enum):
    """Bit width of minted identifiers."""
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    WORD = "word"

    @classmethod
    def from_name(cls, name: str) -> 'IdentifierWidth':
        """Parse 'u8', 'U16', '32', 'word', ... into a width."""
        key = name.strip().lower()
        if key.isdigit():
            key = f"u{key}"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown identifier width: {name!r} "
                f"(expected one of {', '.join(_DTYPES)})"
            ) from None

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self.value])

    @property
    def bits(self) -> int:
        return self.dtype.itemsize * 8

    @property
    def max_value(self) -> int:
        return int(np.iinfo(self.dtype).max)

    @property
    def size(self) -> int:
        """Number of addressable slots (max_value + 1)."""
        return self.max_value + 1

    def truncate(self, h: int) -> int:
        """Keep the low `bits` bits of a digest."""
        return h & self.max_value

    def advance(self, slot: int) -> int:
        return (slot + 1) & self.max_value

    def retreat(self, slot: int) -> int:
        return (slot - 1) & self.max_value


DEFAULT_WIDTH = IdentifierWidth.U64


__all__ = [
    'IdentifierWidth',
    'DEFAULT_WIDTH',
]
