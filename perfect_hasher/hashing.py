"""
Hashing - the hash capability an identifier table is keyed by.

A table owns exactly one hasher for its whole life and feeds every
content value into it:

    content -> encode_content() -> hasher.update() -> hasher.digest() -> slot

Tables reset their hasher before each content value, so a home slot is a
pure function of the content. With accumulate_state=True the state carries
over instead: the digest for the n-th content value then depends on
contents 1..n-1 as well, insertion order becomes part of what an
identifier means, and re-assigning equal content may land on a new slot.
That mode only exists to reproduce identifiers minted that way.

Hash Configuration:
    HashConfig is the single place hash settings live:

        config = HashConfig(hash_type=HashType.MURMUR3, seed=42)
        hasher = config.build()

    - MURMUR3: fast, non-adversarial content (default)
    - SHA1 / SHA256 / BLAKE2B: collision resistant, for untrusted content
    - CONSTANT: every content value hashes to the same slot (diagnostics)
"""

from __future__ import annotations
from typing import Any, Protocol, runtime_checkable
from dataclasses import dataclass
from enum import Enum
import hashlib
import struct

import numpy as np


MASK64 = 0xFFFFFFFFFFFFFFFF


# =============================================================================
# MURMURHASH64A
# =============================================================================

def murmur_hash64a(data: bytes, seed: int = 0) -> int:
    """
    MurmurHash64A over a complete buffer.

    Args:
        data: Bytes to hash
        seed: 64-bit seed value

    Returns:
        64-bit unsigned hash value
    """
    M = 0xc6a4a7935bd1e995
    R = 47

    length = len(data)
    h = (seed ^ (length * M)) & MASK64

    nblocks = length // 8
    for i in range(nblocks):
        k = struct.unpack_from('<Q', data, i * 8)[0]
        k = (k * M) & MASK64
        k ^= (k >> R)
        k = (k * M) & MASK64
        h ^= k
        h = (h * M) & MASK64

    tail = data[nblocks * 8:]
    if tail:
        # Little-endian fold of the 1..7 trailing bytes
        for shift, byte in enumerate(tail):
            h ^= byte << (8 * shift)
        h = (h * M) & MASK64

    h ^= (h >> R)
    h = (h * M) & MASK64
    h ^= (h >> R)

    return h


# =============================================================================
# HASH CAPABILITY
# =============================================================================

@runtime_checkable
class ContentHasher(Protocol):
    """
    Stateful accumulator a table hashes content with.

    The table only ever feeds bytes and asks for a digest; which algorithm
    sits behind it is the caller's choice.
    """

    def update(self, data: bytes) -> None:
        """Feed bytes into the accumulated state."""
        ...

    def digest(self) -> int:
        """64-bit digest of everything fed so far (state is kept)."""
        ...

    def reset(self) -> None:
        """Return to the freshly constructed state."""
        ...


class MurmurHasher:
    """
    MurmurHash64A accumulator.

    MurmurHash64A needs the whole buffer up front, so bytes are buffered
    until the next digest() and then folded into the running state, which
    seeds the next fold. Only one content value's bytes are ever buffered.
    """

    def __init__(self, seed: int = 42):
        self.seed = seed & MASK64
        self.reset()

    def reset(self) -> None:
        self._state = self.seed
        self._pending = bytearray()

    def update(self, data: bytes) -> None:
        self._pending += data

    def digest(self) -> int:
        if self._pending:
            self._state = murmur_hash64a(bytes(self._pending), self._state)
            self._pending.clear()
        return self._state

    def __repr__(self) -> str:
        return f"MurmurHasher(seed={self.seed}, state={self._state:#018x})"


class HashlibHasher:
    """
    Streaming hashlib accumulator (sha1, sha256, blake2b, ...).

    Digest is the first 8 bytes of a copy of the running object, read
    little-endian, so digesting never disturbs the accumulated state.
    """

    def __init__(self, algorithm: str = "blake2b", seed: int = 42):
        self.algorithm = algorithm
        self.seed = seed & MASK64
        self.reset()

    def reset(self) -> None:
        self._h = hashlib.new(self.algorithm)
        self._h.update(struct.pack('<Q', self.seed))

    def update(self, data: bytes) -> None:
        self._h.update(data)

    def digest(self) -> int:
        return int.from_bytes(self._h.copy().digest()[:8], 'little')

    def __repr__(self) -> str:
        return f"HashlibHasher(algorithm={self.algorithm!r}, seed={self.seed})"


class ConstantHasher:
    """Every digest is `value`. Forces all content onto one home slot."""

    def __init__(self, value: int = 0):
        self.value = value & MASK64

    def reset(self) -> None:
        pass

    def update(self, data: bytes) -> None:
        pass

    def digest(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"ConstantHasher(value={self.value})"


class HashType(Enum):
    """Supported hash algorithms."""
    MURMUR3 = "murmur3"    # Fast, non-adversarial content
    SHA1 = "sha1"
    SHA256 = "sha256"
    BLAKE2B = "blake2b"    # Collision resistant and faster than SHA-2
    CONSTANT = "constant"  # Degenerate, for collision diagnostics


@dataclass(frozen=True)
class HashConfig:
    """
    Immutable hash settings.

    Attributes:
        hash_type: Algorithm to build
        seed: Seed (for CONSTANT, the constant digest)

    Example:
        >>> hasher = HashConfig(hash_type=HashType.SHA256, seed=7).build()
    """
    hash_type: HashType = HashType.MURMUR3
    seed: int = 42

    def build(self) -> ContentHasher:
        """Create a fresh hasher. Each table must own its own."""
        if self.hash_type == HashType.MURMUR3:
            return MurmurHasher(self.seed)
        if self.hash_type == HashType.CONSTANT:
            return ConstantHasher(self.seed)
        if self.hash_type in (HashType.SHA1, HashType.SHA256, HashType.BLAKE2B):
            return HashlibHasher(self.hash_type.value, self.seed)
        raise ValueError(f"Unsupported hash type: {self.hash_type}")


DEFAULT_HASH_CONFIG = HashConfig(hash_type=HashType.MURMUR3, seed=42)


# =============================================================================
# CONTENT ENCODING
# =============================================================================
# Type-tagged, length-prefixed bytes. Builtin hash() is never used: it is
# salted per process for str/bytes.
#
# Values that compare equal must encode equally, so bool and integral
# floats encode as ints (True == 1 == 1.0) and numpy scalars as their
# Python equivalents.

_TAG_NONE = b'N'
_TAG_INT = b'I'
_TAG_FLOAT = b'F'
_TAG_STR = b'S'
_TAG_BYTES = b'Y'
_TAG_TUPLE = b'T'
_TAG_LIST = b'L'


def _encode_into(buf: bytearray, content: Any) -> None:
    if isinstance(content, np.generic):
        content = content.item()

    if content is None:
        buf += _TAG_NONE
    elif isinstance(content, int):
        value = int(content)
        raw = value.to_bytes((value.bit_length() + 8) // 8, 'little', signed=True)
        buf += _TAG_INT + struct.pack('<Q', len(raw)) + raw
    elif isinstance(content, float):
        if content.is_integer():
            _encode_into(buf, int(content))
        else:
            buf += _TAG_FLOAT + struct.pack('<d', content)
    elif isinstance(content, str):
        raw = content.encode('utf-8', 'surrogatepass')
        buf += _TAG_STR + struct.pack('<Q', len(raw)) + raw
    elif isinstance(content, (bytes, bytearray, memoryview)):
        raw = bytes(content)
        buf += _TAG_BYTES + struct.pack('<Q', len(raw)) + raw
    elif isinstance(content, (tuple, list)):
        tag = _TAG_TUPLE if isinstance(content, tuple) else _TAG_LIST
        buf += tag + struct.pack('<Q', len(content))
        for item in content:
            _encode_into(buf, item)
    else:
        raise TypeError(
            f"Cannot derive a hash contribution for {type(content).__name__!r}; "
            f"implement hash_into(hasher) on the content type"
        )


def encode_content(content: Any) -> bytes:
    """Deterministic byte encoding of a builtin content value."""
    buf = bytearray()
    _encode_into(buf, content)
    return bytes(buf)


def feed_content(hasher: ContentHasher, content: Any) -> None:
    """
    Feed the hash contribution of `content` into `hasher`.

    Objects exposing hash_into(hasher) hash themselves; builtins go through
    encode_content(). Unsupported types raise TypeError before the hasher
    sees any bytes.
    """
    hash_into = getattr(content, 'hash_into', None)
    if callable(hash_into):
        hash_into(hasher)
        return
    hasher.update(encode_content(content))


__all__ = [
    'murmur_hash64a',
    'ContentHasher',
    'MurmurHasher',
    'HashlibHasher',
    'ConstantHasher',
    'HashType',
    'HashConfig',
    'DEFAULT_HASH_CONFIG',
    'encode_content',
    'feed_content',
]
