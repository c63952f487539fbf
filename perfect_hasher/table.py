"""
Identifier Table - content-addressed identifier allocation.

    content -> hasher -> home slot -> directional probe -> identifier

Collision resolution is directional linear probing. When the probed slot
is taken by different content, the new content is compared with the
occupant: greater moves the probe forward (+1), less moves it back (-1),
both wrapping over the full range of the identifier width. Equal content
ends the probe on the existing slot, so the same content always gets the
same identifier from a given table (unless accumulate_state=True, see
perfect_hasher.hashing).

Removal never relocates other entries. A freed slot and a never-used
slot look the same to the probe, and either one ends it.

Termination:
    A probe only ends while a reachable slot is free. A saturated width,
    or content wedged between a smaller occupant on one side and a larger
    one on the other, makes the probe revisit a slot. The next step depends
    only on the current slot, so a revisit means the probe never ends;
    with detect_cycles=True (default) that raises ProbeCycleError instead
    of spinning. Pick a width comfortably above the expected cardinality.

Not thread-safe: assign/dissociate mutate both the slots and the hasher.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, Optional, Set, Tuple
import logging

import numpy as np

from .hashing import ContentHasher, DEFAULT_HASH_CONFIG, HashConfig, feed_content
from .identifier import Identifier, IdentifierLike
from .config import TableConfig
from .widths import DEFAULT_WIDTH, IdentifierWidth


logger = logging.getLogger(__name__)

_EMPTY = object()


class ProbeCycleError(RuntimeError):
    """The probe for `content` revisited a slot and can never terminate."""

    def __init__(self, content: Any, home: int, probes: int, width: IdentifierWidth):
        self.content = content
        self.home = home
        self.probes = probes
        self.width = width
        super().__init__(
            f"Probe for {content!r} cycled after {probes} steps from home slot "
            f"{home} ({width.value}); the table is saturated or the content is "
            f"wedged between occupants"
        )


class _ProbingTable:
    """
    Slot storage plus the collision-resolution engine.

    Subclasses decide what a slot holds (_content_of) and what readers
    see (_view).
    """

    def __init__(
        self,
        hasher: Optional[ContentHasher] = None,
        width: IdentifierWidth = DEFAULT_WIDTH,
        capacity: Optional[int] = None,
        accumulate_state: bool = False,
        detect_cycles: bool = True,
    ):
        if capacity is not None and not 0 <= capacity <= width.size:
            raise ValueError(
                f"capacity must be in [0, {width.size}] for {width.value}, got {capacity}"
            )
        self._slots: Dict[int, Any] = {}
        self._hasher = hasher if hasher is not None else DEFAULT_HASH_CONFIG.build()
        self.width = width
        self.capacity = capacity
        self.accumulate_state = accumulate_state
        self.detect_cycles = detect_cycles
        logger.debug(
            "Created %s(width=%s, hasher=%r, capacity=%s, accumulate_state=%s)",
            type(self).__name__, width.value, self._hasher, capacity, accumulate_state,
        )

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def _content_of(self, stored: Any) -> Any:
        return stored

    def _view(self, stored: Any) -> Any:
        return stored

    # -------------------------------------------------------------------------
    # Engine
    # -------------------------------------------------------------------------

    @property
    def hasher(self) -> ContentHasher:
        return self._hasher

    def _home_slot(self, content: Any) -> int:
        if not self.accumulate_state:
            self._hasher.reset()
        feed_content(self._hasher, content)
        return self.width.truncate(self._hasher.digest())

    def _probe(self, content: Any) -> Tuple[int, bool]:
        """
        Run the directional probe for `content`.

        Returns:
            (slot, found): the slot holding equal content (found=True) or
            the free slot where it belongs (found=False).
        """
        home = slot = self._home_slot(content)
        visited: Optional[Set[int]] = set() if self.detect_cycles else None
        probes = 0
        debug = logger.isEnabledFor(logging.DEBUG)

        while True:
            stored = self._slots.get(slot, _EMPTY)
            if stored is _EMPTY:
                return slot, False

            occupant = self._content_of(stored)
            if content > occupant:
                nxt = self.width.advance(slot)
            elif content < occupant:
                nxt = self.width.retreat(slot)
            else:
                return slot, True

            probes += 1
            if debug:
                logger.debug("Collision at slot %d for %r, probing %d", slot, content, nxt)
            if visited is not None:
                visited.add(slot)
                if nxt in visited:
                    raise ProbeCycleError(content, home, probes, self.width)
            slot = nxt

    def _raw(self, ident: IdentifierLike) -> int:
        if isinstance(ident, Identifier):
            if ident.width is not self.width:
                raise ValueError(
                    f"Identifier of width {ident.width.value} used with a "
                    f"{self.width.value} table"
                )
            return ident.raw
        if isinstance(ident, (int, np.integer)) and not isinstance(ident, bool):
            return int(ident)
        raise TypeError(f"Expected Identifier or int, got {type(ident).__name__}")

    def _mint(self, slot: int) -> Identifier:
        return Identifier._mint(slot, self.width)

    # -------------------------------------------------------------------------
    # Shared surface
    # -------------------------------------------------------------------------

    def dissociate(self, ident: IdentifierLike) -> None:
        """Free the slot at `ident`. No-op when already empty."""
        raw = self._raw(ident)
        if self._slots.pop(raw, _EMPTY) is not _EMPTY:
            logger.debug("Dissociated slot %d", raw)

    def find(self, content: Any) -> Optional[Identifier]:
        """
        Identifier `content` would get from assign(), if already present.

        Does not insert, but feeds the hasher exactly like assign().
        """
        slot, found = self._probe(content)
        return self._mint(slot) if found else None

    def project(self, idents: Iterable[IdentifierLike]) -> 'Projection':
        """Lazily resolve `idents`, silently skipping stale ones."""
        return Projection(self, idents)

    def get(self, ident: IdentifierLike, default: Any = None) -> Any:
        stored = self._slots.get(self._raw(ident), _EMPTY)
        return default if stored is _EMPTY else self._view(stored)

    def identifiers(self) -> np.ndarray:
        """Live raw identifiers, ascending, in the width's dtype."""
        return np.fromiter(sorted(self._slots), dtype=self.width.dtype, count=len(self._slots))

    def items(self) -> Iterator[Tuple[Identifier, Any]]:
        for raw in sorted(self._slots):
            yield self._mint(raw), self._view(self._slots[raw])

    def clear(self) -> None:
        """Drop every slot and reset the hasher."""
        self._slots.clear()
        self._hasher.reset()

    def __getitem__(self, ident: IdentifierLike) -> Any:
        raw = self._raw(ident)
        try:
            return self._view(self._slots[raw])
        except KeyError:
            raise KeyError(f"No content at identifier {raw}") from None

    def __contains__(self, ident: IdentifierLike) -> bool:
        return self._raw(ident) in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(width={self.width.value}, entries={len(self._slots)})"


class IdentifierTable(_ProbingTable):
    """
    Deduplicating content -> identifier allocator.

    Example:
        >>> table = IdentifierTable(width=IdentifierWidth.U32)
        >>> foo = table.assign("foo")
        >>> table.assign("foo") == foo
        True
        >>> table.lookup(foo)
        'foo'
    """

    @classmethod
    def from_config(cls, config: TableConfig) -> 'IdentifierTable':
        """Build a table from a TableConfig."""
        config.apply_logging()
        return cls(
            hasher=HashConfig(config.hash_type, config.seed).build(),
            width=config.width,
            capacity=config.capacity,
            accumulate_state=config.accumulate_state,
            detect_cycles=config.detect_cycles,
        )

    def assign(self, content: Any) -> Identifier:
        """Identifier for `content`, inserting it if absent."""
        slot, found = self._probe(content)
        if not found:
            self._slots[slot] = content
        return self._mint(slot)

    def lookup(self, ident: IdentifierLike) -> Optional[Any]:
        """Content at `ident`, or None for an empty slot."""
        return self._slots.get(self._raw(ident))


class Projection:
    """
    Lazy id -> content view over a table.

    Ids whose slot is empty at iteration time are skipped, so the output
    can be shorter than the input. Iterating again restarts from the input
    iterable (a list restarts, a generator does not).
    """

    def __init__(self, table: _ProbingTable, idents: Iterable[IdentifierLike]):
        self._table = table
        self._idents = idents

    def __iter__(self) -> Iterator[Any]:
        table = self._table
        for ident in self._idents:
            stored = table._slots.get(table._raw(ident), _EMPTY)
            if stored is not _EMPTY:
                yield table._view(stored)


__all__ = [
    'IdentifierTable',
    'Projection',
    'ProbeCycleError',
]
