"""
Associative Identifier Table - identifiers that carry a payload.

Placement is identical to IdentifierTable. The difference is what
happens when equal content arrives again: the stored content is kept
(equal does not mean identical) and the new payload is merged into the
existing one with the table's merge rule.

Merge rules:
    merge(existing, new) -> combined payload
    Returning None means `existing` was updated in place and is kept,
    so list.extend / set.update / dict.update work as merge rules.
"""

from __future__ import annotations
from typing import Any, Callable, Optional, Tuple
import logging

from .hashing import ContentHasher, HashConfig
from .identifier import Identifier, IdentifierLike
from .table import _ProbingTable
from .config import TableConfig
from .widths import DEFAULT_WIDTH, IdentifierWidth


logger = logging.getLogger(__name__)

MergeFn = Callable[[Any, Any], Any]


def merge_sum(existing: Any, new: Any) -> Any:
    return existing + new


def merge_replace(existing: Any, new: Any) -> Any:
    return new


def merge_keep(existing: Any, new: Any) -> Any:
    return existing


class _Slot:
    __slots__ = ('content', 'payload')

    def __init__(self, content: Any, payload: Any):
        self.content = content
        self.payload = payload


class Entry:
    """
    Writable view of one occupied slot.

    `content` is read-only; assigning `payload` writes through to the table.
    A view taken before dissociate() keeps pointing at the removed slot.
    """

    __slots__ = ('_slot', 'identifier')

    def __init__(self, slot: _Slot, identifier: Identifier):
        self._slot = slot
        self.identifier = identifier

    @property
    def content(self) -> Any:
        return self._slot.content

    @property
    def payload(self) -> Any:
        return self._slot.payload

    @payload.setter
    def payload(self, value: Any) -> None:
        self._slot.payload = value

    def __iter__(self):
        yield self._slot.content
        yield self._slot.payload

    def __repr__(self) -> str:
        return f"Entry({self.identifier!r}, content={self.content!r}, payload={self.payload!r})"


class AssociativeIdentifierTable(_ProbingTable):
    """
    Content -> identifier allocator with a merged payload per identifier.

    Example:
        >>> counts = AssociativeIdentifierTable(merge=merge_sum)
        >>> i = counts.assign("word", 1)
        >>> counts.assign("word", 2) == i
        True
        >>> counts.lookup(i)
        ('word', 3)

    project() yields (content, payload) pairs.
    """

    def __init__(
        self,
        merge: MergeFn = merge_replace,
        hasher: Optional[ContentHasher] = None,
        width: IdentifierWidth = DEFAULT_WIDTH,
        capacity: Optional[int] = None,
        accumulate_state: bool = False,
        detect_cycles: bool = True,
    ):
        super().__init__(
            hasher=hasher,
            width=width,
            capacity=capacity,
            accumulate_state=accumulate_state,
            detect_cycles=detect_cycles,
        )
        self.merge = merge

    @classmethod
    def from_config(cls, config: TableConfig, merge: MergeFn = merge_replace) -> 'AssociativeIdentifierTable':
        """Build a table from a TableConfig."""
        config.apply_logging()
        return cls(
            merge=merge,
            hasher=HashConfig(config.hash_type, config.seed).build(),
            width=config.width,
            capacity=config.capacity,
            accumulate_state=config.accumulate_state,
            detect_cycles=config.detect_cycles,
        )

    def _content_of(self, stored: _Slot) -> Any:
        return stored.content

    def _view(self, stored: _Slot) -> Tuple[Any, Any]:
        return stored.content, stored.payload

    def assign(self, content: Any, payload: Any) -> Identifier:
        """
        Identifier for `content`, inserting (content, payload) if absent
        or merging `payload` into the existing one if present.
        """
        slot, found = self._probe(content)
        if found:
            stored = self._slots[slot]
            merged = self.merge(stored.payload, payload)
            if merged is not None:
                stored.payload = merged
            logger.debug("Merged payload into slot %d", slot)
        else:
            self._slots[slot] = _Slot(content, payload)
        return self._mint(slot)

    def lookup(self, ident: IdentifierLike) -> Optional[Tuple[Any, Any]]:
        """(content, payload) at `ident`, or None for an empty slot."""
        stored = self._slots.get(self._raw(ident))
        return None if stored is None else (stored.content, stored.payload)

    def mutable_lookup(self, ident: IdentifierLike) -> Optional[Entry]:
        """Writable view of the slot at `ident`, or None when empty."""
        raw = self._raw(ident)
        stored = self._slots.get(raw)
        return None if stored is None else Entry(stored, self._mint(raw))


__all__ = [
    'AssociativeIdentifierTable',
    'Entry',
    'MergeFn',
    'merge_sum',
    'merge_replace',
    'merge_keep',
]
