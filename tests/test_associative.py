"""
Tests for AssociativeIdentifierTable
"""

import pytest

from perfect_hasher import (
    AssociativeIdentifierTable,
    ConstantHasher,
    IdentifierWidth,
    ProbeCycleError,
    merge_keep,
    merge_replace,
    merge_sum,
)


def colliding_table(merge=merge_replace):
    return AssociativeIdentifierTable(
        merge=merge, hasher=ConstantHasher(0), width=IdentifierWidth.U8
    )


class TestMerge:
    def test_sum_merge(self):
        table = AssociativeIdentifierTable(merge=merge_sum)
        first = table.assign("word", 3)
        second = table.assign("word", 4)
        assert first == second
        assert len(table) == 1
        assert table.lookup(first) == ("word", 7)

    def test_default_merge_replaces(self):
        table = AssociativeIdentifierTable()
        ident = table.assign("word", "old")
        table.assign("word", "new")
        assert table.lookup(ident) == ("word", "new")

    def test_keep_merge(self):
        table = AssociativeIdentifierTable(merge=merge_keep)
        ident = table.assign("word", "old")
        table.assign("word", "new")
        assert table.lookup(ident) == ("word", "old")

    def test_in_place_merge(self):
        table = AssociativeIdentifierTable(merge=list.extend)
        ident = table.assign("word", [1])
        table.assign("word", [2, 3])
        assert table.lookup(ident) == ("word", [1, 2, 3])

    def test_first_stored_content_survives(self):
        table = AssociativeIdentifierTable(merge=merge_sum)
        ident = table.assign(1, 10)
        assert table.assign(1.0, 5) == ident
        content, payload = table.lookup(ident)
        assert type(content) is int
        assert payload == 15

    def test_merge_not_called_for_new_content(self):
        calls = []

        def recording(existing, new):
            calls.append((existing, new))
            return new

        table = AssociativeIdentifierTable(merge=recording)
        table.assign("a", 1)
        table.assign("b", 2)
        assert calls == []
        table.assign("a", 3)
        assert calls == [(1, 3)]


class TestProbing:
    def test_same_placement_as_plain_table(self):
        table = colliding_table()
        assert table.assign('b', 1).raw == 0
        assert table.assign('a', 2).raw == 255
        assert table.assign('c', 3).raw == 1

    def test_probe_compares_content_not_payload(self):
        table = colliding_table()
        table.assign('a', 100)
        assert table.assign('b', 0).raw == 1

    def test_wedged_content_raises(self):
        table = colliding_table()
        table.assign('a', 1)
        table.assign('c', 1)
        with pytest.raises(ProbeCycleError):
            table.assign('b', 1)

    def test_dissociate_then_reassign(self):
        table = colliding_table()
        a = table.assign('a', 1)
        table.dissociate(a)
        assert table.lookup(a) is None
        b = table.assign('b', 2)
        assert b.raw == 0
        assert table.lookup(b) == ('b', 2)


class TestMutableLookup:
    def test_payload_written_through(self):
        table = AssociativeIdentifierTable()
        ident = table.assign("word", 1)
        entry = table.mutable_lookup(ident)
        assert entry.content == "word"
        assert entry.identifier == ident
        entry.payload = 10
        assert table.lookup(ident) == ("word", 10)
        assert table[ident] == ("word", 10)

    def test_content_is_read_only(self):
        table = AssociativeIdentifierTable()
        entry = table.mutable_lookup(table.assign("word", 1))
        with pytest.raises(AttributeError):
            entry.content = "other"

    def test_entry_unpacks(self):
        table = AssociativeIdentifierTable()
        content, payload = table.mutable_lookup(table.assign("word", 1))
        assert (content, payload) == ("word", 1)

    def test_empty_slot(self):
        table = AssociativeIdentifierTable()
        assert table.mutable_lookup(5) is None


class TestProjection:
    def test_stale_identifiers_are_skipped(self):
        table = AssociativeIdentifierTable()
        x = table.assign("x", 1)
        y = table.assign("y", 2)
        z = table.assign("z", 3)
        table.dissociate(y)
        assert list(table.project([x, y, z])) == [("x", 1), ("z", 3)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
