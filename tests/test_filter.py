"""Tests for treediff.filter: blacklist prefix filtering."""

from __future__ import annotations

from conftest import entry

from treediff import filter as change_filter
from treediff.models import Change


def _changes() -> list[Change]:
    return [
        Change.insert(entry("vendor/lib.go")),
        Change.insert(entry("main.go")),
        Change.delete(entry("vendor/old.go")),
    ]


def test_drops_blacklisted_inserts_and_deletes():
    result = change_filter.apply(_changes(), ["vendor/"])
    assert result == [Change.insert(entry("main.go"))]


def test_empty_prefixes_is_identity():
    changes = _changes()
    assert change_filter.apply(changes, []) is changes
    assert change_filter.apply_in_place(changes, ()) is changes
    assert len(changes) == 3


def test_idempotent():
    prefixes = ["vendor/", "node_modules/"]
    once = change_filter.apply(_changes(), prefixes)
    assert change_filter.apply(once, prefixes) == once


def test_preserves_relative_order():
    changes = [
        Change.insert(entry("z.txt")),
        Change.insert(entry("node_modules/x.js")),
        Change.insert(entry("a.txt")),
        Change.insert(entry("m/n.txt")),
    ]
    result = change_filter.apply(changes, ["node_modules/"])
    assert [c.path for c in result] == ["z.txt", "a.txt", "m/n.txt"]


def test_modification_matched_on_either_side():
    moved_in = Change(old=entry("src/a.go"), new=entry("vendor/a.go"))
    moved_out = Change(old=entry("vendor/b.go"), new=entry("src/b.go"))
    kept = Change.modify(entry("src/c.go", "1"), entry("src/c.go", "2"))
    assert change_filter.apply([moved_in, moved_out, kept], ["vendor/"]) == [kept]


def test_literal_prefix_is_not_segment_aware():
    changes = [Change.insert(entry("vendor2/file.go")), Change.insert(entry("vendor/x.go"))]
    assert change_filter.apply(changes, ["vendor"]) == []
    assert change_filter.apply(changes, ["vendor/"]) == [changes[0]]


def test_apply_does_not_touch_input():
    changes = _changes()
    snapshot = list(changes)
    change_filter.apply(changes, ["vendor/"])
    assert changes == snapshot


def test_apply_in_place_compacts_same_list():
    changes = _changes()
    result = change_filter.apply_in_place(changes, ["vendor/"])
    assert result is changes
    assert changes == [Change.insert(entry("main.go"))]


def test_is_blacklisted():
    assert change_filter.is_blacklisted(Change.insert(entry("vendors/a")), ["vendor/", "vendors/"])
    assert not change_filter.is_blacklisted(Change.insert(entry("src/vendor/a")), ["vendor/"])
