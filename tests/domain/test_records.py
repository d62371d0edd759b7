# tests/domain/test_records.py
import pytest

from trackgeo.domain.entities.position import EdgeRef, Position
from trackgeo.domain.entities.topology import EffectiveDirection
from trackgeo.domain.records import Record, RecordStore, group, leaf


def test_field_paths():
    r = group("TOP_Kante", leaf("Identitaet", "E1"), group("TOP_Kante_Allg", leaf("TOP_Laenge", " 12.5 ")))
    assert r.identity == "E1"
    assert r.field("TOP_Kante_Allg/TOP_Laenge/Wert") == "12.5"
    assert r.field("TOP_Kante_Allg/Nope/Wert") is None
    assert r.has("TOP_Kante_Allg/TOP_Laenge")
    assert r.node("TOP_Kante_Allg").label == "TOP_Kante_Allg"


def test_children_by_label():
    r = group("Signal", leaf("A", 1), leaf("B", 2), leaf("A", 3))
    assert [c.field("Wert") for c in r.children("A")] == ["1", "3"]
    assert len(r.children()) == 3
    assert r.child("C") is None


def test_group_skips_absent_children():
    g = group("X", None, leaf("A", 1), None)
    assert [c.label for c in g.children()] == ["A"]


def test_store_lookup_and_revision():
    a = group("Signal", leaf("Identitaet", "S1"))
    dup = group("Signal", leaf("Identitaet", "S1"))
    anon = Record("Kommentar", "free text")
    store = RecordStore([a, anon])
    assert store.revision == 2 and len(store) == 2
    assert store.lookup("S1") is a
    assert store.lookup(None) is None and store.lookup("S9") is None
    store.add(dup)
    assert store.revision == 3
    assert store.lookup("S1") is a  # first one wins
    assert [r.label for r in store.of_type("Signal")] == ["Signal", "Signal"]
    assert list(store) == store.records() == [a, anon, dup]


def test_records_compare_by_object():
    assert group("X", leaf("Identitaet", "1")) != group("X", leaf("Identitaet", "1"))


def test_position_needs_a_reference():
    with pytest.raises(ValueError):
        Position(())
    p = Position([EdgeRef("E1", 0)])
    assert isinstance(p.refs, tuple)
    assert p.ref.direction is EffectiveDirection.BOTH


def test_position_single_and_str():
    p = Position((EdgeRef("E1", 200_000, EffectiveDirection.FORWARD), EdgeRef("E2", 0)), identity="P1")
    assert p.single(1).refs == (EdgeRef("E2", 0),)
    assert p.single(1).identity == "P1"
    assert "E1@200000mm/forward" in str(p)
