# tests/conftest.py
#
# Diamond network used across the suite (lengths in metres):
#
#            E2 (300, Links/Links)
#   K1 --E1--> K2 ==============> K3 <--E4-- K4 --E5--> K5
#      (200)      <==============       (100)   (150)
#            E3 (400, Rechts/Rechts)
#
# E1 ends in a switch tip at K2 (legs E2, E3); E4 starts in a switch tip at
# K3 (legs E2, E3). E1 starts and E5 ends at track ends.
from types import SimpleNamespace

import pytest

from trackgeo.domain.records import Record, RecordStore, group, leaf
from trackgeo.domain.topology.topology_core import TopologyEngine
from trackgeo.domain.topology.topology_index import TopologyIndex


def edge(eid, a, b, role_a, role_b, length_m) -> Record:
    return group(
        "TOP_Kante",
        leaf("Identitaet", eid),
        leaf("ID_TOP_Knoten_A", a),
        leaf("ID_TOP_Knoten_B", b),
        group(
            "TOP_Kante_Allg",
            leaf("TOP_Anschluss_A", role_a),
            leaf("TOP_Anschluss_B", role_b),
            leaf("TOP_Laenge", length_m),
        ),
    )


def on_edge(edge_id, offset_m, direction=None, lateral_m=None, side=None) -> Record:
    return group(
        "Punkt_Objekt_TOP_Kante",
        leaf("ID_TOP_Kante", edge_id),
        leaf("Abstand", offset_m),
        leaf("Wirkrichtung", direction) if direction else None,
        leaf("Seitlicher_Abstand", lateral_m) if lateral_m is not None else None,
        leaf("Seitliche_Lage", side) if side else None,
    )


def located(label, rid, *refs, extra=()) -> Record:
    return group(label, leaf("Identitaet", rid), *extra, *refs)


def signal(rid, edge_id, offset_m, direction, function="Block_Signal") -> Record:
    real = group("Signal_Real", leaf("Signal_Funktion", function))
    return located("Signal", rid, on_edge(edge_id, offset_m, direction), extra=(real,))


def diamond_records() -> list[Record]:
    return [
        edge("E1", "K1", "K2", "Ende", "Spitze", "200"),
        edge("E2", "K2", "K3", "Links", "Links", "300"),
        edge("E3", "K3", "K2", "Rechts", "Rechts", "400"),
        edge("E4", "K4", "K3", "Verbindung", "Spitze", "100"),
        edge("E5", "K4", "K5", "Verbindung", "Ende", "150"),
        signal("S1", "E1", "50", "in", "Einfahr_Signal"),
        signal("S2", "E2", "100", "in"),
        signal("S3", "E3", "100", "in"),
        signal("S4", "E4", "40", "gegen", "Ausfahr_Signal"),
        signal("S5", "E5", "100", "gegen"),
        located("Datenpunkt", "D1", on_edge("E5", "20", "beide")),
        located("Datenpunkt", "D2", on_edge("E1", "20", "in")),
        located("PZB_Element", "P1", on_edge("E1", "200", "in"), on_edge("E2", "0", "in")),
    ]


def loop_records() -> list[Record]:
    # two 100 m edges closing a ring through K1 and K2
    return [
        edge("R1", "K1", "K2", "Verbindung", "Verbindung", "100"),
        edge("R2", "K2", "K1", "Verbindung", "Verbindung", "100"),
        located("Signal", "X", on_edge("R1", "10", "in")),
    ]


def zero_cycle_records() -> list[Record]:
    return [
        edge("Z1", "K1", "K2", "Verbindung", "Verbindung", "0"),
        edge("Z2", "K2", "K1", "Verbindung", "Verbindung", "0"),
        located("Signal", "Z", on_edge("Z1", "0", "in")),
    ]


@pytest.fixture(scope="session")
def net():
    return SimpleNamespace(
        edge=edge,
        on_edge=on_edge,
        located=located,
        signal=signal,
        diamond_records=diamond_records,
        loop_records=loop_records,
        zero_cycle_records=zero_cycle_records,
    )


@pytest.fixture(scope="session")
def diamond() -> TopologyEngine:
    return TopologyEngine(RecordStore(diamond_records()))


@pytest.fixture(scope="session")
def diamond_index() -> TopologyIndex:
    return TopologyIndex(RecordStore(diamond_records()))


@pytest.fixture
def loop() -> TopologyEngine:
    return TopologyEngine(RecordStore(loop_records()))


@pytest.fixture
def zero_cycle() -> TopologyEngine:
    return TopologyEngine(RecordStore(zero_cycle_records()))
