# tests/domain/test_adjacency.py
import pytest

from trackgeo.domain.entities.topology import ConnectionRole
from trackgeo.domain.errors import DataError
from trackgeo.domain.records import RecordStore
from trackgeo.domain.topology.topology_adjacency import COMPATIBLE_ROLES, neighbors
from trackgeo.domain.topology.topology_index import TopologyIndex


def _ids(index, edge_id, ascending):
    return [(a.edge.id, a.ascending) for a in neighbors(index, index.edge(edge_id), ascending)]


@pytest.mark.parametrize(
    "edge_id, ascending, expected",
    [
        ("E1", True, [("E2", True), ("E3", False)]),
        ("E1", False, []),
        ("E2", True, [("E4", False)]),
        ("E2", False, [("E1", False)]),
        ("E3", True, [("E1", False)]),
        ("E3", False, [("E4", False)]),
        ("E4", True, [("E2", False), ("E3", True)]),
        ("E4", False, [("E5", True)]),
        ("E5", True, []),
        ("E5", False, [("E4", True)]),
    ],
)
def test_diamond_neighbors(diamond_index, edge_id, ascending, expected):
    assert _ids(diamond_index, edge_id, ascending) == expected


def test_switch_legs_are_not_adjacent(diamond_index):
    # E2 and E3 meet at K2 and K3, but only as the two legs of a switch
    for asc in (True, False):
        assert "E3" not in [a.edge.id for a in neighbors(diamond_index, diamond_index.edge("E2"), asc)]
        assert "E2" not in [a.edge.id for a in neighbors(diamond_index, diamond_index.edge("E3"), asc)]


def test_neighbors_never_self_and_roles_compatible(diamond_index):
    for e in diamond_index.edges.values():
        for asc in (True, False):
            for adj in neighbors(diamond_index, e, asc):
                assert adj.edge.id != e.id
                dst_role = adj.edge.role_a if adj.ascending else adj.edge.role_b
                assert (e.role(asc), dst_role) in COMPATIBLE_ROLES
                shared = adj.edge.node_a if adj.ascending else adj.edge.node_b
                assert shared == e.node(asc)


def test_other_roles_never_connect(net):
    idx = TopologyIndex(
        RecordStore(
            [
                net.edge("A", "K1", "K2", "Verbindung", "Kreuzung", "10"),
                net.edge("B", "K2", "K3", "Kreuzung", "Verbindung", "10"),
            ]
        )
    )
    assert idx.edge("A").role_b is ConnectionRole.OTHER
    assert neighbors(idx, idx.edge("A"), True) == []


def test_malformed_edge_is_a_data_error(net):
    bad = net.edge("E9", "K1", "K2", "Verbindung", "Verbindung", "10")
    bad.elements = [c for c in bad.elements if c.label != "ID_TOP_Knoten_B"]
    with pytest.raises(DataError) as ei:
        TopologyIndex(RecordStore([bad]))
    assert ei.value.record_id == "E9"
    assert "ID_TOP_Knoten_B" in str(ei.value)


def test_missing_role_is_a_data_error(net):
    bad = net.edge("E9", "K1", "K2", "", "Verbindung", "10")
    with pytest.raises(DataError):
        TopologyIndex(RecordStore([bad]))
