# trackgeo/domain/topology/topology_adjacency.py
from trackgeo.domain.entities.position import AdjacentEdge
from trackgeo.domain.entities.topology import ConnectionRole, Edge
from trackgeo.domain.topology.topology_index import TopologyIndex

R = ConnectionRole

# (role at source end, role at destination end); the two legs of a switch are
# never adjacent to each other
COMPATIBLE_ROLES: frozenset[tuple[ConnectionRole, ConnectionRole]] = frozenset(
    {
        (R.THROUGH, R.THROUGH),
        (R.LEFT_BRANCH, R.POINT_TIP),
        (R.RIGHT_BRANCH, R.POINT_TIP),
        (R.POINT_TIP, R.LEFT_BRANCH),
        (R.POINT_TIP, R.RIGHT_BRANCH),
    }
)


def neighbors(index: TopologyIndex, edge: Edge, ascending: bool) -> list[AdjacentEdge]:
    node = edge.node(ascending)
    src_role = edge.role(ascending)
    out: list[AdjacentEdge] = []
    seen: set[str] = set()
    for other, at_a in index.incident(node):
        if other.id == edge.id or other.id in seen:
            continue
        dst_role = other.role_a if at_a else other.role_b
        if (src_role, dst_role) in COMPATIBLE_ROLES:
            seen.add(other.id)
            out.append(AdjacentEdge(other, ascending=at_a))
    return out
