# trackgeo/domain/topology/topology_index.py
from decimal import Decimal, InvalidOperation

from trackgeo.domain.entities.position import EdgeRef, Position
from trackgeo.domain.entities.topology import ConnectionRole, Edge, EffectiveDirection
from trackgeo.domain.errors import DataError
from trackgeo.domain.records import Record, RecordStore, group, leaf

EDGE_LABEL = "TOP_Kante"
LOCATION_LABEL = "Punkt_Objekt_TOP_Kante"

_ROLES = {
    "Verbindung": ConnectionRole.THROUGH,
    "Links": ConnectionRole.LEFT_BRANCH,
    "Rechts": ConnectionRole.RIGHT_BRANCH,
    "Spitze": ConnectionRole.POINT_TIP,
}
_ROLES.update({r.value: r for r in ConnectionRole})

_DIRECTIONS = {
    "in": EffectiveDirection.FORWARD,
    "gegen": EffectiveDirection.REVERSE,
    "beide": EffectiveDirection.BOTH,
}
_DIRECTIONS.update({d.value: d for d in EffectiveDirection})
_TOKENS = {
    EffectiveDirection.FORWARD: "in",
    EffectiveDirection.REVERSE: "gegen",
    EffectiveDirection.BOTH: "beide",
}


# ---------------- record boundary -------------------------


def to_mm(text: str, *, record_id: str | None = None, field: str | None = None) -> int:
    """Metres as a decimal string -> integer millimetres, truncated toward zero."""
    try:
        return int(Decimal(text.strip()) * 1000)
    except (InvalidOperation, ValueError, OverflowError, AttributeError):
        raise DataError(
            f"{field or 'value'} {text!r} is not a length in metres", record_id=record_id, field=field
        )


def parse_role(text: str | None, *, record_id: str | None = None, field: str | None = None):
    if not text:
        raise DataError(f"missing connection role {field}", record_id=record_id, field=field)
    return _ROLES.get(text, ConnectionRole.OTHER)


def parse_direction(text: str | None) -> EffectiveDirection:
    """PlanPro Wirkrichtung; absent means "beide"."""
    if text is None or text == "":
        return EffectiveDirection.BOTH
    try:
        return _DIRECTIONS[text]
    except KeyError:
        raise DataError(f"unknown effective direction {text!r}", field="Wirkrichtung")


def _required(r: Record, path: str) -> str:
    v = r.field(path)
    if not v:
        raise DataError(f"{r.label} lacks {path}", record_id=r.identity, field=path)
    return v


def edge_from_record(r: Record) -> Edge:
    rid = _required(r, "Identitaet/Wert")
    return Edge(
        id=rid,
        node_a=_required(r, "ID_TOP_Knoten_A/Wert"),
        node_b=_required(r, "ID_TOP_Knoten_B/Wert"),
        role_a=parse_role(
            r.field("TOP_Kante_Allg/TOP_Anschluss_A/Wert"), record_id=rid, field="TOP_Anschluss_A"
        ),
        role_b=parse_role(
            r.field("TOP_Kante_Allg/TOP_Anschluss_B/Wert"), record_id=rid, field="TOP_Anschluss_B"
        ),
        length_mm=to_mm(
            _required(r, "TOP_Kante_Allg/TOP_Laenge/Wert"), record_id=rid, field="TOP_Laenge"
        ),
    )


def is_located(r: Record) -> bool:
    return r.child(LOCATION_LABEL) is not None


def refs_from_record(r: Record) -> tuple[EdgeRef, ...]:
    rid = r.identity
    refs = []
    for loc in r.children(LOCATION_LABEL):
        lateral = loc.field("Seitlicher_Abstand/Wert")
        refs.append(
            EdgeRef(
                edge_id=_required(loc, "ID_TOP_Kante/Wert"),
                offset_mm=to_mm(_required(loc, "Abstand/Wert"), record_id=rid, field="Abstand"),
                direction=parse_direction(loc.field("Wirkrichtung/Wert")),
                lateral_mm=to_mm(lateral, record_id=rid, field="Seitlicher_Abstand") if lateral else 0,
                side=loc.field("Seitliche_Lage/Wert") or None,
            )
        )
    return tuple(refs)


def position_from_record(r: Record) -> Position:
    if not is_located(r):
        raise DataError(f"{r.label} has no track location", record_id=r.identity)
    return Position(refs_from_record(r), identity=r.identity)


def from_mm(mm: int) -> str:
    """Integer millimetres -> metres with three decimals ("12.500")."""
    return f"{Decimal(mm).scaleb(-3):.3f}"


def location_record(ref: EdgeRef) -> Record:
    return group(
        LOCATION_LABEL,
        leaf("ID_TOP_Kante", ref.edge_id),
        leaf("Abstand", from_mm(ref.offset_mm)),
        leaf("Seitlicher_Abstand", from_mm(ref.lateral_mm)),
        leaf("Wirkrichtung", _TOKENS[ref.direction]),
        leaf("Seitliche_Lage", ref.side) if ref.side else None,
    )


def located_record(label: str, identity: str, position: Position, *extra: Record) -> Record:
    """New record of type `label` located at every reference of `position`.

    `extra` children (e.g. `Basis_Objekt_Allg`) go between the identity and
    the location groups.
    """
    return group(label, leaf("Identitaet", identity), *extra, *map(location_record, position.refs))


# ---------------- index -----------------------------------


class TopologyIndex:
    """Edges and located records of one store revision, parsed once."""

    def __init__(self, store: RecordStore):
        self.revision = store.revision
        self.edges: dict[str, Edge] = {}
        self._incident: dict[str, list[tuple[Edge, bool]]] = {}  # node -> [(edge, at node A)]
        self._located: dict[str, list[tuple[Record, EdgeRef]]] = {}
        for r in store:
            if r.label == EDGE_LABEL:
                e = edge_from_record(r)
                self.edges[e.id] = e
                self._incident.setdefault(e.node_a, []).append((e, True))
                self._incident.setdefault(e.node_b, []).append((e, False))
            elif is_located(r):
                for ref in refs_from_record(r):
                    self._located.setdefault(ref.edge_id, []).append((r, ref))

    def edge(self, edge_id: str) -> Edge:
        try:
            return self.edges[edge_id]
        except KeyError:
            raise DataError(f"unknown edge {edge_id!r}", record_id=edge_id)

    def incident(self, node: str) -> list[tuple[Edge, bool]]:
        return self._incident.get(node, [])

    def located_on(self, edge_id: str) -> list[tuple[Record, EdgeRef]]:
        return self._located.get(edge_id, [])
