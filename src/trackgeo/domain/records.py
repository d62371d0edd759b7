# trackgeo/domain/records.py
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

IDENTITY_PATH = "Identitaet/Wert"


@dataclass(eq=False)
class Record:
    """One infrastructure object as a labeled attribute tree.

    PlanPro wraps scalar values in a `Wert` child, so a field path such as
    `TOP_Kante_Allg/TOP_Laenge/Wert` walks labels down to the text leaf.
    Records compare by identity of the object, not by content.
    """

    label: str
    text: str | None = None
    elements: list["Record"] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)

    def child(self, label: str) -> "Record | None":
        for c in self.elements:
            if c.label == label:
                return c
        return None

    def children(self, label: str | None = None) -> list["Record"]:
        if label is None:
            return list(self.elements)
        return [c for c in self.elements if c.label == label]

    def node(self, path: str) -> "Record | None":
        cur: Record | None = self
        for part in path.split("/"):
            cur = cur.child(part)
            if cur is None:
                return None
        return cur

    def field(self, path: str) -> str | None:
        n = self.node(path)
        if n is None:
            return None
        return (n.text or "").strip()

    def has(self, path: str) -> bool:
        return self.node(path) is not None

    @property
    def identity(self) -> str | None:
        return self.field(IDENTITY_PATH)

    def __repr__(self) -> str:
        return f"Record({self.label!r}, id={self.identity!r})"


def leaf(label: str, value: object) -> Record:
    """`<label><Wert>value</Wert></label>`"""
    return Record(label, elements=[Record("Wert", str(value))])


def group(label: str, *children: Record | None) -> Record:
    return Record(label, elements=[c for c in children if c is not None])


class RecordStore:
    """Flat, ordered collection of records with identity lookup.

    Every `add` bumps `revision`, so derived indexes know when to rebuild.
    """

    def __init__(self, records: Iterable[Record] = ()):
        self._records: list[Record] = []
        self._by_id: dict[str, Record] = {}
        self.revision = 0
        for r in records:
            self.add(r)

    def add(self, record: Record) -> None:
        self._records.append(record)
        rid = record.identity
        if rid is not None and rid not in self._by_id:
            self._by_id[rid] = record
        self.revision += 1

    def lookup(self, rid: str | None) -> Record | None:
        if rid is None:
            return None
        return self._by_id.get(rid)

    def records(self) -> list[Record]:
        return list(self._records)

    def of_type(self, label: str) -> Iterator[Record]:
        return (r for r in self._records if r.label == label)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)
