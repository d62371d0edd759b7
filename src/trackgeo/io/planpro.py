# trackgeo/io/planpro.py
"""PlanPro XML <-> RecordStore.

Only the object container is read; each of its children becomes one record.
XML namespaces are dropped from element and attribute names, so
`xsi:type="ns:Hp_0"` is available as `record.attrs["type"]`.

Writing puts the records back as the container's children. Given a template
document (usually the file the store was loaded from) everything outside the
container is kept as is; without one a bare `PlanPro_Schnittstelle` skeleton
is built around the container.
"""

import os
import xml.etree.ElementTree as ET

from trackgeo.domain.errors import DataError
from trackgeo.domain.records import Record, RecordStore

DEFAULT_CONTAINER = (
    "LST_Planung_Projekt/LST_Planung_Gruppe/LST_Planung_Einzel/LST_Zustand_Ziel/Container"
)
CONTAINER_LABEL = "Container"
ROOT_LABEL = "PlanPro_Schnittstelle"
XSI = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("xsi", XSI)


def _local(name: str) -> str:
    return name.rsplit("}", 1)[-1]


def record_from_element(el: ET.Element) -> Record:
    text = el.text.strip() if el.text and el.text.strip() else None
    return Record(
        _local(el.tag),
        text,
        [record_from_element(c) for c in el],
        {_local(k): v for k, v in el.attrib.items()},
    )


def element_from_record(r: Record) -> ET.Element:
    # `type` is the only namespaced attribute PlanPro objects carry
    attrs = {(f"{{{XSI}}}type" if k == "type" else k): v for k, v in r.attrs.items()}
    el = ET.Element(r.label, attrs)
    el.text = r.text
    el.extend(element_from_record(c) for c in r.elements)
    return el


def find_container(root: ET.Element, container: str | None = None) -> ET.Element:
    if _local(root.tag) == CONTAINER_LABEL and container is None:
        return root
    cur = root
    for part in (container or DEFAULT_CONTAINER).split("/"):
        nxt = next((c for c in cur if _local(c.tag) == part), None)
        if nxt is None:
            raise DataError(
                f"no {part!r} below {_local(cur.tag)!r} while looking for the object container",
                field=container or DEFAULT_CONTAINER,
            )
        cur = nxt
    return cur


def store_from_root(root: ET.Element, container: str | None = None) -> RecordStore:
    return RecordStore(record_from_element(el) for el in find_container(root, container))


def parse_store(xml: str, container: str | None = None) -> RecordStore:
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise DataError(f"malformed PlanPro XML: {exc}") from exc
    return store_from_root(root, container)


def _read_root(path: str) -> ET.Element:
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise DataError(f"malformed PlanPro XML in {path}: {exc}") from exc


def load_store(path: str, container: str | None = None) -> RecordStore:
    return store_from_root(_read_root(path), container)


def skeleton(container: str | None = None) -> ET.Element:
    root = ET.Element(ROOT_LABEL)
    cur = root
    for part in (container or DEFAULT_CONTAINER).split("/"):
        cur = ET.SubElement(cur, part)
    return root


def root_from_store(
    store: RecordStore, root: ET.Element | None = None, container: str | None = None
) -> ET.Element:
    """Replace the container's children of `root` (or a fresh skeleton) by `store`."""
    if root is None:
        root = skeleton(container)
    box = find_container(root, container)
    for old in list(box):
        box.remove(old)
    box.extend(element_from_record(r) for r in store)
    ET.indent(root)
    return root


def save_store(
    store: RecordStore, path: str, *, template: str | None = None, container: str | None = None
) -> None:
    root = _read_root(template) if template is not None else None
    ET.ElementTree(root_from_store(store, root, container)).write(
        path, encoding="utf-8", xml_declaration=True
    )
