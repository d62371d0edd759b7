"""Predicate language used to constrain entity searches.

Conditions form a closed union of immutable node types. Apart from
`SignalAspect`, which looks its signals up in a record store on every call,
`evaluate` reads only the record it is given.

Usage:
    cond = And(TypeIs("Signal"), Comparison("Signal_Real/Signal_Funktion/Wert", Operator.EQ, "Block_Signal"))
    evaluate(cond, record)
"""

from __future__ import annotations

import operator as _op
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from trackgeo.domain.records import Record, RecordStore


class Operator(Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


_COMPARE: dict[Operator, Callable[[object, object], bool]] = {
    Operator.EQ: _op.eq,
    Operator.NE: _op.ne,
    Operator.LT: _op.lt,
    Operator.LE: _op.le,
    Operator.GT: _op.gt,
    Operator.GE: _op.ge,
}


@dataclass(frozen=True)
class Comparison:
    """Compare the text at `path` with `value`, coerced to the type of `value`."""

    path: str
    op: Operator
    value: int | float | str


@dataclass(frozen=True)
class Existence:
    path: str


@dataclass(frozen=True)
class TypeIs:
    label: str


@dataclass(frozen=True)
class Constant:
    value: bool


@dataclass(frozen=True)
class And:
    conditions: tuple[Condition, ...] = ()

    def __init__(self, *conditions: Condition):
        object.__setattr__(self, "conditions", conditions)


@dataclass(frozen=True)
class Or:
    conditions: tuple[Condition, ...] = ()

    def __init__(self, *conditions: Condition):
        object.__setattr__(self, "conditions", conditions)


@dataclass(frozen=True)
class Not:
    condition: Condition


@dataclass(frozen=True)
class SignalAspect:
    """Signals showing `aspect` (e.g. "Hp_0") on any of their frames in `store`."""

    aspect: str
    store: RecordStore = field(repr=False)


Condition = Comparison | Existence | TypeIs | Constant | And | Or | Not | SignalAspect


def _coerce(raw: str, like: int | float | str) -> int | float | str | None:
    if isinstance(like, str):
        return raw
    try:
        if isinstance(like, int):
            return int(raw)
        return float(raw)
    except ValueError:
        return None


def evaluate(cond: Condition, record: Record) -> bool:
    if isinstance(cond, Constant):
        return cond.value
    if isinstance(cond, TypeIs):
        return record.label == cond.label
    if isinstance(cond, Existence):
        return record.has(cond.path)
    if isinstance(cond, Comparison):
        raw = record.field(cond.path)
        if raw is None:
            return False
        value = _coerce(raw, cond.value)
        if value is None:
            return False
        return _COMPARE[cond.op](value, cond.value)
    if isinstance(cond, And):
        return all(evaluate(c, record) for c in cond.conditions)
    if isinstance(cond, Or):
        return any(evaluate(c, record) for c in cond.conditions)
    if isinstance(cond, Not):
        return not evaluate(cond.condition, record)
    if isinstance(cond, SignalAspect):
        return record.identity in signals_showing(cond.store, cond.aspect)
    raise TypeError(f"Unknown condition {cond!r}")


def of_type(type_name: str) -> Condition:
    """Condition for a record label; the empty string matches everything."""
    return Constant(True) if not type_name else TypeIs(type_name)


def signals_showing(store: RecordStore, aspect: str) -> list[str]:
    """Resolve Signal_Signalbegriff -> Signal_Rahmen -> Signal for `aspect`."""
    frame_ids = set()
    for sb in store.of_type("Signal_Signalbegriff"):
        begriff = sb.node("Signalbegriff_ID")
        if begriff is None:
            continue
        # xsi:type="nsSignalbegriffe_Ril_301:Hp_0"
        if begriff.attrs.get("type", "").split(":")[-1] == aspect:
            frame_ids.add(sb.field("ID_Signal_Rahmen/Wert"))
    signal_ids: list[str] = []
    for frame in store.of_type("Signal_Rahmen"):
        if frame.identity in frame_ids:
            sid = frame.field("ID_Signal/Wert")
            if sid and sid not in signal_ids:
                signal_ids.append(sid)
    return signal_ids


def signal_aspect(store: RecordStore, aspect: str) -> Condition:
    """Match signals showing `aspect`; records added to `store` later are seen."""
    return SignalAspect(aspect, store)
