# trackgeo/app/cli.py
"""Command-line front end.

    trackgeo plan.ppxml search sig-1 --type Signal --orientation opposite --nearest
    trackgeo plan.ppxml project sig-1 120.5
    trackgeo --config run.json plan.ppxml distance sig-1 sig-2
    trackgeo --output out.ppxml plan.ppxml place Datenpunkt dp-9 sig-1 -30

Distances on the command line and in the output are metres; every result is
written as one JSON line on stdout, logs go to stderr.
"""

import argparse
import json
import sys

from pydantic import ValidationError

from trackgeo.app.build import App, build
from trackgeo.config.models import RunModel
from trackgeo.domain.conditions import of_type
from trackgeo.domain.entities.position import Orientation, Position, nearest
from trackgeo.domain.errors import DataError, TrackGeoError
from trackgeo.domain.topology.topology_index import to_mm
from trackgeo.io.planpro import save_store
from trackgeo.io.recorder import JsonlSink, Recorder
from trackgeo.io.result_rows import (
    ScalarRow,
    match_rows,
    mm_to_m,
    neighbor_rows,
    position_rows,
)


def cmd_neighbors(app: App, args) -> None:
    adj = app.engine.neighbors(args.edge, not args.descending)
    app.recorder.emit_all(neighbor_rows(app.run_id, adj))


def _projected(app: App, args) -> list[Position]:
    d = to_mm(args.distance, field="distance")
    if args.path:
        res = app.engine.project_on_path(args.id, args.path.split(","), d, not args.backward)
        return [res] if res is not None else []
    return app.engine.project(args.id, d)


def cmd_project(app: App, args) -> None:
    op = "project_on_path" if args.path else "project"
    app.recorder.emit_all(position_rows(app.run_id, op, _projected(app, args)))


def cmd_place(app: App, args) -> None:
    found = _projected(app, args)
    if len(found) != 1:
        raise DataError(
            f"{args.id} moved by {args.distance} m lands on {len(found)} positions, need exactly one",
            record_id=args.id,
        )
    rec = app.engine.place(args.label, args.new_id, found[0])
    app.recorder.emit_all(position_rows(app.run_id, "place", [app.engine.position_of(rec)]))


def cmd_distance(app: App, args) -> None:
    d = app.engine.distance(args.a, args.b)
    app.recorder.emit(
        ScalarRow(app.run_id, "distance", None if d is None else mm_to_m(d), args.a, args.b)
    )


def cmd_orientation(app: App, args) -> None:
    o = app.engine.orientation(args.a, args.b)
    app.recorder.emit(ScalarRow(app.run_id, "orientation", o.value, args.a, args.b))


def cmd_search(app: App, args) -> None:
    matches = app.engine.search(
        args.id, of_type(args.type), Orientation(args.orientation), not args.backward
    )
    if args.nearest:
        best = nearest(matches)
        matches = [best] if best is not None else []
    app.recorder.emit_all(match_rows(app.run_id, matches))


def cmd_matrix(app: App, args) -> None:
    m = app.engine.distance_matrix(args.ids)
    for i, a in enumerate(args.ids):
        for j, b in enumerate(args.ids):
            v = int(m[i, j])
            app.recorder.emit(ScalarRow(app.run_id, "matrix", None if v < 0 else mm_to_m(v), a, b))


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trackgeo",
        description="Topology queries on a PlanPro track network",
    )
    parser.add_argument("--config", "-c", help="Run config (JSON)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--debug", action="store_true", help="Log edge crossings and pruned branches")
    parser.add_argument("--max-hops", type=int, help="Edge crossings allowed per traversal branch")
    parser.add_argument("--output", help="Write the record store back to this PlanPro file")
    parser.add_argument("file", help="PlanPro XML file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_nb = subparsers.add_parser("neighbors", help="Edges adjacent to an edge end")
    p_nb.add_argument("edge", help="TOP_Kante id")
    p_nb.add_argument("--descending", action="store_true", help="Leave through node A")
    p_nb.set_defaults(func=cmd_neighbors)

    p_proj = subparsers.add_parser("project", help="Move a located object by a distance")
    p_proj.add_argument("id", help="Located object id")
    p_proj.add_argument("distance", help="Signed distance in metres")
    p_proj.add_argument("--path", help="Comma separated edge ids to follow")
    p_proj.add_argument("--backward", action="store_true", help="Against the path direction")
    p_proj.set_defaults(func=cmd_project)

    p_place = subparsers.add_parser("place", help="Create a located object at a projected position")
    p_place.add_argument("label", help="Object type of the new record, e.g. Datenpunkt")
    p_place.add_argument("new_id", help="Identity of the new record")
    p_place.add_argument("id", help="Located object to project from")
    p_place.add_argument("distance", help="Signed distance in metres")
    p_place.add_argument("--path", help="Comma separated edge ids to follow")
    p_place.add_argument("--backward", action="store_true", help="Against the path direction")
    p_place.set_defaults(func=cmd_place)

    p_dist = subparsers.add_parser("distance", help="Track distance between two objects")
    p_dist.add_argument("a")
    p_dist.add_argument("b")
    p_dist.set_defaults(func=cmd_distance)

    p_or = subparsers.add_parser("orientation", help="Relative facing of two objects")
    p_or.add_argument("a")
    p_or.add_argument("b")
    p_or.set_defaults(func=cmd_orientation)

    p_search = subparsers.add_parser("search", help="Nearest objects of a type")
    p_search.add_argument("id", help="Start object id")
    p_search.add_argument("--type", "-t", default="", help="Object type (default: any)")
    p_search.add_argument(
        "--orientation",
        "-o",
        choices=[o.value for o in Orientation],
        default=Orientation.BOTH.value,
    )
    p_search.add_argument("--backward", action="store_true")
    p_search.add_argument("--nearest", action="store_true", help="Only the closest match")
    p_search.set_defaults(func=cmd_search)

    p_mx = subparsers.add_parser("matrix", help="Pairwise distances")
    p_mx.add_argument("ids", nargs="+")
    p_mx.set_defaults(func=cmd_matrix)
    return parser


def check_args(parser: argparse.ArgumentParser, args) -> None:
    if args.command not in ("project", "place"):
        return
    if args.backward and not args.path:
        parser.error("--backward only applies together with --path")
    if args.path and args.distance.lstrip().startswith("-"):
        parser.error("distance along --path must not be negative, use --backward")


def load_config(args) -> RunModel:
    raw: dict = {}
    if args.config:
        with open(args.config, encoding="utf-8") as fp:
            raw = json.load(fp)
    raw["store"] = {"by": "path", "file": args.file}
    if args.log_level or args.debug:
        log = raw.setdefault("log", {})
        if args.log_level:
            log["level"] = args.log_level
        if args.debug:
            log["debug"] = True
            log.setdefault("level", "DEBUG")
    if args.max_hops is not None:
        raw.setdefault("engine", {}).setdefault("limits", {})["max_hops"] = args.max_hops
    return RunModel.model_validate(raw)


def main(argv=None, *, stdout=None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    check_args(parser, args)
    try:
        cfg = load_config(args)
        app = build(cfg, recorder=Recorder(JsonlSink(stdout or sys.stdout)))
        args.func(app, args)
        if args.output:
            save_store(app.store, args.output, template=args.file)
    except (TrackGeoError, ValidationError, FileNotFoundError, json.JSONDecodeError) as exc:
        print(f"trackgeo: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
