# io/recorder.py
import json
import sys
from dataclasses import asdict
from typing import Protocol


class Sink(Protocol):
    def write(self, row) -> None: ...


class JsonlSink:
    def __init__(self, fp=None):
        self.fp = fp or sys.stdout

    def write(self, row) -> None:
        self.fp.write(json.dumps(asdict(row)) + "\n")


class MemorySink:
    def __init__(self):
        self.rows: list = []

    def write(self, row) -> None:
        self.rows.append(row)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, row):
        for s in self.sinks:
            s.write(row)

    def emit_all(self, rows):
        for row in rows:
            self.emit(row)
