"""Record sinks."""

from __future__ import annotations

from typing import TextIO

from dropbox_source.schemas.record import AnyRecord


class CollectingSink:
    """Keeps registered records in memory, in registration order."""

    def __init__(self) -> None:
        self.records: list[AnyRecord] = []

    def register(self, record: AnyRecord) -> None:
        self.records.append(record)

    def by_id(self) -> dict[str, AnyRecord]:
        return {record.id: record for record in self.records}


class JsonLinesSink:
    """Writes each registered record as one JSON line."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def register(self, record: AnyRecord) -> None:
        self.stream.write(record.model_dump_json())
        self.stream.write("\n")
        self.count += 1
