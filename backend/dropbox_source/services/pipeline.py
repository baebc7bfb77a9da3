"""Ingestion pipeline: list, classify, build, link, materialize, emit."""

from __future__ import annotations

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.options import SourceOptions
from dropbox_source.schemas.record import AnyRecord
from dropbox_source.services.builder import build_records
from dropbox_source.services.collaborators import (
    KeyValueCache,
    LivenessSink,
    RecordSink,
    RemoteStorage,
    ResourceFactory,
)
from dropbox_source.services.linker import link_records
from dropbox_source.services.lister import RemoteLister
from dropbox_source.services.materializer import DEFAULT_MAX_CONCURRENT, PayloadMaterializer
from dropbox_source.services.remote_file import ResourceTracker

logger = get_logger(__name__)


class DropboxSource:
    """Produces the linked record set for one Dropbox folder.

    The record graph is built completely before any payload is fetched.
    Neither listing nor materialization errors escape ``run``: a failed
    listing yields no records and a failed download yields a record
    without a payload.
    """

    def __init__(
        self,
        storage: RemoteStorage,
        cache: KeyValueCache,
        factory: ResourceFactory,
        options: SourceOptions | None = None,
        liveness: LivenessSink | None = None,
        sink: RecordSink | None = None,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ):
        self.options = options or SourceOptions()
        self.liveness = liveness if liveness is not None else ResourceTracker()
        self.sink = sink
        self.lister = RemoteLister(storage)
        self.materializer = PayloadMaterializer(
            storage, cache, factory, self.liveness, max_concurrent=max_concurrent
        )

    async def build_graph(self) -> list[AnyRecord]:
        """List the remote folder and return linked, unmaterialized records."""
        entries = await self.lister.fetch_entries(self.options)
        files, folders = build_records(entries, self.options)
        if not self.options.create_folder_nodes:
            return list(files)
        return link_records(folders, files, self.options.folder_match)

    async def run(self) -> list[AnyRecord]:
        """Run one ingestion pass and register every record with the sink."""
        records = await self.build_graph()
        records = await self.materializer.materialize_all(records)

        if self.sink is not None:
            for record in records:
                self.sink.register(record)

        logger.info(
            "source_run_complete",
            path=self.options.path,
            records=len(records),
        )
        return records
