# sync.py
"""Sync pipeline: presentation + edit payload -> one batch of formatting-preserving operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from slidesync import io
from slidesync.internals.constants import OUTPUT_OPERATIONS_FILENAME
from slidesync.internals.define_config import UserConfig
from slidesync.internals.paths import user_log_dir_path
from slidesync.internals.run_context import get_pipeline_run_id
from slidesync.processing.engine import synchronize
from slidesync.processing.extraction import build_segment_map
from slidesync.processing.operations import to_requests
from slidesync.processing.payload import load_edit_payload
from slidesync.stores.base import DocumentStore, SubmitResult
from slidesync.stores.factory import open_store

log = logging.getLogger("slidesync")


@dataclass
class SyncResult:
    operations_path: Path  # JSON dump of the compiled requests
    operation_count: int
    submit_result: Optional[SubmitResult] = None  # None on dry runs

    @property
    def output_path(self) -> Path:
        """The rewritten deck when the store produced one, else the operations dump."""
        if self.submit_result is not None and self.submit_result.output_path:
            return Path(self.submit_result.output_path)
        return self.operations_path


def run_sync_pipeline(cfg: UserConfig, store: DocumentStore | None = None) -> SyncResult:
    """Fetch, merge the edit payload, compile operations, and submit them unless this is a dry run."""
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting sync pipeline [pipeline:{pipeline_id}]")

    edits_file = cfg.get_edits_file()
    # Safety check
    if edits_file is None:
        raise ValueError(
            "edits_file is None inside run_sync_pipeline(). Validation should have caught this."
        )

    if store is None:
        store = open_store(cfg)
    document_id = cfg.get_document_id()
    presentation = store.fetch(document_id)
    original = build_segment_map(
        presentation, cfg.page_object_id, cfg.range_start, cfg.range_end
    )

    edits = load_edit_payload(edits_file)
    operations = synchronize(original, edits, cfg.customization_gate)

    operations_path = io.write_json_output(
        {"documentId": document_id, "requests": to_requests(operations)},
        cfg.get_output_folder(),
        OUTPUT_OPERATIONS_FILENAME,
    )
    result = SyncResult(operations_path=operations_path, operation_count=len(operations))

    if cfg.dry_run:
        log.info(
            f"Dry run: {len(operations)} operation(s) saved but not submitted. [pipeline:{pipeline_id}]"
        )
    else:
        result.submit_result = store.submit(document_id, operations)

    log.info(f"sync pipeline complete [pipeline:{pipeline_id}]")
    log.info(f"  Document: {document_id}")
    log.info(f"  Edits: {edits_file}")
    log.info(f"  -> Operations:  {operations_path}")
    log.info(f"  -> Output:  {result.output_path}")
    log.info(f"See log: {user_log_dir_path()}")
    return result
