# pptx_store.py
"""A local .pptx file as a document store, for offline runs and tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from slidesync.internals.constants import OUTPUT_PPTX_FILENAME
from slidesync.io import load_and_validate_pptx, save_presentation
from slidesync.processing.operations import Operation
from slidesync.stores.base import DocumentStoreError, SubmitResult
from slidesync.stores.pptx_apply import apply_operations, render_buffer
from slidesync.stores.pptx_tree import index_text_targets, presentation_to_tree

log = logging.getLogger("slidesync")


class PptxDocumentStore:
    """
    The document id is the path of the source deck. Submitting never overwrites it: the updated
    deck is saved as a new timestamped file in `output_folder`.
    """

    def __init__(self, output_folder: Path) -> None:
        self.output_folder = Path(output_folder)

    def _load(self, document_id: str) -> Any:
        try:
            return load_and_validate_pptx(document_id)
        except (ValueError, FileNotFoundError) as e:
            raise DocumentStoreError(f"Could not open {document_id}: {e}") from e

    def fetch(self, document_id: str) -> dict[str, Any]:
        prs = self._load(document_id)
        tree = presentation_to_tree(prs)
        tree["presentationId"] = str(document_id)
        return tree

    def submit(self, document_id: str, operations: list[Operation]) -> SubmitResult:
        if not operations:
            log.info("No operations to apply; the deck is left as it is.")
            return SubmitResult(document_id=document_id, submitted=0)

        prs = self._load(document_id)
        buffers = apply_operations(index_text_targets(prs), operations)
        for text_frame, buffer in buffers.values():
            render_buffer(text_frame, buffer)

        output_path = save_presentation(prs, self.output_folder, OUTPUT_PPTX_FILENAME)
        log.info(
            f"Applied {len(operations)} operation(s) across {len(buffers)} text frame(s) of {document_id}"
        )
        return SubmitResult(
            document_id=document_id,
            submitted=len(operations),
            output_path=str(output_path),
        )
