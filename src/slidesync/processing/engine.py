# engine.py
"""Wire merge, boundary repair, index recalculation and compilation into one synchronization."""

from __future__ import annotations

import logging
from typing import Any

from slidesync.internals.define_config import CustomizationGate
from slidesync.models import EditPayload, SegmentMap, get_container
from slidesync.processing.boundaries import preserve_paragraph_boundaries
from slidesync.processing.extraction import build_segment_map
from slidesync.processing.formatting import compile_operations
from slidesync.processing.indices import recalculate_indices
from slidesync.processing.merge import MergeResult, merge_edits
from slidesync.processing.operations import Operation

log = logging.getLogger("slidesync")


# region finalize_merge
def finalize_merge(merge_result: MergeResult, original: SegmentMap) -> None:
    """Repair paragraph boundaries and recompute offsets of every merged container, in place."""
    for key in merge_result.touched:
        container = get_container(merge_result.segment_map, key)
        original_container = get_container(original, key)
        if container is None or original_container is None:
            continue
        preserve_paragraph_boundaries(
            original_container.paragraphs, container.paragraphs
        )
        recalculate_indices(container)


# endregion


# region synchronize
def synchronize(
    original: SegmentMap,
    edits: EditPayload,
    gate: CustomizationGate = CustomizationGate.TEXT,
) -> list[Operation]:
    """
    Ordered operation list that rewrites the edited containers with their original formatting.

    The original map is left untouched; all work happens on a deep copy that is dropped afterwards.
    The returned list is meant to be submitted as one batch.
    """
    merge_result = merge_edits(original, edits, gate)
    finalize_merge(merge_result, original)
    operations = compile_operations(merge_result, original)
    log.info(
        f"Compiled {len(operations)} operation(s) for {len(merge_result.touched)} text container(s)."
    )
    return operations


def synchronize_presentation(
    presentation: dict[str, Any],
    edits: EditPayload,
    gate: CustomizationGate = CustomizationGate.TEXT,
    page_object_id: str | None = None,
    range_start: int | None = None,
    range_end: int | None = None,
) -> list[Operation]:
    """Same as synchronize(), starting from a raw presentation tree."""
    original = build_segment_map(presentation, page_object_id, range_start, range_end)
    return synchronize(original, edits, gate)


# endregion
