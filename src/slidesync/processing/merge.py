# merge.py
"""Apply caller-supplied text edits to a cloned segment map, matching runs by id."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field

from slidesync.internals.define_config import CustomizationGate
from slidesync.models import (
    ContainerEdit,
    ContainerKey,
    EditPayload,
    Paragraph,
    RunEdit,
    SegmentMap,
    ShapeEdit,
    ShapeSegments,
    TableShape,
    TextContainer,
    TextShape,
    clone_segment_map,
)

log = logging.getLogger("slidesync")


@dataclass
class MergeResult:
    """The working segment map plus the containers that were actually merged, in payload order."""

    segment_map: SegmentMap
    touched: list[ContainerKey] = field(default_factory=list)


# region merge_edits
def merge_edits(
    original: SegmentMap,
    edits: EditPayload,
    gate: CustomizationGate = CustomizationGate.TEXT,
) -> MergeResult:
    """
    Clone the original map and replace run text from the edit payload.

    Only text changes: styles, paragraph attributes and bullets stay as extracted. Runs the edit
    leaves out are deleted; runs the edit names but the original doesn't have are ignored.
    Unknown shapes and cells are skipped and their containers are left out of `touched`.

    The original map is never mutated.
    """
    working = clone_segment_map(original)
    result = MergeResult(segment_map=working)

    for shape_id, shape_edit in edits.items():
        shape = working.get(shape_id)
        if shape is None:
            log.warning(f"Edit refers to unknown shape '{shape_id}'; skipping.")
            continue

        if _is_gated_out(shape, shape_edit, gate):
            log.info(
                f"Skipping shape '{shape_id}': customization flag is '{shape_edit.customization}', not marked as customized."
            )
            continue

        if isinstance(shape, TextShape):
            if shape_edit.container is None:
                log.warning(f"Edit for text shape '{shape_id}' carries no runs; skipping.")
                continue
            _merge_container(shape.container, shape_edit.container)
            result.touched.append((shape_id, None))

        elif isinstance(shape, TableShape):
            if not shape_edit.cells:
                log.warning(f"Edit for table '{shape_id}' carries no cells; skipping.")
                continue
            for cell, cell_edit in shape_edit.cells.items():
                container = shape.cells.get(cell)
                if container is None:
                    log.warning(
                        f"Edit refers to unknown cell {cell.key} of table '{shape_id}'; skipping."
                    )
                    continue
                _merge_container(container, cell_edit)
                result.touched.append((shape_id, cell))

        else:
            log.warning(
                f"Shape '{shape_id}' is a {shape.kind} element and holds no text; skipping."
            )

    log.debug(f"Merged edits into {len(result.touched)} text container(s).")
    return result


# endregion


# region _is_gated_out
def _is_gated_out(
    shape: ShapeSegments, shape_edit: ShapeEdit, gate: CustomizationGate
) -> bool:
    """True when the customization flag is present, covers this shape kind, and isn't "CUSTOM"."""
    if gate == CustomizationGate.OFF or not shape_edit.has_customization_flag:
        return False
    if gate == CustomizationGate.TEXT and not isinstance(shape, TextShape):
        return False
    return not shape_edit.is_customized


# endregion


# region _merge_container
def _merge_container(container: TextContainer, edit: ContainerEdit) -> None:
    """Replace the container's paragraphs in place with the merged ones."""
    if edit.paragraphs is not None:
        container.paragraphs = _rebuild_paragraphs(container, edit.paragraphs)
    else:
        _filter_runs(container, edit.runs or [])


def _edit_texts(run_edits: list[RunEdit]) -> dict[str, str]:
    # First occurrence wins when an id is repeated
    texts: dict[str, str] = {}
    for run_edit in run_edits:
        texts.setdefault(run_edit.id, run_edit.text)
    return texts


def _filter_runs(container: TextContainer, run_edits: list[RunEdit]) -> None:
    """Flat form: each paragraph keeps only the runs the edit names, with the edit's text."""
    texts = _edit_texts(run_edits)
    for paragraph in container.paragraphs:
        kept = []
        for run in paragraph.runs:
            if run.id in texts:
                run.text = texts[run.id]
                kept.append(run)
        paragraph.runs = kept


def _rebuild_paragraphs(
    container: TextContainer, paragraph_edits: list[list[RunEdit]]
) -> list[Paragraph]:
    """
    Paragraph form: one working paragraph per edited paragraph.

    Paragraph attributes come from the original paragraph at the same position (or a neutral
    placeholder past the end); each run is a copy of the original run with the same id.
    """
    original_runs = {run.id: run for run in container.runs}
    rebuilt: list[Paragraph] = []

    for position, run_edits in enumerate(paragraph_edits):
        if position < len(container.paragraphs):
            paragraph = copy.deepcopy(container.paragraphs[position])
            paragraph.runs = []
        else:
            paragraph = Paragraph.placeholder(position)

        for run_edit in run_edits:
            source = original_runs.get(run_edit.id)
            if source is None:
                log.debug(f"Ignoring edit for unknown run id '{run_edit.id}'.")
                continue
            run = copy.deepcopy(source)
            run.text = run_edit.text
            paragraph.runs.append(run)

        rebuilt.append(paragraph)

    return rebuilt


# endregion

