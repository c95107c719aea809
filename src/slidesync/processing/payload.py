# payload.py
"""Edit payloads: the runs-only template handed to editors, and parsing their edits back in.

Template / payload JSON shape, keyed by shape object id:

    {
      "p1_i2": {"type": "text", "runs": [{"id": "run-0", "text": "Hello "}], "characterCount": 6},
      "p1_i5": {"type": "table", "cells": {"0-1": {"runs": [{"id": "run-0", "text": "Q3\\n"}]}}}
    }

A text entry may carry "paragraphs": [{"runs": [...]}, ...] instead of "runs", and any entry may
carry a "customization" flag.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from slidesync.models import (
    CellLocation,
    ContainerEdit,
    EditPayload,
    RunEdit,
    SegmentMap,
    ShapeEdit,
    SlideSegments,
    TableShape,
    TextContainer,
    TextShape,
)

log = logging.getLogger("slidesync")


# region build_edit_template
def _runs_only(container: TextContainer) -> list[dict[str, str]]:
    return [{"id": run.id, "text": run.text} for run in container.runs]


def build_edit_template(segment_map: SegmentMap) -> dict[str, Any]:
    """
    Runs-only view of the text and table shapes in a segment map.

    Editors change the "text" values (or drop runs) and send the structure back. Images and
    unknown elements are left out. Text shapes also get a characterCount of their current text.
    """
    template: dict[str, Any] = {}
    for shape_id, shape in segment_map.items():
        if isinstance(shape, TextShape):
            template[shape_id] = {
                "type": "text",
                "runs": _runs_only(shape.container),
                "characterCount": len(shape.container.text),
            }
        elif isinstance(shape, TableShape):
            template[shape_id] = {
                "type": "table",
                "cells": {
                    cell.key: {"runs": _runs_only(container)}
                    for cell, container in sorted(shape.cells.items())
                },
            }
    return template


# endregion


# region merge_customization
def merge_customization(
    template: dict[str, Any], shapes: list[dict[str, Any]]
) -> dict[str, Any]:
    """
    Copy "customization" and "characterCount" from a list of shape records onto matching template entries.

    Records are matched by their "shapeId"; records for shapes not in the template are ignored.
    Mutates and returns the template.
    """
    for shape in shapes:
        shape_id = shape.get("shapeId")
        if shape_id not in template:
            continue
        template[shape_id]["customization"] = shape.get("customization")
        template[shape_id]["characterCount"] = shape.get("characterCount")
    return template


def load_shape_records(path: Path) -> list[dict[str, Any]]:
    """
    Read a JSON array of shape records for merge_customization().

    Raises:
        ValueError: If the file isn't valid JSON or isn't an array.

    Entries that aren't objects are skipped with a warning.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        error_msg = f"Shapes file is not valid JSON: {path} (line {e.lineno}, column {e.colno})"
        log.error(error_msg)
        raise ValueError(error_msg) from e

    if not isinstance(data, list):
        error_msg = f"Shapes file must hold a JSON array of shape records, got {type(data).__name__}: {path}"
        log.error(error_msg)
        raise ValueError(error_msg)

    records: list[dict[str, Any]] = []
    for record in data:
        if not isinstance(record, dict):
            log.warning(f"Ignoring shape record that is not an object: {record!r}")
            continue
        records.append(record)
    log.info(f"Loaded {len(records)} shape record(s) from {path}")
    return records


# endregion


# region parse_edit_payload
def parse_edit_payload(data: Any) -> EditPayload:
    """
    Parse a decoded JSON edit payload.

    Raises:
        ValueError: If the payload isn't a JSON object.

    Malformed shape, cell or run entries are skipped with a warning.
    """
    if not isinstance(data, dict):
        raise ValueError(
            f"Edit payload must be a JSON object keyed by shape id, got {type(data).__name__}."
        )

    payload: EditPayload = {}
    for shape_id, entry in data.items():
        if not isinstance(entry, dict):
            log.warning(f"Skipping edit for shape '{shape_id}': entry is not an object.")
            continue

        customization = entry.get("customization")
        shape_edit = ShapeEdit(
            shape_id=shape_id,
            customization=None if customization is None else str(customization),
        )

        if "cells" in entry:
            shape_edit.cells = _parse_cells(shape_id, entry["cells"])
        else:
            shape_edit.container = _parse_container(shape_id, entry)
            if shape_edit.container is None:
                log.warning(
                    f"Skipping edit for shape '{shape_id}': no 'runs', 'paragraphs' or 'cells'."
                )
                continue

        payload[shape_id] = shape_edit

    return payload


def _parse_cells(shape_id: str, cells: Any) -> dict[CellLocation, ContainerEdit]:
    if not isinstance(cells, dict):
        log.warning(f"Ignoring 'cells' of shape '{shape_id}': not an object.")
        return {}

    parsed: dict[CellLocation, ContainerEdit] = {}
    for cell_key, cell_entry in cells.items():
        try:
            cell = CellLocation.from_key(str(cell_key))
        except ValueError:
            log.warning(f"Ignoring cell '{cell_key}' of shape '{shape_id}': bad cell key.")
            continue
        if not isinstance(cell_entry, dict):
            log.warning(f"Ignoring cell '{cell_key}' of shape '{shape_id}': not an object.")
            continue
        container = _parse_container(shape_id, cell_entry)
        if container is not None:
            parsed[cell] = container
    return parsed


def _parse_container(shape_id: str, entry: dict[str, Any]) -> Optional[ContainerEdit]:
    if isinstance(entry.get("paragraphs"), list):
        paragraphs = []
        for paragraph in entry["paragraphs"]:
            runs = paragraph.get("runs") if isinstance(paragraph, dict) else paragraph
            paragraphs.append(_parse_runs(shape_id, runs))
        return ContainerEdit(paragraphs=paragraphs)
    if isinstance(entry.get("runs"), list):
        return ContainerEdit(runs=_parse_runs(shape_id, entry["runs"]))
    return None


def _parse_runs(shape_id: str, runs: Any) -> list[RunEdit]:
    if not isinstance(runs, list):
        log.warning(f"Ignoring runs of shape '{shape_id}': not a list.")
        return []

    parsed: list[RunEdit] = []
    for run in runs:
        if (
            not isinstance(run, dict)
            or not isinstance(run.get("id"), str)
            or not isinstance(run.get("text"), str)
        ):
            log.warning(f"Ignoring malformed run in shape '{shape_id}': {run!r}")
            continue
        parsed.append(RunEdit(id=run["id"], text=run["text"]))
    return parsed


# endregion


# region load_edit_payload
def load_edit_payload(path: Path) -> EditPayload:
    """Read and parse an edit payload JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        error_msg = f"Edit payload is not valid JSON: {path} (line {e.lineno}, column {e.colno})"
        log.error(error_msg)
        raise ValueError(error_msg) from e

    payload = parse_edit_payload(data)
    log.info(f"Loaded edits for {len(payload)} shape(s) from {path}")
    return payload


# endregion


# region presentation_text
def _container_lines(container: TextContainer) -> list[str]:
    return [paragraph.text.rstrip("\n") for paragraph in container.paragraphs]


def presentation_text(slides: list[SlideSegments]) -> str:
    """
    Plain text of the given slides, in slide and shape order.

    Text shapes contribute one line per paragraph; a table contributes one line with its cells
    separated by spaces. Slides are separated by a blank line.
    """
    chunks: list[str] = []
    for slide in slides:
        lines: list[str] = []
        for shape in slide.segment_map.values():
            if isinstance(shape, TextShape):
                lines.extend(_container_lines(shape.container))
            elif isinstance(shape, TableShape):
                cell_texts = [
                    " ".join(_container_lines(container))
                    for _, container in sorted(shape.cells.items())
                ]
                lines.append(" ".join(text for text in cell_texts if text))
        chunks.append("\n".join(lines).strip())
    return "\n\n".join(chunks)


# endregion
