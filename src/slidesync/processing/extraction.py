# extraction.py
"""Walk a raw presentation tree (Slides API shape) and build the segment map of shapes, paragraphs and runs."""

from __future__ import annotations

import logging
from typing import Any, Optional

from slidesync.models import (
    Bullet,
    CellLocation,
    OpaqueShape,
    Paragraph,
    ParagraphStyle,
    Run,
    SegmentMap,
    SlideSegments,
    TableShape,
    TextContainer,
    TextShape,
    TextStyle,
)

log = logging.getLogger("slidesync")


# region extract_paragraphs
def extract_paragraphs(text_elements: list[dict[str, Any]] | None) -> TextContainer:
    """
    Turn a flat list of paragraphMarker / textRun tokens into paragraphs holding runs.

    A paragraphMarker closes the open paragraph and opens a new one carrying the marker's style and
    bullet. A textRun with content appends a run to the open paragraph and advances the cursor.
    Runs that arrive before any marker go into an implicit paragraph with neutral style.

    Ids (paragraph-N, run-N) are only unique within this one call.
    """
    paragraphs: list[Paragraph] = []
    current: Optional[Paragraph] = None
    paragraph_counter = 0
    run_counter = 0
    cursor = 0

    for element in text_elements or []:
        marker = element.get("paragraphMarker")
        if marker is not None:
            if current is not None:
                current.end_index = cursor
                paragraphs.append(current)
            current = Paragraph(
                id=f"paragraph-{paragraph_counter}",
                start_index=cursor,
                end_index=cursor,
                paragraph_style=ParagraphStyle.from_api(marker.get("style")),
                bullet=Bullet.from_api(marker.get("bullet")),
            )
            paragraph_counter += 1

        text_run = element.get("textRun")
        if text_run and text_run.get("content"):
            content: str = text_run["content"]
            if current is None:
                current = Paragraph(
                    id=f"paragraph-{paragraph_counter}",
                    start_index=cursor,
                    end_index=cursor,
                )
                paragraph_counter += 1
            current.runs.append(
                Run(
                    id=f"run-{run_counter}",
                    text=content,
                    start_index=cursor,
                    end_index=cursor + len(content),
                    style=TextStyle.from_api(text_run.get("style")),
                )
            )
            run_counter += 1
            cursor += len(content)

    if current is not None:
        current.end_index = cursor
        paragraphs.append(current)

    return TextContainer(paragraphs=paragraphs)


# endregion


# region _visit_element
def _visit_element(element: dict[str, Any], segment_map: SegmentMap) -> None:
    """Add one page element to the map. Groups recurse into their children instead of getting an entry."""
    object_id = element.get("objectId")
    if not object_id:
        log.debug("Skipping page element without an objectId (and its children).")
        return

    shape = element.get("shape")
    if shape and shape.get("text"):
        segment_map[object_id] = TextShape(
            container=extract_paragraphs(shape["text"].get("textElements"))
        )
        return

    table = element.get("table")
    if table is not None:
        cells: dict[CellLocation, TextContainer] = {}
        for row_index, row in enumerate(table.get("tableRows") or []):
            for column_index, cell in enumerate(row.get("tableCells") or []):
                cell_text = cell.get("text") or {}
                cells[CellLocation(row_index, column_index)] = extract_paragraphs(
                    cell_text.get("textElements")
                )
        segment_map[object_id] = TableShape(cells=cells)
        return

    group = element.get("elementGroup")
    if group is not None:
        children = group.get("children")
        if not children:
            log.warning(f"Group {object_id} has no children.")
        for child in children or []:
            _visit_element(child, segment_map)
        return

    image = element.get("image")
    if image is not None:
        segment_map[object_id] = OpaqueShape(
            kind="image", image_url=image.get("contentUrl")
        )
        return

    segment_map[object_id] = OpaqueShape(kind="unknown")


# endregion


# region extract_slide
def extract_slide(slide: dict[str, Any]) -> SegmentMap:
    """Segment map for every page element on one slide, in document order."""
    segment_map: SegmentMap = {}
    for element in slide.get("pageElements") or []:
        _visit_element(element, segment_map)
    return segment_map


# endregion


# region extract_slides
def extract_slides(
    presentation: dict[str, Any],
    page_object_id: str | None = None,
    range_start: int | None = None,
    range_end: int | None = None,
) -> list[SlideSegments]:
    """
    Extract every slide of a presentation, optionally filtered.

    Args:
        presentation: Raw presentation tree with a "slides" list.
        page_object_id: Keep only the slide with this object id.
        range_start: First slide number to keep (1-based, inclusive).
        range_end: Last slide number to keep (1-based, inclusive).

    Slide numbers always reflect the slide's position in the whole deck, even after filtering.
    """
    result: list[SlideSegments] = []
    for index, slide in enumerate(presentation.get("slides") or []):
        slide_number = index + 1
        if range_start is not None and slide_number < range_start:
            continue
        if range_end is not None and slide_number > range_end:
            continue
        slide_id = slide.get("objectId", "")
        if page_object_id and slide_id != page_object_id:
            continue
        result.append(
            SlideSegments(
                slide_number=slide_number,
                page_object_id=slide_id,
                segment_map=extract_slide(slide),
            )
        )

    if page_object_id and not result:
        log.warning(f"No slide with page object id '{page_object_id}' was found.")

    return result


# endregion


# region build_segment_map
def build_segment_map(
    presentation: dict[str, Any],
    page_object_id: str | None = None,
    range_start: int | None = None,
    range_end: int | None = None,
) -> SegmentMap:
    """Flatten the selected slides into one segment map keyed by shape object id."""
    segment_map: SegmentMap = {}
    for slide in extract_slides(presentation, page_object_id, range_start, range_end):
        segment_map.update(slide.segment_map)
    log.debug(f"Extracted {len(segment_map)} shape(s) into the segment map.")
    return segment_map


# endregion
