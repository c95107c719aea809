"""End-to-end properties of synchronize(): merge, boundary repair, offsets and compilation together."""

import copy
from typing import Any

from slidesync.internals.define_config import CustomizationGate
from slidesync.models import (
    CellLocation,
    ContainerEdit,
    RunEdit,
    SegmentMap,
    ShapeEdit,
    get_container,
)
from slidesync.processing.engine import finalize_merge, synchronize, synchronize_presentation
from slidesync.processing.merge import merge_edits
from slidesync.processing.operations import (
    CreateParagraphBullets,
    DeleteText,
    InsertText,
    Operation,
    TextRange,
    UpdateParagraphStyle,
    UpdateTextStyle,
)
from slidesync.processing.payload import build_edit_template, parse_edit_payload
from tests.helpers import inserted_texts, presentation, slide, table_element


def _flat(shape_id: str, *runs: tuple[str, str]) -> dict[str, ShapeEdit]:
    return {
        shape_id: ShapeEdit(
            shape_id=shape_id,
            container=ContainerEdit(runs=[RunEdit(id=i, text=t) for i, t in runs]),
        )
    }


def _ops_for(operations: list[Operation], object_id: str) -> list[Operation]:
    return [op for op in operations if op.object_id == object_id]


def test_unchanged_template_round_trips_every_container(segment_map: SegmentMap) -> None:
    edits = parse_edit_payload(build_edit_template(segment_map))

    operations = synchronize(segment_map, edits)

    # The final paragraph terminator is implicit, so it is never inserted
    assert inserted_texts(operations) == [
        "Hello World",
        "First point\nSecond point",
        "Name",
        "Value",
        "Thanks",
    ]


def test_hello_world(segment_map: SegmentMap) -> None:
    operations = synchronize(segment_map, _flat("title", ("run-0", "Hi "), ("run-1", "Earth\n")))

    assert operations[:4] == [
        DeleteText(object_id="title"),
        InsertText(object_id="title", text="Hi Earth"),
        UpdateTextStyle(object_id="title", text_range=TextRange(0, 3), style={"bold": True}, fields=("bold",)),
        UpdateTextStyle(object_id="title", text_range=TextRange(3, 8), style={"bold": False}, fields=("bold",)),
    ]


def test_missing_terminator_in_the_edit_is_harmless(segment_map: SegmentMap) -> None:
    operations = synchronize(segment_map, _flat("title", ("run-0", "Hi "), ("run-1", "Earth")))
    assert inserted_texts(operations) == ["Hi Earth"]


def test_bulleted_body_keeps_paragraphs_bullets_and_styles(segment_map: SegmentMap) -> None:
    operations = synchronize(
        segment_map, _flat("body", ("run-0", "Uno\n"), ("run-1", "Dos\n"))
    )

    assert inserted_texts(operations) == ["Uno\nDos"]
    bullets = [op for op in operations if isinstance(op, CreateParagraphBullets)]
    assert [op.text_range for op in bullets] == [TextRange(0, 4), TextRange(4, 7)]
    assert {op.bullet_preset for op in bullets} == {"BULLET_DISC_CIRCLE_SQUARE"}
    paragraph_styles = [op for op in operations if isinstance(op, UpdateParagraphStyle)]
    assert [(op.text_range, op.style) for op in paragraph_styles] == [
        (TextRange(0, 4), {"alignment": "START"})
    ]
    italic = [op for op in operations if isinstance(op, UpdateTextStyle)]
    assert [(op.text_range, op.style) for op in italic] == [(TextRange(0, 4), {"italic": True})]


def test_deleted_run_drops_its_paragraph_text(segment_map: SegmentMap) -> None:
    operations = synchronize(segment_map, _flat("body", ("run-1", "Only\n")))

    # Paragraph 0 has no runs left; paragraph 1 carries the last run
    assert inserted_texts(operations) == ["Only"]
    bullets = [op for op in operations if isinstance(op, CreateParagraphBullets)]
    assert [op.text_range for op in bullets] == [TextRange(0, 4)]


def test_surplus_paragraphs_collapse(segment_map: SegmentMap) -> None:
    edits = {
        "title": ShapeEdit(
            shape_id="title",
            container=ContainerEdit(
                paragraphs=[
                    [RunEdit(id="run-0", text="A\n")],
                    [RunEdit(id="run-1", text="B\n")],
                ]
            ),
        )
    }

    operations = synchronize(segment_map, edits)

    # The title had one paragraph, so the second one's run joins it
    assert inserted_texts(operations) == ["A\nB"]


def test_emptied_container_produces_no_operations(segment_map: SegmentMap) -> None:
    operations = synchronize(segment_map, _flat("title", ("run-0", ""), ("run-1", "")))
    assert operations == []


def test_cell_that_was_and_stays_empty_produces_no_operations() -> None:
    tree = presentation(slide("p1", table_element("grid", [[[{"runs": [("Name\n", {})]}], []]])))
    edits = {
        "grid": ShapeEdit(shape_id="grid", cells={CellLocation(0, 1): ContainerEdit(runs=[])})
    }

    assert synchronize_presentation(tree, edits) == []


def test_run_ranges_are_contiguous_and_cover_the_inserted_text(segment_map: SegmentMap) -> None:
    merge_result = merge_edits(segment_map, _flat("title", ("run-0", "Alpha "), ("run-1", "Beta\n")))
    finalize_merge(merge_result, segment_map)

    container = get_container(merge_result.segment_map, ("title", None))
    assert container is not None
    cursor = 0
    for run in container.runs:
        assert run.start_index == cursor
        cursor = run.end_index
    assert cursor == len(container.text) == len("Alpha Beta")


def test_original_is_left_untouched(segment_map: SegmentMap) -> None:
    before = copy.deepcopy(segment_map)
    synchronize(segment_map, _flat("title", ("run-0", "Changed")))
    assert segment_map == before


def test_gated_shapes_are_left_out(segment_map: SegmentMap) -> None:
    edits = _flat("title", ("run-0", "x"))
    edits["title"].customization = "AUTO"

    assert synchronize(segment_map, edits, CustomizationGate.TEXT) == []
    assert synchronize(segment_map, edits, CustomizationGate.OFF) != []


def test_table_cell_sync_addresses_the_cell(segment_map: SegmentMap) -> None:
    edits = {
        "table1": ShapeEdit(
            shape_id="table1",
            cells={CellLocation(0, 1): ContainerEdit(runs=[RunEdit(id="run-0", text="99\n")])},
        )
    }

    operations = synchronize(segment_map, edits)

    assert inserted_texts(operations) == ["99"]
    assert {op.cell for op in operations} == {CellLocation(0, 1)}


def test_synchronize_presentation_honors_slide_selection(raw_presentation: dict[str, Any]) -> None:
    edits = {**_flat("title", ("run-0", "x")), **_flat("closing", ("run-0", "Bye\n"))}

    operations = synchronize_presentation(raw_presentation, edits, page_object_id="p2")

    assert {op.object_id for op in operations} == {"closing"}
    assert _ops_for(operations, "closing")[1] == InsertText(object_id="closing", text="Bye")
