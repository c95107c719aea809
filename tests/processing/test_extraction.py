"""Tests for walking raw presentation trees into segment maps."""

from typing import Any

import pytest

from slidesync.models import CellLocation, OpaqueShape, TableShape, TextShape
from slidesync.processing.extraction import (
    build_segment_map,
    extract_paragraphs,
    extract_slide,
    extract_slides,
)
from tests.helpers import presentation, slide, text_elements, text_shape


# region extract_paragraphs
def test_markers_open_paragraphs_and_runs_get_cursor_offsets() -> None:
    container = extract_paragraphs(
        text_elements(
            [
                {"runs": [("One ", {"bold": True}), ("two\n", {})], "style": {"alignment": "CENTER"}},
                {"runs": [("Three\n", {"italic": True})]},
            ]
        )
    )

    assert [p.id for p in container.paragraphs] == ["paragraph-0", "paragraph-1"]
    assert [r.id for r in container.runs] == ["run-0", "run-1", "run-2"]
    assert [(r.start_index, r.end_index) for r in container.runs] == [(0, 4), (4, 8), (8, 14)]
    assert (container.paragraphs[0].start_index, container.paragraphs[0].end_index) == (0, 8)
    assert (container.paragraphs[1].start_index, container.paragraphs[1].end_index) == (8, 14)
    assert container.paragraphs[0].paragraph_style.alignment == "CENTER"
    assert container.runs[0].style.bold is True
    assert container.runs[1].style.bold is None
    assert container.text == "One two\nThree\n"


def test_runs_before_any_marker_get_an_implicit_paragraph() -> None:
    container = extract_paragraphs([{"textRun": {"content": "orphan\n", "style": {}}}])

    assert len(container.paragraphs) == 1
    assert container.paragraphs[0].bullet is None
    assert container.paragraphs[0].runs[0].text == "orphan\n"


def test_runs_without_content_are_skipped() -> None:
    container = extract_paragraphs(
        [
            {"paragraphMarker": {"style": {}}},
            {"textRun": {"content": "", "style": {"bold": True}}},
            {"textRun": {"content": "kept\n", "style": {}}},
        ]
    )

    assert [r.text for r in container.runs] == ["kept\n"]
    assert container.runs[0].id == "run-0"


def test_bullet_is_read_from_the_marker() -> None:
    bullet = {"glyph": "3.", "bulletStyle": {"bold": True}, "listId": "L", "nestingLevel": 1}
    container = extract_paragraphs(text_elements([{"runs": [("x\n", {})], "bullet": bullet}]))

    parsed = container.paragraphs[0].bullet
    assert parsed is not None
    assert parsed.glyph == "3."
    assert parsed.bullet_style == {"bold": True}
    assert parsed.list_id == "L"
    assert parsed.nesting_level == 1


@pytest.mark.parametrize("elements", [None, []])
def test_no_elements_gives_empty_container(elements: Any) -> None:
    container = extract_paragraphs(elements)
    assert container.paragraphs == []
    assert container.text == ""


# endregion


# region page elements
def test_sample_tree_shapes_are_classified(raw_presentation: dict[str, Any]) -> None:
    segment_map = extract_slide(raw_presentation["slides"][0])

    assert list(segment_map) == ["title", "body", "table1", "img1"]
    assert isinstance(segment_map["title"], TextShape)
    assert isinstance(segment_map["table1"], TableShape)
    image = segment_map["img1"]
    assert isinstance(image, OpaqueShape)
    assert image.kind == "image"
    assert image.image_url == "https://example.com/cat.png"


def test_group_children_are_flattened_and_group_has_no_entry(
    raw_presentation: dict[str, Any],
) -> None:
    segment_map = extract_slide(raw_presentation["slides"][0])
    assert "g1" not in segment_map
    assert "img1" in segment_map


def test_table_cells_are_keyed_by_row_and_column(raw_presentation: dict[str, Any]) -> None:
    table = extract_slide(raw_presentation["slides"][0])["table1"]
    assert isinstance(table, TableShape)

    assert sorted(table.cells) == [CellLocation(0, 0), CellLocation(0, 1)]
    assert table.cells[CellLocation(0, 0)].text == "Name\n"
    # Run ids restart per cell
    assert table.cells[CellLocation(0, 1)].runs[0].id == "run-0"


def test_empty_table_cell_has_empty_container() -> None:
    raw = slide(
        "s",
        {
            "objectId": "t",
            "table": {"tableRows": [{"tableCells": [{}, {"text": {"textElements": []}}]}]},
        },
    )
    table = extract_slide(raw)["t"]
    assert isinstance(table, TableShape)
    assert table.cells[CellLocation(0, 0)].paragraphs == []
    assert table.cells[CellLocation(0, 1)].paragraphs == []


def test_elements_without_object_id_are_skipped() -> None:
    raw = slide("s", {"shape": {"text": {"textElements": []}}}, text_shape("ok", [{"runs": [("a\n", {})]}]))
    assert list(extract_slide(raw)) == ["ok"]


def test_unrecognized_elements_are_opaque() -> None:
    raw = slide("s", {"objectId": "line1", "line": {}}, {"objectId": "bare", "shape": {}})
    segment_map = extract_slide(raw)

    assert segment_map["line1"] == OpaqueShape(kind="unknown")
    # A shape without text isn't a text shape
    assert segment_map["bare"] == OpaqueShape(kind="unknown")


# endregion


# region extract_slides
def test_slide_range_is_one_based_and_inclusive(raw_presentation: dict[str, Any]) -> None:
    slides = extract_slides(raw_presentation, range_start=2, range_end=2)

    assert [s.slide_number for s in slides] == [2]
    assert slides[0].page_object_id == "p2"
    assert list(slides[0].segment_map) == ["closing"]


def test_page_object_id_selects_one_slide(raw_presentation: dict[str, Any]) -> None:
    slides = extract_slides(raw_presentation, page_object_id="p1")
    assert [s.page_object_id for s in slides] == ["p1"]


def test_unknown_page_object_id_gives_nothing(raw_presentation: dict[str, Any]) -> None:
    assert extract_slides(raw_presentation, page_object_id="nope") == []


def test_presentation_without_slides() -> None:
    assert extract_slides({}) == []
    assert build_segment_map(presentation()) == {}


def test_build_segment_map_flattens_all_slides(raw_presentation: dict[str, Any]) -> None:
    segment_map = build_segment_map(raw_presentation)
    assert list(segment_map) == ["title", "body", "table1", "img1", "closing"]


# endregion
