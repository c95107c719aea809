"""Shared test helper functions: builders for raw presentation trees and python-pptx decks."""

# mypy: disable-error-code="import-untyped"
# pyright: reportArgumentType=false

from pathlib import Path
from typing import Any

from pptx import Presentation
from pptx.util import Inches

from slidesync.processing.operations import InsertText, Operation


# region Raw tree builders
def text_elements(paragraphs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Build a Slides textElements list.

    Each paragraph is {"runs": [(content, style), ...], "style": {...}, "bullet": {...}}; only
    "runs" is required.
    """
    elements: list[dict[str, Any]] = []
    cursor = 0
    for paragraph in paragraphs:
        runs = paragraph["runs"]
        length = sum(len(content) for content, _ in runs)
        marker: dict[str, Any] = {"style": paragraph.get("style", {})}
        if "bullet" in paragraph:
            marker["bullet"] = paragraph["bullet"]
        elements.append(
            {"startIndex": cursor, "endIndex": cursor + length, "paragraphMarker": marker}
        )
        for content, style in runs:
            elements.append(
                {
                    "startIndex": cursor,
                    "endIndex": cursor + len(content),
                    "textRun": {"content": content, "style": style},
                }
            )
            cursor += len(content)
    return elements


def text_shape(object_id: str, paragraphs: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "objectId": object_id,
        "shape": {"shapeType": "TEXT_BOX", "text": {"textElements": text_elements(paragraphs)}},
    }


def table_element(object_id: str, rows: list[list[list[dict[str, Any]]]]) -> dict[str, Any]:
    """rows[r][c] is the paragraph list of cell (r, c); an empty list makes a cell with no text."""
    table_rows = []
    for row in rows:
        cells = []
        for cell_paragraphs in row:
            cell: dict[str, Any] = {}
            if cell_paragraphs:
                cell["text"] = {"textElements": text_elements(cell_paragraphs)}
            cells.append(cell)
        table_rows.append({"tableCells": cells})
    return {
        "objectId": object_id,
        "table": {"rows": len(rows), "columns": len(rows[0]) if rows else 0, "tableRows": table_rows},
    }


def image_element(object_id: str, url: str) -> dict[str, Any]:
    return {"objectId": object_id, "image": {"contentUrl": url}}


def group_element(object_id: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    return {"objectId": object_id, "elementGroup": {"children": children}}


def slide(object_id: str, *elements: dict[str, Any]) -> dict[str, Any]:
    return {"objectId": object_id, "pageElements": list(elements)}


def presentation(*slides: dict[str, Any]) -> dict[str, Any]:
    return {"presentationId": "deck-1", "slides": list(slides)}


BULLET = {"glyph": "●", "bulletStyle": {}, "listId": "list-1", "nestingLevel": 0}


def sample_tree() -> dict[str, Any]:
    """
    Two slides:
      p1: "title" (Hello[bold] World[not bold]), "body" (two bulleted paragraphs),
          "table1" (1x2 table), "g1" group holding the image "img1"
      p2: "closing" (one plain paragraph)
    """
    return presentation(
        slide(
            "p1",
            text_shape(
                "title",
                [{"runs": [("Hello ", {"bold": True}), ("World\n", {"bold": False})]}],
            ),
            text_shape(
                "body",
                [
                    {
                        "runs": [("First point\n", {"italic": True})],
                        "style": {"alignment": "START"},
                        "bullet": BULLET,
                    },
                    {"runs": [("Second point\n", {})], "bullet": BULLET},
                ],
            ),
            table_element(
                "table1",
                [[[{"runs": [("Name\n", {"bold": True})]}], [{"runs": [("Value\n", {})]}]]],
            ),
            group_element("g1", [image_element("img1", "https://example.com/cat.png")]),
        ),
        slide("p2", text_shape("closing", [{"runs": [("Thanks\n", {})]}])),
    )


# endregion


# region pptx decks
def build_sample_pptx(path: Path) -> Path:
    """
    A one-slide deck on the blank layout with:
      - a textbox with one paragraph: "Hello " (bold) + "World" (not bold)
      - a textbox with two paragraphs: "Alpha" / "Beta"
      - a 1x2 table: "Name" | "Value"
    """
    prs = Presentation()
    new_slide = prs.slides.add_slide(prs.slide_layouts[6])

    title_box = new_slide.shapes.add_textbox(Inches(1), Inches(1), Inches(6), Inches(1))
    paragraph = title_box.text_frame.paragraphs[0]
    hello = paragraph.add_run()
    hello.text = "Hello "
    hello.font.bold = True
    world = paragraph.add_run()
    world.text = "World"
    world.font.bold = False

    body_box = new_slide.shapes.add_textbox(Inches(1), Inches(2), Inches(6), Inches(2))
    body_frame = body_box.text_frame
    body_frame.paragraphs[0].add_run().text = "Alpha"
    body_frame.add_paragraph().add_run().text = "Beta"

    table_shape = new_slide.shapes.add_table(1, 2, Inches(1), Inches(4), Inches(4), Inches(1))
    table_shape.table.cell(0, 0).text = "Name"
    table_shape.table.cell(0, 1).text = "Value"

    prs.save(str(path))
    return path


def find_text_elements(tree: dict[str, Any], first_run_text: str) -> tuple[str, list[dict[str, Any]]]:
    """(object id, textElements) of the first text shape whose first run starts with the given text."""
    for page in tree["slides"]:
        for element in page["pageElements"]:
            elements = ((element.get("shape") or {}).get("text") or {}).get("textElements") or []
            runs = [e["textRun"]["content"] for e in elements if "textRun" in e]
            if runs and runs[0].startswith(first_run_text):
                return element["objectId"], elements
    raise AssertionError(f"No text shape starting with '{first_run_text}' in the tree.")


def find_table_id(tree: dict[str, Any]) -> str:
    for page in tree["slides"]:
        for element in page["pageElements"]:
            if "table" in element:
                return str(element["objectId"])
    raise AssertionError("No table in the tree.")


def inserted_texts(operations: list[Operation]) -> list[str]:
    return [op.text for op in operations if isinstance(op, InsertText)]


# endregion
