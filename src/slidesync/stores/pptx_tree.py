# pptx_tree.py
"""Convert a python-pptx Presentation into the raw tree shape the Google Slides API returns.

Object ids follow the Slides convention: slides are "p<slide_id>", page elements are
"p<slide_id>_i<shape_id>". Every paragraph ends in "\\n" (the last one included), soft line breaks
are "\\v", and styles use Slides field names.
"""

# For python-pptx's private _Run and _Paragraph classes:
# pyright: reportPrivateUsage=false
# mypy: disable-error-code="import-untyped"

# region imports
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from pptx import presentation
from pptx.enum.dml import MSO_COLOR_TYPE, MSO_FILL
from pptx.enum.shapes import MSO_SHAPE_TYPE, PP_PLACEHOLDER
from pptx.enum.text import PP_PARAGRAPH_ALIGNMENT as PP_ALIGN
from pptx.oxml.ns import qn
from pptx.text.text import Font as Font_pptx
from pptx.text.text import TextFrame
from pptx.text.text import _Paragraph as Paragraph_pptx
from pptx.text.text import _Run as Run_pptx
from pptx.util import Emu

from slidesync.utils import hex_to_rgb

# endregion

log = logging.getLogger("slidesync")


# region consts
ALIGNMENT_MAP_PP2API = {
    PP_ALIGN.LEFT: "START",
    PP_ALIGN.CENTER: "CENTER",
    PP_ALIGN.RIGHT: "END",
    PP_ALIGN.JUSTIFY: "JUSTIFIED",
}

# Placeholder types whose paragraphs inherit a bullet from the slide master's body style
BULLETED_PLACEHOLDER_TYPES = {PP_PLACEHOLDER.BODY, PP_PLACEHOLDER.OBJECT}
INHERITED_BULLET_GLYPH = "•"

AUTONUM_SCHEME_RE = re.compile(
    r"^(?P<kind>arabic|roman|alpha)(?P<case>Uc|Lc)?(?P<suffix>Period|ParenR|ParenBoth|Plain)$"
)
# endregion


# region Object ids
def slide_object_id(slide: Any) -> str:
    return f"p{slide.slide_id}"


def shape_object_id(slide: Any, shape: Any) -> str:
    return f"p{slide.slide_id}_i{shape.shape_id}"


# endregion


# region presentation_to_tree
def presentation_to_tree(prs: presentation.Presentation) -> dict[str, Any]:
    """Raw presentation tree: {"slides": [{"objectId", "pageElements": [...]}, ...]}."""
    slides = []
    for slide in prs.slides:
        slides.append(
            {
                "objectId": slide_object_id(slide),
                "pageElements": [_shape_to_element(slide, shape) for shape in slide.shapes],
            }
        )
    return {"slides": slides}


def _shape_to_element(slide: Any, shape: Any) -> dict[str, Any]:
    element: dict[str, Any] = {"objectId": shape_object_id(slide, shape)}

    if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
        element["elementGroup"] = {
            "children": [_shape_to_element(slide, child) for child in shape.shapes]
        }
    elif shape.has_table:
        element["table"] = _table_to_api(shape.table)
    elif shape.shape_type == MSO_SHAPE_TYPE.PICTURE:
        element["image"] = {}
    elif shape.has_text_frame:
        element["shape"] = {
            "text": {
                "textElements": text_frame_elements(
                    shape.text_frame, inherits_bullets=_inherits_bullets(shape)
                )
            }
        }
    else:
        element["shape"] = {}

    return element


def _inherits_bullets(shape: Any) -> bool:
    if not shape.is_placeholder:
        return False
    return shape.placeholder_format.type in BULLETED_PLACEHOLDER_TYPES


def _table_to_api(table: Any) -> dict[str, Any]:
    table_rows = []
    for row in table.rows:
        table_rows.append(
            {
                "tableCells": [
                    {"text": {"textElements": text_frame_elements(cell.text_frame)}}
                    for cell in row.cells
                ]
            }
        )
    return {
        "rows": len(table.rows),
        "columns": len(table.columns),
        "tableRows": table_rows,
    }


# endregion


# region text_frame_elements
def text_frame_elements(
    text_frame: TextFrame, inherits_bullets: bool = False
) -> list[dict[str, Any]]:
    """
    The flat paragraphMarker / textRun token list for one text frame.

    The paragraph's "\\n" terminator is appended to its last run, or becomes a run of its own in an
    empty paragraph.
    """
    elements: list[dict[str, Any]] = []
    cursor = 0
    numbering: dict[int, int] = {}

    for paragraph in text_frame.paragraphs:
        pieces = paragraph_pieces(paragraph)
        if pieces:
            content, style = pieces[-1]
            pieces[-1] = (content + "\n", style)
        else:
            pieces.append(("\n", {}))

        length = sum(len(content) for content, _ in pieces)
        marker: dict[str, Any] = {"style": paragraph_style_to_api(paragraph)}
        bullet = _bullet_to_api(paragraph, numbering, inherits_bullets)
        if bullet is not None:
            marker["bullet"] = bullet

        elements.append(
            {"startIndex": cursor, "endIndex": cursor + length, "paragraphMarker": marker}
        )
        for content, style in pieces:
            elements.append(
                {
                    "startIndex": cursor,
                    "endIndex": cursor + len(content),
                    "textRun": {"content": content, "style": style},
                }
            )
            cursor += len(content)

    return elements


def paragraph_pieces(paragraph: Paragraph_pptx) -> list[tuple[str, dict[str, Any]]]:
    """(content, api style) per a:r run, with a:br soft breaks as "\\v"."""
    pieces: list[tuple[str, dict[str, Any]]] = []
    for child in paragraph._p.iterchildren():
        if child.tag == qn("a:r"):
            run = Run_pptx(child, paragraph)
            if run.text:
                pieces.append((run.text, text_style_to_api(run.font)))
        elif child.tag == qn("a:br"):
            pieces.append(("\v", {}))
    return pieces


# endregion


# region text_style_to_api
def text_style_to_api(font: Font_pptx) -> dict[str, Any]:
    """Sparse Slides TextStyle for a python-pptx Font; inherited attributes are left out."""
    style: dict[str, Any] = {}
    rPr = font._element

    if font.bold is not None:
        style["bold"] = font.bold
    if font.italic is not None:
        style["italic"] = font.italic
    if font.underline is not None:
        style["underline"] = bool(font.underline)

    strike = rPr.get("strike")
    if strike:
        style["strikethrough"] = strike != "noStrike"

    cap = rPr.get("cap")
    if cap == "small":
        style["smallCaps"] = True
    elif cap == "none":
        style["smallCaps"] = False

    baseline = rPr.get("baseline")
    if baseline:
        baseline_val = int(baseline)
        if baseline_val > 0:
            style["baselineOffset"] = "SUPERSCRIPT"
        elif baseline_val < 0:
            style["baselineOffset"] = "SUBSCRIPT"
        else:
            style["baselineOffset"] = "NONE"

    if font.name is not None:
        style["fontFamily"] = font.name
    if font.size is not None:
        style["fontSize"] = {"magnitude": font.size.pt, "unit": "PT"}

    # Font.color would add an empty solidFill on read, so go through fill
    if font.fill.type == MSO_FILL.SOLID and font.fill.fore_color.type == MSO_COLOR_TYPE.RGB:
        style["foregroundColor"] = {
            "opaqueColor": {"rgbColor": hex_to_rgb(str(font.fill.fore_color.rgb))}
        }

    highlight = rPr.find(f"{qn('a:highlight')}/{qn('a:srgbClr')}")
    if highlight is not None and highlight.get("val"):
        style["backgroundColor"] = {
            "opaqueColor": {"rgbColor": hex_to_rgb(highlight.get("val"))}
        }

    return style


# endregion


# region paragraph_style_to_api
def _pt_dimension(emu: int) -> dict[str, Any]:
    return {"magnitude": Emu(emu).pt, "unit": "PT"}


def paragraph_style_to_api(paragraph: Paragraph_pptx) -> dict[str, Any]:
    """Sparse Slides ParagraphStyle for a python-pptx paragraph."""
    style: dict[str, Any] = {}

    alignment = ALIGNMENT_MAP_PP2API.get(paragraph.alignment)
    if alignment:
        style["alignment"] = alignment

    # Only proportional spacing maps onto Slides' percent lineSpacing
    line_spacing = paragraph.line_spacing
    if isinstance(line_spacing, float):
        style["lineSpacing"] = round(line_spacing * 100, 2)

    if paragraph.space_before is not None:
        style["spaceAbove"] = _pt_dimension(paragraph.space_before)
    if paragraph.space_after is not None:
        style["spaceBelow"] = _pt_dimension(paragraph.space_after)

    pPr = paragraph._p.pPr
    if pPr is not None:
        mar_l = pPr.get("marL")
        indent = pPr.get("indent")
        mar_r = pPr.get("marR")
        if mar_l is not None:
            style["indentStart"] = _pt_dimension(int(mar_l))
        if indent is not None:
            style["indentFirstLine"] = _pt_dimension(int(mar_l or 0) + int(indent))
        if mar_r is not None:
            style["indentEnd"] = _pt_dimension(int(mar_r))

        rtl = pPr.get("rtl")
        if rtl is not None:
            style["direction"] = "RIGHT_TO_LEFT" if rtl in ("1", "true") else "LEFT_TO_RIGHT"

    return style


# endregion


# region bullets
def _bullet_to_api(
    paragraph: Paragraph_pptx, numbering: dict[int, int], inherits_bullets: bool
) -> Optional[dict[str, Any]]:
    """
    Slides Bullet for a paragraph, or None.

    Auto-numbered paragraphs get the glyph they actually display ("3.", "iv)", ...), counted per
    nesting level across consecutive paragraphs of the frame.
    """
    level = paragraph.level
    # A shallower paragraph restarts numbering of the deeper levels
    for deeper in [lvl for lvl in numbering if lvl > level]:
        del numbering[deeper]

    pPr = paragraph._p.pPr
    bu_char = pPr.find(qn("a:buChar")) if pPr is not None else None
    bu_autonum = pPr.find(qn("a:buAutoNum")) if pPr is not None else None
    bu_none = pPr.find(qn("a:buNone")) if pPr is not None else None

    if bu_autonum is not None:
        start_at = int(bu_autonum.get("startAt", "1"))
        number = numbering.get(level, start_at - 1) + 1
        numbering[level] = number
        glyph = autonum_glyph(bu_autonum.get("type", "arabicPeriod"), number)
        return {"glyph": glyph, "bulletStyle": {}, "nestingLevel": level}

    numbering.pop(level, None)

    if bu_char is not None:
        return {"glyph": bu_char.get("char"), "bulletStyle": {}, "nestingLevel": level}

    if bu_none is None and inherits_bullets and paragraph.text.strip():
        return {
            "glyph": INHERITED_BULLET_GLYPH,
            "bulletStyle": {},
            "nestingLevel": level,
        }

    return None


def to_roman(number: int) -> str:
    numerals = [
        (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"), (100, "C"), (90, "XC"),
        (50, "L"), (40, "XL"), (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
    ]  # fmt: skip
    result = ""
    for value, numeral in numerals:
        while number >= value:
            result += numeral
            number -= value
    return result


def to_alpha(number: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA"""
    result = ""
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        result = chr(ord("A") + remainder) + result
    return result


def autonum_glyph(scheme: str, number: int) -> str:
    """The text PowerPoint shows for item `number` of an a:buAutoNum list of type `scheme`."""
    match = AUTONUM_SCHEME_RE.match(scheme)
    if match is None:
        log.debug(f"Unsupported autonumber scheme '{scheme}'; treating it as arabicPeriod.")
        return f"{number}."

    kind = match.group("kind")
    if kind == "arabic":
        label = str(number)
    elif kind == "roman":
        label = to_roman(number)
    else:
        label = to_alpha(number)
    if match.group("case") == "Lc":
        label = label.lower()

    suffix = match.group("suffix")
    if suffix == "Period":
        return f"{label}."
    if suffix == "ParenR":
        return f"{label})"
    if suffix == "ParenBoth":
        return f"({label})"
    return label


# endregion


# region index_text_targets
def index_text_targets(prs: presentation.Presentation) -> dict[str, Any]:
    """Object id -> python-pptx shape (text shapes) or Table (tables), across all slides and groups."""
    targets: dict[str, Any] = {}

    def visit(slide: Any, shape: Any) -> None:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            for child in shape.shapes:
                visit(slide, child)
        elif shape.has_table:
            targets[shape_object_id(slide, shape)] = shape.table
        elif shape.shape_type != MSO_SHAPE_TYPE.PICTURE and shape.has_text_frame:
            targets[shape_object_id(slide, shape)] = shape

    for slide in prs.slides:
        for shape in slide.shapes:
            visit(slide, shape)
    return targets


# endregion
