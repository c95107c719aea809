# pptx_apply.py
"""Replay Slides-style edit operations against python-pptx text frames.

Operations are first applied to in-memory text buffers (one per shape or table cell). Only when
the whole batch has been applied without error are the buffers rendered back into the deck, so a
failing batch leaves the Presentation untouched.
"""

# For python-pptx's private _Paragraph class and oxml elements:
# pyright: reportPrivateUsage=false
# mypy: disable-error-code="import-untyped"

# region imports
from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from pptx.dml.color import RGBColor
from pptx.enum.text import PP_PARAGRAPH_ALIGNMENT as PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.text.text import Font as Font_pptx
from pptx.text.text import TextFrame
from pptx.text.text import _Paragraph as Paragraph_pptx
from pptx.util import Pt

from slidesync.models import CellLocation
from slidesync.processing.operations import (
    CreateParagraphBullets,
    DeleteParagraphBullets,
    DeleteText,
    InsertText,
    Operation,
    TextRange,
    UpdateParagraphStyle,
    UpdateTextStyle,
)
from slidesync.stores.base import DocumentStoreError
from slidesync.stores.pptx_tree import text_frame_elements
from slidesync.utils import rgb_to_hex

# endregion

log = logging.getLogger("slidesync")


# region consts
ALIGNMENT_MAP_API2PP = {
    "START": PP_ALIGN.LEFT,
    "CENTER": PP_ALIGN.CENTER,
    "END": PP_ALIGN.RIGHT,
    "JUSTIFIED": PP_ALIGN.JUSTIFY,
}

BASELINE_API2PP = {
    "SUPERSCRIPT": "30000",
    "SUBSCRIPT": "-25000",
    "NONE": "0",
}

# Glyph shown for each bullet preset when the operation carries no glyph of its own
PRESET_BULLET_CHARS = {
    "BULLET_DISC_CIRCLE_SQUARE": "•",
    "BULLET_DIAMONDX_ARROW3D_SQUARE": "❖",
    "BULLET_CHECKBOX": "❑",
    "BULLET_ARROW_DIAMOND_DISC": "➔",
    "BULLET_STAR_CIRCLE_SQUARE": "★",
    "BULLET_ARROW3D_CIRCLE_SQUARE": "➢",
    "BULLET_LEFTTRIANGLE_DIAMOND_DISC": "◄",
    "BULLET_DIAMONDX_HOLLOWDIAMOND_SQUARE": "❖",
    "BULLET_DIAMOND_CIRCLE_SQUARE": "◆",
}

PRESET_AUTONUM_SCHEMES = {
    "NUMBERED_DIGIT_ALPHA_ROMAN": "arabicPeriod",
    "NUMBERED_DIGIT_ALPHA_ROMAN_PARENS": "arabicParenR",
    "NUMBERED_DIGIT_NESTED": "arabicPeriod",
    "NUMBERED_UPPERALPHA_ALPHA_ROMAN": "alphaUcPeriod",
    "NUMBERED_UPPERROMAN_UPPERALPHA_DIGIT": "romanUcPeriod",
    "NUMBERED_ZERODIGIT_ALPHA_ROMAN": "arabicPeriod",
}

GLYPH_AUTONUM_SCHEMES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^\(\d+\)$"), "arabicParenBoth"),
    (re.compile(r"^\d+\)$"), "arabicParenR"),
    (re.compile(r"^\d+\.$"), "arabicPeriod"),
    (re.compile(r"^\d+$"), "arabicPlain"),
    (re.compile(r"^[IVX]+\.$"), "romanUcPeriod"),
    (re.compile(r"^[ivx]+\.$"), "romanLcPeriod"),
    (re.compile(r"^[IVX]+\)$"), "romanUcParenR"),
    (re.compile(r"^[ivx]+\)$"), "romanLcParenR"),
    (re.compile(r"^[A-Z]\.$"), "alphaUcPeriod"),
    (re.compile(r"^[a-z]\.$"), "alphaLcPeriod"),
    (re.compile(r"^[A-Z]\)$"), "alphaUcParenR"),
    (re.compile(r"^[a-z]\)$"), "alphaLcParenR"),
]

BULLET_TAGS = ("a:buNone", "a:buAutoNum", "a:buChar", "a:buBlip")
# endregion


# region BulletState
@dataclass
class BulletState:
    """A pending bullet change. preset=None means "no bullet"."""

    preset: Optional[str] = None
    glyph: Optional[str] = None


@dataclass
class ParagraphProps:
    """Paragraph attributes set by operations; anything not set here is left as the deck has it."""

    style: dict[str, Any] = field(default_factory=dict)
    bullet: Optional[BulletState] = None


# endregion


# region TextBuffer
@dataclass
class TextBuffer:
    """
    Character-level working copy of one text frame.

    `text` excludes the frame's final paragraph terminator, so it has exactly one "\\n" between
    consecutive paragraphs. `char_styles[i]` is the sparse Slides style of text[i].
    """

    text: str = ""
    char_styles: list[dict[str, Any]] = field(default_factory=list)
    paragraphs: list[ParagraphProps] = field(default_factory=lambda: [ParagraphProps()])

    @classmethod
    def from_text_frame(cls, text_frame: TextFrame) -> TextBuffer:
        text = ""
        char_styles: list[dict[str, Any]] = []
        for element in text_frame_elements(text_frame):
            text_run = element.get("textRun")
            if text_run is None:
                continue
            content = text_run["content"]
            text += content
            char_styles.extend(dict(text_run["style"]) for _ in content)
        # Drop the implicit final terminator
        text, char_styles = text[:-1], char_styles[:-1]
        paragraphs = [ParagraphProps() for _ in range(text.count("\n") + 1)]
        return cls(text=text, char_styles=char_styles, paragraphs=paragraphs)

    # region operations
    def delete_all(self) -> None:
        self.text = ""
        self.char_styles = []
        self.paragraphs = [ParagraphProps()]

    def insert(self, index: int, new_text: str) -> None:
        if index < 0 or index > len(self.text):
            raise DocumentStoreError(
                f"Insertion index {index} is outside the text (length {len(self.text)})."
            )
        # Inserted text takes the style of the character before it, like Slides does
        if index > 0:
            template = self.char_styles[index - 1]
        elif self.char_styles:
            template = self.char_styles[0]
        else:
            template = {}

        paragraph_index = self.text.count("\n", 0, index)
        new_paragraphs = [
            copy.deepcopy(self.paragraphs[paragraph_index]) for _ in range(new_text.count("\n"))
        ]

        self.text = self.text[:index] + new_text + self.text[index:]
        self.char_styles[index:index] = [dict(template) for _ in new_text]
        self.paragraphs[paragraph_index + 1 : paragraph_index + 1] = new_paragraphs

    def update_text_style(
        self, text_range: TextRange, style: dict[str, Any], fields: tuple[str, ...]
    ) -> None:
        self._check_range(text_range)
        for position in range(text_range.start_index, min(text_range.end_index, len(self.text))):
            _apply_fields(self.char_styles[position], style, fields)

    def update_paragraph_style(
        self, text_range: TextRange, style: dict[str, Any], fields: tuple[str, ...]
    ) -> None:
        for props in self.paragraphs_in(text_range):
            _apply_fields(props.style, style, fields)

    def set_bullets(self, text_range: TextRange, state: BulletState) -> None:
        for props in self.paragraphs_in(text_range):
            props.bullet = copy.copy(state)

    # endregion

    def paragraphs_in(self, text_range: TextRange) -> list[ParagraphProps]:
        """Every paragraph that overlaps the range (a paragraph owns its terminator)."""
        self._check_range(text_range)
        selected = []
        start = 0
        for props, paragraph_text in zip(self.paragraphs, self.text.split("\n")):
            end = start + len(paragraph_text)  # position of this paragraph's terminator
            if start < text_range.end_index and text_range.start_index <= end:
                selected.append(props)
            start = end + 1
        return selected

    def _check_range(self, text_range: TextRange) -> None:
        # One past the text is the implicit final terminator, which ranges may include
        if (
            text_range.start_index < 0
            or text_range.is_empty
            or text_range.end_index > len(self.text) + 1
        ):
            raise DocumentStoreError(
                f"Range [{text_range.start_index}, {text_range.end_index}) is invalid for text of length {len(self.text)}."
            )


def _apply_fields(target: dict[str, Any], style: dict[str, Any], fields: tuple[str, ...]) -> None:
    # A listed field missing from style resets that attribute, as in the Slides API
    for name in fields:
        if name in style:
            target[name] = style[name]
        else:
            target.pop(name, None)


# endregion


# region apply_operations
BufferKey = tuple[str, Optional[CellLocation]]


def _resolve_text_frame(targets: dict[str, Any], object_id: str, cell: CellLocation | None) -> TextFrame:
    target = targets.get(object_id)
    if target is None:
        raise DocumentStoreError(f"No text shape or table with object id '{object_id}'.")

    is_table = hasattr(target, "rows") and hasattr(target, "columns")
    if cell is None:
        if is_table:
            raise DocumentStoreError(f"Object '{object_id}' is a table; a cell location is required.")
        return target.text_frame

    if not is_table:
        raise DocumentStoreError(f"Object '{object_id}' is not a table; it has no cell {cell.key}.")
    if cell.row_index >= len(target.rows) or cell.column_index >= len(target.columns):
        raise DocumentStoreError(f"Table '{object_id}' has no cell {cell.key}.")
    return target.cell(cell.row_index, cell.column_index).text_frame


def apply_operations(
    targets: dict[str, Any], operations: list[Operation]
) -> dict[BufferKey, tuple[TextFrame, TextBuffer]]:
    """
    Apply every operation to text buffers, in order.

    Returns the touched text frames with their final buffers. Raises DocumentStoreError on the
    first operation that can't be applied; nothing has been written to the deck at that point.
    """
    buffers: dict[BufferKey, tuple[TextFrame, TextBuffer]] = {}

    for position, operation in enumerate(operations):
        key = (operation.object_id, operation.cell)
        if key not in buffers:
            text_frame = _resolve_text_frame(targets, operation.object_id, operation.cell)
            buffers[key] = (text_frame, TextBuffer.from_text_frame(text_frame))
        buffer = buffers[key][1]

        try:
            _apply_one(buffer, operation)
        except DocumentStoreError as e:
            log.error(f"Operation {position} ({operation.request_key}) failed: {e}")
            raise

    return buffers


def _apply_one(buffer: TextBuffer, operation: Operation) -> None:
    if isinstance(operation, DeleteText):
        buffer.delete_all()
    elif isinstance(operation, InsertText):
        buffer.insert(operation.insertion_index, operation.text)
    elif isinstance(operation, UpdateTextStyle):
        buffer.update_text_style(operation.text_range, operation.style, operation.fields)
    elif isinstance(operation, UpdateParagraphStyle):
        buffer.update_paragraph_style(operation.text_range, operation.style, operation.fields)
    elif isinstance(operation, CreateParagraphBullets):
        buffer.set_bullets(
            operation.text_range,
            BulletState(preset=operation.bullet_preset, glyph=operation.glyph),
        )
    elif isinstance(operation, DeleteParagraphBullets):
        buffer.set_bullets(operation.text_range, BulletState(preset=None))
    else:
        raise DocumentStoreError(f"Unsupported operation: {operation!r}")


# endregion


# region render_buffer
def render_buffer(text_frame: TextFrame, buffer: TextBuffer) -> None:
    """Write a buffer back into its text frame, reusing existing paragraphs (and their pPr) by position."""
    paragraph_texts = buffer.text.split("\n")
    existing = list(text_frame.paragraphs)

    for surplus in existing[len(paragraph_texts) :]:
        surplus._p.getparent().remove(surplus._p)

    offset = 0
    for index, (paragraph_text, props) in enumerate(zip(paragraph_texts, buffer.paragraphs)):
        paragraph = existing[index] if index < len(existing) else text_frame.add_paragraph()
        paragraph.clear()
        styles = buffer.char_styles[offset : offset + len(paragraph_text)]
        _render_runs(paragraph, paragraph_text, styles)
        apply_paragraph_style(paragraph, props.style)
        if props.bullet is not None:
            apply_bullet(paragraph, props.bullet)
        offset += len(paragraph_text) + 1


def _render_runs(
    paragraph: Paragraph_pptx, text: str, styles: list[dict[str, Any]]
) -> None:
    """One a:r per stretch of equally-styled characters; "\\v" becomes a:br."""
    start = 0
    while start < len(text):
        end = start + 1
        while end < len(text) and styles[end] == styles[start]:
            end += 1
        for piece_index, piece in enumerate(text[start:end].split("\v")):
            if piece_index > 0:
                paragraph.add_line_break()
            if piece:
                run = paragraph.add_run()
                run.text = piece
                apply_text_style(run.font, styles[start])
        start = end


# endregion


# region apply_text_style
def apply_text_style(font: Font_pptx, style: dict[str, Any]) -> None:
    """Set the Slides style attributes present in `style` on a python-pptx Font."""
    rPr = font._element

    for attr in ("bold", "italic", "underline"):
        if attr in style:
            setattr(font, attr, style[attr])

    if "strikethrough" in style:
        rPr.set("strike", "sngStrike" if style["strikethrough"] else "noStrike")
    if "smallCaps" in style:
        rPr.set("cap", "small" if style["smallCaps"] else "none")
    if style.get("baselineOffset") in BASELINE_API2PP:
        rPr.set("baseline", BASELINE_API2PP[style["baselineOffset"]])

    font_family = style.get("fontFamily") or (style.get("weightedFontFamily") or {}).get(
        "fontFamily"
    )
    if font_family:
        font.name = font_family

    font_size = style.get("fontSize") or {}
    if font_size.get("magnitude") is not None:
        font.size = Pt(font_size["magnitude"])

    foreground = _rgb_hex(style.get("foregroundColor"))
    if foreground:
        font.color.rgb = RGBColor.from_string(foreground)

    background = _rgb_hex(style.get("backgroundColor"))
    if background:
        _set_highlight(rPr, background)


def _rgb_hex(color: Any) -> Optional[str]:
    """Hex string of an OptionalColor with an rgbColor; theme colors have no pptx equivalent here."""
    if not isinstance(color, dict):
        return None
    rgb_color = (color.get("opaqueColor") or {}).get("rgbColor")
    if rgb_color is None:
        return None
    return rgb_to_hex(rgb_color)


def _set_highlight(rPr: Any, hex_color: str) -> None:
    """
    Reference pptx XML for highlighting:
        <a:rPr>
            <a:highlight>
                <a:srgbClr val="FFFF00"/>
            </a:highlight>
        </a:rPr>
    """
    existing = rPr.find(qn("a:highlight"))
    if existing is not None:
        rPr.remove(existing)
    hl = OxmlElement("a:highlight")
    srgbClr = OxmlElement("a:srgbClr")
    srgbClr.set("val", hex_color)
    hl.append(srgbClr)
    rPr.insert_element_before(
        hl,
        "a:uLnTx", "a:uLn", "a:uFillTx", "a:uFill", "a:latin", "a:ea", "a:cs",
        "a:sym", "a:hlinkClick", "a:hlinkMouseOver", "a:rtl", "a:extLst",
    )  # fmt: skip


# endregion


# region apply_paragraph_style
def _points(dimension: Any) -> Optional[float]:
    if isinstance(dimension, dict) and dimension.get("magnitude") is not None:
        return float(dimension["magnitude"])
    return None


def apply_paragraph_style(paragraph: Paragraph_pptx, style: dict[str, Any]) -> None:
    """Set the Slides paragraph style attributes present in `style` on a python-pptx paragraph."""
    if not style:
        return

    if style.get("alignment") in ALIGNMENT_MAP_API2PP:
        paragraph.alignment = ALIGNMENT_MAP_API2PP[style["alignment"]]

    if style.get("lineSpacing") is not None:
        paragraph.line_spacing = float(style["lineSpacing"]) / 100

    space_above = _points(style.get("spaceAbove"))
    if space_above is not None:
        paragraph.space_before = Pt(space_above)
    space_below = _points(style.get("spaceBelow"))
    if space_below is not None:
        paragraph.space_after = Pt(space_below)

    pPr = paragraph._p.get_or_add_pPr()
    indent_start = _points(style.get("indentStart"))
    if indent_start is not None:
        pPr.set("marL", str(int(Pt(indent_start))))
    indent_end = _points(style.get("indentEnd"))
    if indent_end is not None:
        pPr.set("marR", str(int(Pt(indent_end))))
    indent_first_line = _points(style.get("indentFirstLine"))
    if indent_first_line is not None:
        # pptx stores the first-line indent relative to marL
        mar_l = int(pPr.get("marL", "0"))
        pPr.set("indent", str(int(Pt(indent_first_line)) - mar_l))

    if "direction" in style:
        pPr.set("rtl", "1" if style["direction"] == "RIGHT_TO_LEFT" else "0")


# endregion


# region apply_bullet
def autonum_scheme(glyph: Optional[str], preset: str) -> Optional[str]:
    """a:buAutoNum type for a numbered glyph/preset, or None for symbol bullets."""
    if glyph:
        for pattern, scheme in GLYPH_AUTONUM_SCHEMES:
            if pattern.match(glyph.strip()):
                return scheme
        if preset.startswith("NUMBERED"):
            return PRESET_AUTONUM_SCHEMES.get(preset, "arabicPeriod")
        return None
    if preset.startswith("NUMBERED"):
        return PRESET_AUTONUM_SCHEMES.get(preset, "arabicPeriod")
    return None


def apply_bullet(paragraph: Paragraph_pptx, state: BulletState) -> None:
    """Replace the paragraph's bullet element with a:buChar, a:buAutoNum or a:buNone."""
    pPr = paragraph._p.get_or_add_pPr()
    for tag in BULLET_TAGS:
        for element in pPr.findall(qn(tag)):
            pPr.remove(element)

    if state.preset is None:
        bullet = OxmlElement("a:buNone")
    else:
        scheme = autonum_scheme(state.glyph, state.preset)
        if scheme is not None:
            bullet = OxmlElement("a:buAutoNum")
            bullet.set("type", scheme)
        else:
            bullet = OxmlElement("a:buChar")
            bullet.set(
                "char", (state.glyph or "").strip() or PRESET_BULLET_CHARS.get(state.preset, "•")
            )

    pPr.insert_element_before(bullet, "a:tabLst", "a:defRPr", "a:extLst")


# endregion
