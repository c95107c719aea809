# formatting.py
"""Compile a finalized text container into delete/insert/style/bullet operations.

Styles always come from the original, un-merged runs (looked up by run id), and only the
attributes the source actually specified are written back.
"""

# region imports
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional

from slidesync.internals.constants import DEFAULT_BULLET_PRESET
from slidesync.models import (
    CellLocation,
    Paragraph,
    ParagraphStyle,
    SegmentMap,
    TextContainer,
    TextStyle,
    get_container,
)
from slidesync.processing.merge import MergeResult
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

# endregion

log = logging.getLogger("slidesync")


# region Bullet preset table
# Checked top to bottom; first match wins. Roman numerals come before letters so "i." isn't read as
# the ninth letter. Exact custom sequences degrade to the nearest preset Slides supports.
BULLET_PRESET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^0\d+[.)]?$"), "NUMBERED_ZERODIGIT_ALPHA_ROMAN"),
    (re.compile(r"^\(\d+\)$|^\d+\)$"), "NUMBERED_DIGIT_ALPHA_ROMAN_PARENS"),
    (re.compile(r"^\d+\.?$"), "NUMBERED_DIGIT_ALPHA_ROMAN"),
    (re.compile(r"^[IVX]+[.)]?$"), "NUMBERED_UPPERROMAN_UPPERALPHA_DIGIT"),
    (re.compile(r"^[ivx]+[.)]?$"), "NUMBERED_UPPERROMAN_UPPERALPHA_DIGIT"),
    (re.compile(r"^[A-Z][.)]?$"), "NUMBERED_UPPERALPHA_ALPHA_ROMAN"),
    (re.compile(r"^[a-z][.)]?$"), "NUMBERED_UPPERALPHA_ALPHA_ROMAN"),
]

BULLET_GLYPH_PRESETS: dict[str, str] = {
    "●": "BULLET_DISC_CIRCLE_SQUARE",
    "•": "BULLET_DISC_CIRCLE_SQUARE",
    "○": "BULLET_DISC_CIRCLE_SQUARE",
    "■": "BULLET_DISC_CIRCLE_SQUARE",
    "❖": "BULLET_DIAMONDX_ARROW3D_SQUARE",
    "◆": "BULLET_DIAMOND_CIRCLE_SQUARE",
    "♦": "BULLET_DIAMOND_CIRCLE_SQUARE",
    "➔": "BULLET_ARROW_DIAMOND_DISC",
    "→": "BULLET_ARROW_DIAMOND_DISC",
    "➢": "BULLET_ARROW3D_CIRCLE_SQUARE",
    "★": "BULLET_STAR_CIRCLE_SQUARE",
    "☆": "BULLET_STAR_CIRCLE_SQUARE",
    "❑": "BULLET_CHECKBOX",
    "☐": "BULLET_CHECKBOX",
    "□": "BULLET_CHECKBOX",
    "◄": "BULLET_LEFTTRIANGLE_DIAMOND_DISC",
}


def bullet_preset_for_glyph(glyph: Optional[str]) -> str:
    """Best-effort Slides bullet preset for a rendered glyph such as "●", "3.", "(2)" or "iv."."""
    if not glyph:
        return DEFAULT_BULLET_PRESET
    glyph = glyph.strip()

    if glyph in BULLET_GLYPH_PRESETS:
        return BULLET_GLYPH_PRESETS[glyph]

    for pattern, preset in BULLET_PRESET_PATTERNS:
        if pattern.match(glyph):
            return preset

    log.debug(f"No bullet preset for glyph '{glyph}'; using {DEFAULT_BULLET_PRESET}.")
    return DEFAULT_BULLET_PRESET


# endregion


# region Sparse field selection
def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_set(value: Any) -> bool:
    return bool(value)


def _has_opaque_color(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get("opaqueColor"))


def _has_unit(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get("unit"))


def _has_unit_or_magnitude(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get("unit") or value.get("magnitude"))


def _is_not_none(value: Any) -> bool:
    return value is not None


# API field name -> "counts as defined" check, in the order fields are emitted
TEXT_STYLE_FIELD_CHECKS: dict[str, Callable[[Any], bool]] = {
    "bold": _is_bool,
    "italic": _is_bool,
    "underline": _is_bool,
    "strikethrough": _is_bool,
    "fontFamily": _is_set,
    "fontSize": _is_set,
    "foregroundColor": _has_opaque_color,
    "backgroundColor": _has_opaque_color,
    "weightedFontFamily": _is_set,
    "baselineOffset": _is_set,
    "smallCaps": _is_bool,
}

PARAGRAPH_STYLE_FIELD_CHECKS: dict[str, Callable[[Any], bool]] = {
    "alignment": _is_set,
    "lineSpacing": _is_not_none,
    "indentStart": _has_unit,
    "indentEnd": _has_unit,
    "indentFirstLine": _has_unit,
    "spaceAbove": _has_unit_or_magnitude,
    "spaceBelow": _has_unit_or_magnitude,
    "direction": _is_set,
    "spacingMode": _is_set,
}


def sparse_fields(
    api_style: dict[str, Any], checks: dict[str, Callable[[Any], bool]]
) -> tuple[dict[str, Any], tuple[str, ...]]:
    """Keep only the defined attributes; returns (style, field names)."""
    style = {
        name: api_style[name]
        for name, is_defined in checks.items()
        if name in api_style and is_defined(api_style[name])
    }
    return style, tuple(style)


def text_style_update(style: TextStyle) -> tuple[dict[str, Any], tuple[str, ...]]:
    return sparse_fields(style.to_api(), TEXT_STYLE_FIELD_CHECKS)


def paragraph_style_update(
    style: ParagraphStyle,
) -> tuple[dict[str, Any], tuple[str, ...]]:
    return sparse_fields(style.to_api(), PARAGRAPH_STYLE_FIELD_CHECKS)


# endregion


# region compile_container
def compile_container(
    shape_id: str,
    container: TextContainer,
    original_container: TextContainer,
    cell: CellLocation | None = None,
) -> list[Operation]:
    """
    Operations that rewrite one container's text and reapply its formatting.

    Order: delete all, insert at 0, one style update per run (run order), then per paragraph a
    bullet create/delete followed by its paragraph style. Ranges refer to the inserted text, so
    `container` must already have recalculated offsets. An empty container yields nothing: Slides
    rejects a delete over an empty range, and there is nothing to style.
    """
    full_text = container.text
    if not full_text:
        log.debug(f"Container {shape_id}{_cell_suffix(cell)} is empty; no operations.")
        return []

    operations: list[Operation] = [
        DeleteText(object_id=shape_id, cell=cell),
        InsertText(object_id=shape_id, text=full_text, insertion_index=0, cell=cell),
    ]

    for run in container.runs:
        if run.length == 0:
            continue
        original_run = original_container.find_run(run.id)
        if original_run is None:
            continue
        style, field_names = text_style_update(original_run.style)
        text_range = TextRange(run.start_index, run.end_index)
        if not field_names or text_range.is_empty:
            continue
        operations.append(
            UpdateTextStyle(
                object_id=shape_id,
                text_range=text_range,
                style=style,
                fields=field_names,
                cell=cell,
            )
        )

    for paragraph in container.paragraphs:
        if not paragraph.runs:
            continue
        text_range = TextRange(paragraph.start_index, paragraph.end_index)
        if text_range.is_empty:
            continue
        operations.append(_bullet_operation(shape_id, paragraph, text_range, cell))

        style, field_names = paragraph_style_update(paragraph.paragraph_style)
        if field_names:
            operations.append(
                UpdateParagraphStyle(
                    object_id=shape_id,
                    text_range=text_range,
                    style=style,
                    fields=field_names,
                    cell=cell,
                )
            )

    return operations


def _bullet_operation(
    shape_id: str,
    paragraph: Paragraph,
    text_range: TextRange,
    cell: CellLocation | None,
) -> Operation:
    """Create the bullet when the paragraph has a bullet style and visible text, else delete it."""
    bullet = paragraph.bullet
    if bullet is not None and bullet.bullet_style is not None and paragraph.has_visible_text:
        return CreateParagraphBullets(
            object_id=shape_id,
            text_range=text_range,
            bullet_preset=bullet_preset_for_glyph(bullet.glyph),
            glyph=bullet.glyph,
            cell=cell,
        )
    return DeleteParagraphBullets(object_id=shape_id, text_range=text_range, cell=cell)


def _cell_suffix(cell: CellLocation | None) -> str:
    return "" if cell is None else f" (cell {cell.key})"


# endregion


# region compile_operations
def compile_operations(merge_result: MergeResult, original: SegmentMap) -> list[Operation]:
    """Concatenate the operations of every merged container, in the order they were merged."""
    operations: list[Operation] = []
    for key in merge_result.touched:
        shape_id, cell = key
        container = get_container(merge_result.segment_map, key)
        original_container = get_container(original, key)
        if container is None or original_container is None:
            log.warning(
                f"Container {shape_id}{_cell_suffix(cell)} disappeared before compilation; skipping."
            )
            continue
        container_ops = compile_container(shape_id, container, original_container, cell)
        log.debug(
            f"Compiled {len(container_ops)} operation(s) for {shape_id}{_cell_suffix(cell)}."
        )
        operations.extend(container_ops)
    return operations


# endregion
