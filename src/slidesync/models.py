# models.py
"""Data models for the segment map (shapes, paragraphs, runs) and for caller-supplied edit payloads."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Literal, Optional, Union


# region Sparse style records
# region TextStyle
@dataclass
class TextStyle:
    """
    Character-level style of a run, as reported by the document store.

    Every field is optional. None means "the source did not specify this", which is different from
    an explicit False/0: only specified fields are ever written back, so unset attributes keep
    whatever the document inherits from its theme or placeholder.
    """

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    small_caps: Optional[bool] = None
    font_family: Optional[str] = None
    weighted_font_family: Optional[dict[str, Any]] = None
    font_size: Optional[dict[str, Any]] = None  # {"magnitude": 18, "unit": "PT"}
    foreground_color: Optional[dict[str, Any]] = None  # {"opaqueColor": {...}}
    background_color: Optional[dict[str, Any]] = None
    baseline_offset: Optional[str] = None  # SUPERSCRIPT / SUBSCRIPT / NONE

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> TextStyle:
        """Build from a Slides API TextStyle dict, ignoring keys we don't model."""
        data = data or {}
        return cls(
            **{
                f.name: data[TEXT_STYLE_API_KEYS[f.name]]
                for f in fields(cls)
                if TEXT_STYLE_API_KEYS[f.name] in data
            }
        )

    def to_api(self) -> dict[str, Any]:
        """Inverse of from_api(); unset fields are left out."""
        return {
            TEXT_STYLE_API_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


TEXT_STYLE_API_KEYS: dict[str, str] = {
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "strikethrough": "strikethrough",
    "small_caps": "smallCaps",
    "font_family": "fontFamily",
    "weighted_font_family": "weightedFontFamily",
    "font_size": "fontSize",
    "foreground_color": "foregroundColor",
    "background_color": "backgroundColor",
    "baseline_offset": "baselineOffset",
}
# endregion


# region ParagraphStyle
@dataclass
class ParagraphStyle:
    """Paragraph-level style. Same sparse convention as TextStyle."""

    alignment: Optional[str] = None  # START / CENTER / END / JUSTIFIED
    line_spacing: Optional[float] = None  # percent, 100 = single
    indent_start: Optional[dict[str, Any]] = None  # Dimension {"magnitude", "unit"}
    indent_end: Optional[dict[str, Any]] = None
    indent_first_line: Optional[dict[str, Any]] = None
    space_above: Optional[dict[str, Any]] = None
    space_below: Optional[dict[str, Any]] = None
    direction: Optional[str] = None  # LEFT_TO_RIGHT / RIGHT_TO_LEFT
    spacing_mode: Optional[str] = None  # NEVER_COLLAPSE / COLLAPSE_LISTS

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> ParagraphStyle:
        data = data or {}
        return cls(
            **{
                f.name: data[PARAGRAPH_STYLE_API_KEYS[f.name]]
                for f in fields(cls)
                if PARAGRAPH_STYLE_API_KEYS[f.name] in data
            }
        )

    def to_api(self) -> dict[str, Any]:
        return {
            PARAGRAPH_STYLE_API_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


PARAGRAPH_STYLE_API_KEYS: dict[str, str] = {
    "alignment": "alignment",
    "line_spacing": "lineSpacing",
    "indent_start": "indentStart",
    "indent_end": "indentEnd",
    "indent_first_line": "indentFirstLine",
    "space_above": "spaceAbove",
    "space_below": "spaceBelow",
    "direction": "direction",
    "spacing_mode": "spacingMode",
}
# endregion


# region Bullet
@dataclass
class Bullet:
    """Bullet attached to a paragraph. A paragraph without a bullet has bullet=None, not an empty Bullet."""

    glyph: Optional[str] = None
    bullet_style: Optional[dict[str, Any]] = None
    list_id: Optional[str] = None
    nesting_level: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> Bullet | None:
        if data is None:
            return None
        return cls(
            glyph=data.get("glyph"),
            bullet_style=data.get("bulletStyle"),
            list_id=data.get("listId"),
            nesting_level=data.get("nestingLevel", 0),
        )


# endregion
# endregion


# region Segment map
# region Run
@dataclass
class Run:
    """Smallest styled text unit. end_index == start_index + len(text) after index recalculation."""

    id: str
    text: str
    start_index: int = 0
    end_index: int = 0
    style: TextStyle = field(default_factory=TextStyle)

    @property
    def length(self) -> int:
        return len(self.text)


# endregion


# region Paragraph
@dataclass
class Paragraph:
    """An ordered group of index-contiguous runs sharing paragraph style and bullet state."""

    id: str
    runs: list[Run] = field(default_factory=list)
    start_index: int = 0
    end_index: int = 0
    paragraph_style: ParagraphStyle = field(default_factory=ParagraphStyle)
    bullet: Optional[Bullet] = None

    @classmethod
    def placeholder(cls, position: int) -> Paragraph:
        """An empty paragraph with neutral style and no bullet."""
        return cls(id=f"paragraph-extra-{position}")

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def has_visible_text(self) -> bool:
        return any(run.text.strip() for run in self.runs)


# endregion


# region CellLocation
@dataclass(frozen=True, order=True)
class CellLocation:
    """Address of a table cell. Serialized as "row-col" in edit payloads."""

    row_index: int
    column_index: int

    @property
    def key(self) -> str:
        return f"{self.row_index}-{self.column_index}"

    @classmethod
    def from_key(cls, key: str) -> CellLocation:
        """Parse a "row-col" key. Raises ValueError on anything else."""
        row_str, sep, col_str = key.partition("-")
        if not sep:
            raise ValueError(f"Invalid cell key '{key}'; expected 'row-col'.")
        return cls(int(row_str), int(col_str))

    def to_api(self) -> dict[str, int]:
        return {"rowIndex": self.row_index, "columnIndex": self.column_index}


# endregion


# region TextContainer
@dataclass
class TextContainer:
    """A text body: a shape's text or a single table cell's text."""

    paragraphs: list[Paragraph] = field(default_factory=list)

    @property
    def runs(self) -> list[Run]:
        return [run for paragraph in self.paragraphs for run in paragraph.runs]

    @property
    def text(self) -> str:
        return "".join(paragraph.text for paragraph in self.paragraphs)

    def find_run(self, run_id: str) -> Run | None:
        for run in self.runs:
            if run.id == run_id:
                return run
        return None


# endregion


# region Shape variants
@dataclass
class TextShape:
    container: TextContainer = field(default_factory=TextContainer)
    kind: Literal["text"] = "text"

    @property
    def paragraphs(self) -> list[Paragraph]:
        return self.container.paragraphs


@dataclass
class TableShape:
    cells: dict[CellLocation, TextContainer] = field(default_factory=dict)
    kind: Literal["table"] = "table"


@dataclass
class OpaqueShape:
    """Images and anything unrecognized. Never merged or reformatted."""

    kind: Literal["image", "unknown"] = "unknown"
    image_url: Optional[str] = None


ShapeSegments = Union[TextShape, TableShape, OpaqueShape]

# Shape object id -> segments. Insertion order follows document order.
SegmentMap = dict[str, ShapeSegments]

# (shape id, cell) identifies one text container; cell is None for text shapes.
ContainerKey = tuple[str, Optional[CellLocation]]


def clone_segment_map(segment_map: SegmentMap) -> SegmentMap:
    """Deep copy, so the working map never aliases the original."""
    return copy.deepcopy(segment_map)


def get_container(segment_map: SegmentMap, key: ContainerKey) -> TextContainer | None:
    """Look up a text container by key, or None if the shape/cell doesn't exist or holds no text."""
    shape_id, cell = key
    shape = segment_map.get(shape_id)
    if isinstance(shape, TextShape) and cell is None:
        return shape.container
    if isinstance(shape, TableShape) and cell is not None:
        return shape.cells.get(cell)
    return None


# endregion


# region SlideSegments
@dataclass
class SlideSegments:
    """One slide's worth of extracted shapes."""

    slide_number: int
    page_object_id: str
    segment_map: SegmentMap = field(default_factory=dict)


# endregion
# endregion


# region Edit payload
@dataclass
class RunEdit:
    id: str
    text: str


@dataclass
class ContainerEdit:
    """
    New text for one container.

    Either a flat list of runs (the edit template format), or a list of paragraphs each holding runs.
    Exactly one of the two is set.
    """

    runs: Optional[list[RunEdit]] = None
    paragraphs: Optional[list[list[RunEdit]]] = None

    def all_runs(self) -> list[RunEdit]:
        if self.paragraphs is not None:
            return [run for paragraph in self.paragraphs for run in paragraph]
        return list(self.runs or [])


@dataclass
class ShapeEdit:
    shape_id: str
    container: Optional[ContainerEdit] = None
    cells: dict[CellLocation, ContainerEdit] = field(default_factory=dict)
    customization: Optional[str] = None

    @property
    def has_customization_flag(self) -> bool:
        return self.customization is not None

    @property
    def is_customized(self) -> bool:
        return str(self.customization).strip().upper() == CUSTOMIZED_FLAG


# The flag value that marks a shape as explicitly customized by the caller.
CUSTOMIZED_FLAG = "CUSTOM"

EditPayload = dict[str, ShapeEdit]
# endregion
