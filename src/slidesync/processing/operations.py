# operations.py
"""Range-addressed edit operations, serializable as Google Slides batchUpdate requests.

Within one text container the order is delete, insert, run styles, then bullets and paragraph styles;
every range after the insert refers to the freshly inserted text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from slidesync.models import CellLocation


# region TextRange
@dataclass(frozen=True)
class TextRange:
    """Half-open character range [start_index, end_index) within one container."""

    start_index: int
    end_index: int

    @property
    def is_empty(self) -> bool:
        return self.end_index <= self.start_index

    def to_api(self) -> dict[str, Any]:
        return {
            "type": "FIXED_RANGE",
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }


# endregion


def _address(object_id: str, cell: Optional[CellLocation]) -> dict[str, Any]:
    body: dict[str, Any] = {"objectId": object_id}
    if cell is not None:
        body["cellLocation"] = cell.to_api()
    return body


# region Text replacement
@dataclass(frozen=True)
class DeleteText:
    """Delete every character of the container."""

    request_key: ClassVar[str] = "deleteText"

    object_id: str
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["textRange"] = {"type": "ALL"}
        return {self.request_key: body}


@dataclass(frozen=True)
class InsertText:
    request_key: ClassVar[str] = "insertText"

    object_id: str
    text: str
    insertion_index: int = 0
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["insertionIndex"] = self.insertion_index
        body["text"] = self.text
        return {self.request_key: body}


# endregion


# region Styles
@dataclass(frozen=True)
class UpdateTextStyle:
    """Sparse character style over a range. Only the names in `fields` are written."""

    request_key: ClassVar[str] = "updateTextStyle"

    object_id: str
    text_range: TextRange
    style: dict[str, Any]
    fields: tuple[str, ...]
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["style"] = self.style
        body["fields"] = ",".join(self.fields)
        body["textRange"] = self.text_range.to_api()
        return {self.request_key: body}


@dataclass(frozen=True)
class UpdateParagraphStyle:
    request_key: ClassVar[str] = "updateParagraphStyle"

    object_id: str
    text_range: TextRange
    style: dict[str, Any]
    fields: tuple[str, ...]
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["style"] = self.style
        body["fields"] = ",".join(self.fields)
        body["textRange"] = self.text_range.to_api()
        return {self.request_key: body}


# endregion


# region Bullets
@dataclass(frozen=True)
class CreateParagraphBullets:
    """
    Attach a bullet preset to every paragraph touching the range.

    `glyph` is the glyph the source paragraph showed. Slides only takes the preset; local stores use
    the glyph to render the exact symbol.
    """

    request_key: ClassVar[str] = "createParagraphBullets"

    object_id: str
    text_range: TextRange
    bullet_preset: str
    glyph: Optional[str] = None
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["textRange"] = self.text_range.to_api()
        body["bulletPreset"] = self.bullet_preset
        return {self.request_key: body}


@dataclass(frozen=True)
class DeleteParagraphBullets:
    request_key: ClassVar[str] = "deleteParagraphBullets"

    object_id: str
    text_range: TextRange
    cell: Optional[CellLocation] = None

    def to_request(self) -> dict[str, Any]:
        body = _address(self.object_id, self.cell)
        body["textRange"] = self.text_range.to_api()
        return {self.request_key: body}


# endregion


Operation = Union[
    DeleteText,
    InsertText,
    UpdateTextStyle,
    UpdateParagraphStyle,
    CreateParagraphBullets,
    DeleteParagraphBullets,
]


def to_requests(operations: list[Operation]) -> list[dict[str, Any]]:
    """The batchUpdate `requests` list for these operations, order preserved."""
    return [operation.to_request() for operation in operations]
