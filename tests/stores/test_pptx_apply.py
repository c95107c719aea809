"""Tests for replaying operations against pptx text buffers and rendering them back."""

# pyright: reportPrivateUsage=false
import pytest
from pptx import Presentation
from pptx.enum.text import PP_PARAGRAPH_ALIGNMENT as PP_ALIGN
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from slidesync.models import CellLocation
from slidesync.processing.operations import (
    CreateParagraphBullets,
    DeleteParagraphBullets,
    DeleteText,
    InsertText,
    TextRange,
    UpdateParagraphStyle,
    UpdateTextStyle,
)
from slidesync.stores.base import DocumentStoreError
from slidesync.stores.pptx_apply import (
    BulletState,
    ParagraphProps,
    TextBuffer,
    apply_operations,
    autonum_scheme,
    render_buffer,
)


def _buffer(text: str) -> TextBuffer:
    return TextBuffer(
        text=text,
        char_styles=[{} for _ in text],
        paragraphs=[ParagraphProps() for _ in range(text.count("\n") + 1)],
    )


@pytest.fixture
def textbox():  # type: ignore[no-untyped-def]
    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[6])
    box = slide.shapes.add_textbox(Inches(1), Inches(1), Inches(4), Inches(1))
    box.text_frame.paragraphs[0].add_run().text = "Old text"
    return box


# region TextBuffer
def test_insert_takes_the_style_of_the_preceding_character() -> None:
    buffer = TextBuffer(text="ab", char_styles=[{"bold": True}, {"italic": True}])

    buffer.insert(1, "XY")

    assert buffer.text == "aXYb"
    assert buffer.char_styles == [{"bold": True}, {"bold": True}, {"bold": True}, {"italic": True}]


def test_insert_into_empty_buffer_creates_paragraphs() -> None:
    buffer = TextBuffer()
    buffer.delete_all()

    buffer.insert(0, "one\ntwo\nthree")

    assert buffer.text == "one\ntwo\nthree"
    assert len(buffer.paragraphs) == 3
    assert buffer.char_styles == [{} for _ in buffer.text]


@pytest.mark.parametrize("index", [-1, 4])
def test_insert_outside_the_text_fails(index: int) -> None:
    with pytest.raises(DocumentStoreError):
        _buffer("abc").insert(index, "x")


def test_update_text_style_sets_and_resets_listed_fields() -> None:
    buffer = TextBuffer(text="abc", char_styles=[{"bold": True, "italic": True} for _ in "abc"])

    buffer.update_text_style(TextRange(0, 2), {"underline": True}, ("underline", "bold"))

    assert buffer.char_styles[0] == {"italic": True, "underline": True}
    assert buffer.char_styles[2] == {"bold": True, "italic": True}


@pytest.mark.parametrize("start,end", [(-1, 2), (2, 2), (3, 1), (0, 6)])
def test_invalid_ranges_fail(start: int, end: int) -> None:
    with pytest.raises(DocumentStoreError):
        _buffer("abcd").update_text_style(TextRange(start, end), {}, ("bold",))


def test_range_may_include_the_implicit_final_terminator() -> None:
    buffer = _buffer("abcd")
    buffer.update_text_style(TextRange(0, 5), {"bold": True}, ("bold",))
    assert all(style == {"bold": True} for style in buffer.char_styles)


def test_paragraph_ranges_select_overlapping_paragraphs() -> None:
    buffer = _buffer("ab\ncd\nef")
    first, second, third = buffer.paragraphs

    assert buffer.paragraphs_in(TextRange(0, 3)) == [first]
    assert buffer.paragraphs_in(TextRange(2, 4)) == [first, second]
    assert buffer.paragraphs_in(TextRange(6, 8)) == [third]


def test_bullets_and_paragraph_styles_are_recorded() -> None:
    buffer = _buffer("ab\ncd")

    buffer.set_bullets(TextRange(0, 3), BulletState(preset="BULLET_STAR_CIRCLE_SQUARE"))
    buffer.update_paragraph_style(TextRange(3, 5), {"alignment": "CENTER"}, ("alignment",))

    assert buffer.paragraphs[0].bullet == BulletState(preset="BULLET_STAR_CIRCLE_SQUARE")
    assert buffer.paragraphs[1].bullet is None
    assert buffer.paragraphs[1].style == {"alignment": "CENTER"}


# endregion


# region autonum_scheme
@pytest.mark.parametrize(
    "glyph,preset,expected",
    [
        ("1.", "NUMBERED_DIGIT_ALPHA_ROMAN", "arabicPeriod"),
        ("(3)", "NUMBERED_DIGIT_ALPHA_ROMAN_PARENS", "arabicParenBoth"),
        ("iv.", "NUMBERED_UPPERROMAN_UPPERALPHA_DIGIT", "romanLcPeriod"),
        ("B)", "NUMBERED_UPPERALPHA_ALPHA_ROMAN", "alphaUcParenR"),
        (None, "NUMBERED_UPPERROMAN_UPPERALPHA_DIGIT", "romanUcPeriod"),
        ("●", "BULLET_DISC_CIRCLE_SQUARE", None),
        (None, "BULLET_CHECKBOX", None),
    ],
)
def test_autonum_scheme(glyph: str | None, preset: str, expected: str | None) -> None:
    assert autonum_scheme(glyph, preset) == expected


# endregion


# region apply_operations + render_buffer
def test_operations_are_rendered_into_the_frame(textbox) -> None:  # type: ignore[no-untyped-def]
    targets = {"box": textbox}
    operations = [
        DeleteText(object_id="box"),
        InsertText(object_id="box", text="Hi Earth\nSecond"),
        UpdateTextStyle(object_id="box", text_range=TextRange(0, 3), style={"bold": True, "fontSize": {"magnitude": 20, "unit": "PT"}}, fields=("bold", "fontSize")),
        UpdateTextStyle(
            object_id="box",
            text_range=TextRange(3, 8),
            style={"foregroundColor": {"opaqueColor": {"rgbColor": {"red": 0.0, "green": 0.0, "blue": 1.0}}}},
            fields=("foregroundColor",),
        ),
        CreateParagraphBullets(object_id="box", text_range=TextRange(0, 9), bullet_preset="NUMBERED_DIGIT_ALPHA_ROMAN", glyph="1."),
        UpdateParagraphStyle(object_id="box", text_range=TextRange(0, 9), style={"alignment": "CENTER"}, fields=("alignment",)),
        DeleteParagraphBullets(object_id="box", text_range=TextRange(9, 15)),
    ]

    buffers = apply_operations(targets, operations)
    for frame, buffer in buffers.values():
        render_buffer(frame, buffer)

    first, second = textbox.text_frame.paragraphs
    assert [r.text for r in first.runs] == ["Hi ", "Earth"]
    assert first.runs[0].font.bold is True
    assert first.runs[0].font.size == Pt(20)
    assert str(first.runs[1].font.color.rgb) == "0000FF"
    assert first.alignment == PP_ALIGN.CENTER
    assert first._p.pPr.find(qn("a:buAutoNum")).get("type") == "arabicPeriod"
    assert second.text == "Second"
    assert second._p.pPr.find(qn("a:buNone")) is not None


def test_surplus_paragraphs_are_removed(textbox) -> None:  # type: ignore[no-untyped-def]
    textbox.text_frame.add_paragraph().add_run().text = "More"
    textbox.text_frame.add_paragraph().add_run().text = "Even more"

    buffers = apply_operations(
        {"box": textbox}, [DeleteText(object_id="box"), InsertText(object_id="box", text="Only")]
    )
    for frame, buffer in buffers.values():
        render_buffer(frame, buffer)

    assert [p.text for p in textbox.text_frame.paragraphs] == ["Only"]


def test_vertical_tab_renders_as_line_break(textbox) -> None:  # type: ignore[no-untyped-def]
    buffers = apply_operations(
        {"box": textbox}, [DeleteText(object_id="box"), InsertText(object_id="box", text="a\vb")]
    )
    for frame, buffer in buffers.values():
        render_buffer(frame, buffer)

    paragraph = textbox.text_frame.paragraphs[0]
    assert len(paragraph._p.findall(qn("a:br"))) == 1
    assert [r.text for r in paragraph.runs] == ["a", "b"]


def test_highlight_is_written_as_srgb(textbox) -> None:  # type: ignore[no-untyped-def]
    buffers = apply_operations(
        {"box": textbox},
        [
            UpdateTextStyle(
                object_id="box",
                text_range=TextRange(0, 3),
                style={"backgroundColor": {"opaqueColor": {"rgbColor": {"red": 1.0, "green": 1.0}}}},
                fields=("backgroundColor",),
            )
        ],
    )
    for frame, buffer in buffers.values():
        render_buffer(frame, buffer)

    highlighted = textbox.text_frame.paragraphs[0].runs[0]
    assert highlighted.text == "Old"
    srgb = highlighted.font._element.find(f"{qn('a:highlight')}/{qn('a:srgbClr')}")
    assert srgb.get("val") == "FFFF00"


def test_unknown_object_fails() -> None:
    with pytest.raises(DocumentStoreError, match="ghost"):
        apply_operations({}, [DeleteText(object_id="ghost")])


def test_cell_on_a_text_shape_fails(textbox) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(DocumentStoreError, match="not a table"):
        apply_operations({"box": textbox}, [DeleteText(object_id="box", cell=CellLocation(0, 0))])


def test_failing_batch_leaves_the_frame_untouched(textbox) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(DocumentStoreError):
        apply_operations(
            {"box": textbox},
            [DeleteText(object_id="box"), InsertText(object_id="box", text="x", insertion_index=5)],
        )

    assert textbox.text_frame.text == "Old text"


# endregion
