# boundaries.py
"""Repair paragraph count and trailing-newline conventions of an edited paragraph list.

Slides marks paragraph boundaries with line breaks inside the inserted text. If the number of
breaks doesn't line up with the number of paragraphs, the rendered shape either collapses
paragraphs or grows a trailing empty one, and every paragraph-addressed style lands in the wrong
place.
"""

import logging

from slidesync.models import Paragraph

log = logging.getLogger("slidesync")

LINE_BREAK = "\n"


# region preserve_paragraph_boundaries
def preserve_paragraph_boundaries(
    original_paragraphs: list[Paragraph], edited_paragraphs: list[Paragraph]
) -> None:
    """
    Mutate edited_paragraphs in place so it matches the original paragraph structure.

    1. Surplus paragraphs are collapsed backward: the last paragraph's runs are appended to the one
       before it until the counts match.
    2. Missing paragraphs are appended as empty placeholders (no runs, neutral style, no bullet).
    3. For every paragraph index where both sides have runs, the edited last run's trailing line
       break follows the original: added if the original had one, stripped if it didn't.
    4. The last run of the last paragraph loses exactly one trailing line break, because the
       container's final paragraph terminator is implicit and must not be inserted again.
    """
    original_count = len(original_paragraphs)

    if len(edited_paragraphs) > original_count:
        log.debug(
            f"Collapsing {len(edited_paragraphs) - original_count} surplus paragraph(s) into paragraph {original_count - 1}."
        )
    while len(edited_paragraphs) > original_count:
        surplus = edited_paragraphs.pop()
        if edited_paragraphs:
            edited_paragraphs[-1].runs.extend(surplus.runs)

    while len(edited_paragraphs) < original_count:
        edited_paragraphs.append(Paragraph.placeholder(len(edited_paragraphs)))

    for original, edited in zip(original_paragraphs, edited_paragraphs):
        if not original.runs or not edited.runs:
            continue
        original_last = original.runs[-1]
        edited_last = edited.runs[-1]
        if original_last.text.endswith(LINE_BREAK):
            if not edited_last.text.endswith(LINE_BREAK):
                edited_last.text += LINE_BREAK
        else:
            edited_last.text = edited_last.text.rstrip(LINE_BREAK)

    _drop_final_terminator(edited_paragraphs)


# endregion


# region _drop_final_terminator
def _drop_final_terminator(paragraphs: list[Paragraph]) -> None:
    if not paragraphs or not paragraphs[-1].runs:
        return
    last_run = paragraphs[-1].runs[-1]
    if last_run.text.endswith(LINE_BREAK):
        last_run.text = last_run.text[: -len(LINE_BREAK)]


# endregion
