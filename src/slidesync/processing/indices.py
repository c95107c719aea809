# indices.py
"""Recompute run and paragraph offsets after the text of a container has changed."""

from slidesync.models import TextContainer


def recalculate_indices(container: TextContainer) -> None:
    """
    Reassign start/end offsets in one left-to-right pass, in place.

    Runs are laid end to end from offset 0 with no gaps or overlaps. A paragraph spans its runs;
    an empty paragraph sits at the current cursor with start == end.
    """
    cursor = 0
    for paragraph in container.paragraphs:
        paragraph.start_index = cursor
        for run in paragraph.runs:
            run.start_index = cursor
            run.end_index = cursor + len(run.text)
            cursor = run.end_index
        paragraph.end_index = cursor
