# base.py
"""The document store boundary: fetch a raw presentation tree, submit one batch of operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from slidesync.processing.operations import Operation


class DocumentStoreError(Exception):
    """A local document store could not read the document or apply a batch."""


@dataclass
class SubmitResult:
    """Outcome of one batch submission."""

    document_id: str
    submitted: int  # Number of operations sent (0 if the batch was empty and nothing was sent)
    replies: list[dict[str, Any]] = field(default_factory=list)
    output_path: str | None = None  # Where a local store wrote the updated document


class DocumentStore(Protocol):
    """
    Anything that can hand out a presentation tree and take back an operation batch.

    `fetch` returns the tree in the Google Slides API shape (slides -> pageElements -> shape/table/
    elementGroup/image). `submit` applies the whole list or none of it, and lets failures propagate.
    """

    def fetch(self, document_id: str) -> dict[str, Any]: ...

    def submit(
        self, document_id: str, operations: list[Operation]
    ) -> SubmitResult: ...
