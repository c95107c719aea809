# google_slides.py
"""Google Slides as a document store, through the Slides v1 API."""

# mypy: disable-error-code="import-untyped"
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from slidesync.internals.constants import SLIDES_SCOPES
from slidesync.processing.operations import Operation, to_requests
from slidesync.stores.base import SubmitResult

log = logging.getLogger("slidesync")


# region build_slides_service
def build_slides_service(credentials_file: Path) -> Any:
    """Slides v1 resource authorized with a service account key file."""
    credentials = service_account.Credentials.from_service_account_file(
        str(credentials_file), scopes=SLIDES_SCOPES
    )
    log.debug(f"Loaded service account credentials from {credentials_file}")
    return build("slides", "v1", credentials=credentials, cache_discovery=False)


# endregion


# region GoogleSlidesStore
class GoogleSlidesStore:
    """
    Fetch and batch-update presentations with a googleapiclient Slides resource.

    API errors are logged and re-raised unchanged; nothing is retried.
    """

    def __init__(self, service: Any) -> None:
        self.service = service

    @classmethod
    def from_credentials_file(cls, credentials_file: Path) -> GoogleSlidesStore:
        return cls(build_slides_service(credentials_file))

    def fetch(self, document_id: str) -> dict[str, Any]:
        log.info(f"Fetching presentation {document_id}")
        try:
            presentation: dict[str, Any] = (
                self.service.presentations()
                .get(presentationId=document_id)
                .execute()
            )
        except HttpError as e:
            log.error(f"Could not fetch presentation {document_id}: {e}")
            raise
        log.debug(
            f"Fetched presentation {document_id} with {len(presentation.get('slides') or [])} slide(s)."
        )
        return presentation

    def submit(self, document_id: str, operations: list[Operation]) -> SubmitResult:
        """Send every operation in one batchUpdate call. An empty list sends nothing."""
        if not operations:
            log.info("No operations to submit; skipping batchUpdate.")
            return SubmitResult(document_id=document_id, submitted=0)

        body = {"requests": to_requests(operations)}
        log.info(f"Submitting {len(operations)} operation(s) to presentation {document_id}")
        try:
            response = (
                self.service.presentations()
                .batchUpdate(presentationId=document_id, body=body)
                .execute()
            )
        except HttpError as e:
            log.error(f"batchUpdate failed for presentation {document_id}: {e}")
            raise

        return SubmitResult(
            document_id=document_id,
            submitted=len(operations),
            replies=list(response.get("replies") or []),
        )


# endregion
