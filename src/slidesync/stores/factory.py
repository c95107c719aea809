"""Pick the document store for a run."""

import logging

from slidesync.internals.define_config import StoreBackend, UserConfig
from slidesync.stores.base import DocumentStore
from slidesync.stores.google_slides import GoogleSlidesStore
from slidesync.stores.pptx_store import PptxDocumentStore

log = logging.getLogger("slidesync")


def open_store(cfg: UserConfig) -> DocumentStore:
    """Google Slides when a presentation id is configured, the local pptx store otherwise."""
    if cfg.backend == StoreBackend.GOOGLE_SLIDES:
        credentials_file = cfg.get_credentials_file()
        if credentials_file is None:
            raise ValueError("Google Slides runs need a credentials_file.")
        log.debug(f"Using the Google Slides store with credentials {credentials_file}")
        return GoogleSlidesStore.from_credentials_file(credentials_file)

    log.debug(f"Using the local pptx store, writing to {cfg.get_output_folder()}")
    return PptxDocumentStore(cfg.get_output_folder())
