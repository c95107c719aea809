# extract.py
"""Extraction pipeline: presentation -> edit template + plain-text dump."""

import logging
from pathlib import Path

from slidesync import io
from slidesync.internals.constants import OUTPUT_TEMPLATE_FILENAME, OUTPUT_TEXT_FILENAME
from slidesync.internals.define_config import UserConfig
from slidesync.internals.paths import user_log_dir_path
from slidesync.internals.run_context import get_pipeline_run_id
from slidesync.models import SegmentMap
from slidesync.processing.extraction import extract_slides
from slidesync.processing.payload import (
    build_edit_template,
    load_shape_records,
    merge_customization,
    presentation_text,
)
from slidesync.stores.base import DocumentStore
from slidesync.stores.factory import open_store

log = logging.getLogger("slidesync")


def run_extract_pipeline(cfg: UserConfig, store: DocumentStore | None = None) -> Path:
    """Fetch the document, write its edit template, and return the template path."""
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting extract pipeline [pipeline:{pipeline_id}]")

    if store is None:
        store = open_store(cfg)
    document_id = cfg.get_document_id()
    presentation = store.fetch(document_id)

    slides = extract_slides(presentation, cfg.page_object_id, cfg.range_start, cfg.range_end)
    segment_map: SegmentMap = {}
    for slide in slides:
        segment_map.update(slide.segment_map)
    log.info(
        f"Extracted {len(segment_map)} shape(s) from {len(slides)} slide(s). [pipeline:{pipeline_id}]"
    )

    template = build_edit_template(segment_map)
    shapes_file = cfg.get_shapes_file()
    if shapes_file is not None:
        merge_customization(template, load_shape_records(shapes_file))

    output_folder = cfg.get_output_folder()
    template_path = io.write_json_output(
        template, output_folder, OUTPUT_TEMPLATE_FILENAME
    )
    text_path = io.write_text_output(
        presentation_text(slides), output_folder, OUTPUT_TEXT_FILENAME
    )

    log.info(f"extract pipeline complete [pipeline:{pipeline_id}]")
    log.info(f"  Document: {document_id}")
    log.info(f"  -> Edit template:  {template_path}")
    log.info(f"  -> Text:  {text_path}")
    log.info(f"See log: {user_log_dir_path()}")
    return template_path
