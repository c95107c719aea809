"""Route program flow to the appropriate pipeline based on the configured action."""

import logging
from pathlib import Path

from slidesync.internals.define_config import PipelineAction, UserConfig
from slidesync.internals.manifest import RunManifest
from slidesync.internals.run_context import (
    get_pipeline_run_id,
    get_session_id,
    start_pipeline_run,
)
from slidesync.pipelines import extract, sync
from slidesync.stores.base import DocumentStore

log = logging.getLogger("slidesync")


# region run_pipeline
def run_pipeline(cfg: UserConfig, store: DocumentStore | None = None) -> Path:
    """Run validation and then route to the appropriate pipeline based on config."""

    cfg.pre_run_check()

    pipeline_id = start_pipeline_run()
    log.info(f"Initializing pipeline run. [pipeline:{pipeline_id}]")

    run_manifest = RunManifest(cfg, run_id=pipeline_id)
    run_manifest.start()

    log_pipeline_info(cfg)

    try:
        if cfg.action == PipelineAction.EXTRACT:
            output_path = extract.run_extract_pipeline(cfg, store)
            run_manifest.complete(output_path)
        elif cfg.action == PipelineAction.SYNC:
            result = sync.run_sync_pipeline(cfg, store)
            output_path = result.output_path
            run_manifest.complete(output_path, result.operation_count)
        else:
            raise ValueError(f"Unknown pipeline action: {cfg.action}")

        return output_path

    except Exception as e:
        run_manifest.fail(e)
        raise  # Re-raise so the CLI still sees the error


# endregion


# region log_pipeline_info
def log_pipeline_info(cfg: UserConfig) -> None:
    """Print this pipeline run's run ID, session ID, and general config info to the log."""
    log.info("=== Pipeline Run Started ===")
    log.info(f"Run ID: {get_pipeline_run_id()}")
    log.info(f"Session ID: {get_session_id()}")
    log.info(f"Action: {cfg.action.value}")
    log.info(f"Backend: {cfg.backend.value}")
    log.info(f"Document: {cfg.presentation_id or cfg.input_pptx}")
    log.info(f"Configuration: {cfg}")


# endregion
