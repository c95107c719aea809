"""Test the manifest system.

The manifest should never crash the app - it's a "nice to have" feature that records
metadata about pipeline runs. Tests focus on ensuring it writes correct data and fails
gracefully.
"""

import json
from pathlib import Path

from slidesync.internals.define_config import PipelineAction, UserConfig
from slidesync.internals.manifest import MANIFEST_VERSION, RunManifest


def _read(path: Path) -> dict:  # type: ignore[type-arg]
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def test_manifest_creates_file_on_start_and_has_required_fields(
    sample_extract_cfg: UserConfig, isolated_user_dirs: Path
) -> None:
    run_id = "test_run_creates_with_fields"
    manifest = RunManifest(sample_extract_cfg, run_id=run_id)

    assert manifest.manifest_path == isolated_user_dirs / "manifests" / f"run_{run_id}_manifest.json"
    assert not manifest.manifest_path.exists()

    manifest.start()

    data = _read(manifest.manifest_path)
    assert data["manifest_version"] == MANIFEST_VERSION
    assert data["run_id"] == run_id
    assert data["status"] == "running"
    assert data["action"] == "extract"
    assert data["pipeline_name"] == "run_extract_pipeline"
    assert data["backend"] == "pptx"
    assert data["document_id"] == sample_extract_cfg.get_document_id()
    assert data["edits_file"] is None
    assert data["end_time"] is None
    assert "environment" in data
    assert data["config"]["action"] == "extract"


def test_manifest_updates_on_completion(sample_extract_cfg: UserConfig, temp_output_dir: Path) -> None:
    manifest = RunManifest(sample_extract_cfg, run_id="complete")
    manifest.start()

    output_path = temp_output_dir / "slidesync_operations.json"
    manifest.complete(output_path, operation_count=7)

    data = _read(manifest.manifest_path)
    assert data["status"] == "success"
    assert data["output_path"] == str(output_path)
    assert data["operation_count"] == 7
    assert data["end_time"] is not None
    assert data["duration_seconds"] >= 0


def test_manifest_updates_on_failure(sample_extract_cfg: UserConfig) -> None:
    manifest = RunManifest(sample_extract_cfg, run_id="fail")
    manifest.start()

    manifest.fail(ValueError("Bad edits"))

    data = _read(manifest.manifest_path)
    assert data["status"] == "fail"
    assert data["error"] == "Bad edits"
    assert data["error_type"] == "ValueError"


def test_sync_manifest_names_the_sync_pipeline(sample_extract_cfg: UserConfig, tmp_path: Path) -> None:
    sample_extract_cfg.action = PipelineAction.SYNC
    sample_extract_cfg.edits_file = tmp_path / "edits.json"

    manifest = RunManifest(sample_extract_cfg, run_id="sync")

    assert manifest.manifest["pipeline_name"] == "run_sync_pipeline"
    assert manifest.manifest["edits_file"] == str((tmp_path / "edits.json").resolve())


def test_unwritable_manifest_does_not_raise(sample_extract_cfg: UserConfig, tmp_path: Path) -> None:
    manifest = RunManifest(sample_extract_cfg, run_id="unwritable")
    manifest.manifest_path = tmp_path / "missing_dir" / "manifest.json"

    manifest.start()

    assert not manifest.manifest_path.exists()
