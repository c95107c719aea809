"""Shared fixtures"""

# tests/conftest.py
from pathlib import Path
from typing import Any

import pytest

from slidesync.internals.define_config import PipelineAction, UserConfig
from slidesync.models import SegmentMap
from slidesync.processing.extraction import build_segment_map
from tests.helpers import build_sample_pptx, sample_tree


@pytest.fixture(autouse=True)
def isolated_user_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point ~/Documents/slidesync/ at a temp folder so tests never write into the real one."""
    documents = tmp_path / "Documents"
    monkeypatch.setattr(
        "slidesync.internals.paths.user_documents_dir", lambda: str(documents)
    )
    return documents / "slidesync"


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Temporary directory for test output files"""
    output = tmp_path / "output"
    output.mkdir()
    return output


@pytest.fixture
def raw_presentation() -> dict[str, Any]:
    """Raw Slides-shaped tree; see tests.helpers.sample_tree for its contents."""
    return sample_tree()


@pytest.fixture
def segment_map(raw_presentation: dict[str, Any]) -> SegmentMap:
    return build_segment_map(raw_presentation)


@pytest.fixture
def sample_pptx(tmp_path: Path) -> Path:
    """A freshly built one-slide deck; see tests.helpers.build_sample_pptx."""
    return build_sample_pptx(tmp_path / "deck.pptx")


@pytest.fixture
def sample_extract_cfg(sample_pptx: Path, temp_output_dir: Path) -> UserConfig:
    """Sample config object for an extract run on a local deck"""
    return UserConfig(
        input_pptx=sample_pptx,
        output_folder=temp_output_dir,
        action=PipelineAction.EXTRACT,
    )


@pytest.fixture
def clean_debug_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Ensure debug env var is not set before test.
    Used by at least test_utils + test_startup."""
    monkeypatch.delenv("SLIDESYNC_DEBUG", raising=False)
    return monkeypatch


@pytest.fixture
def sample_config_toml(tmp_path: Path, sample_pptx: Path) -> Path:
    """A sync config TOML pointing at the sample deck"""
    edits = tmp_path / "edits.json"
    edits.write_text("{}", encoding="utf-8")
    path = tmp_path / "test_config.toml"
    path.write_text(
        "\n".join(
            [
                f'input_pptx = "{sample_pptx.as_posix()}"',
                f'edits_file = "{edits.as_posix()}"',
                'action = "sync"',
                'customization_gate = "all"',
                "dry_run = true",
                "range_start = 1",
                "range_end = 1",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path
