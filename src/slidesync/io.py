# io.py
"""File I/O: loading pptx decks, and writing timestamped output files."""

# mypy: disable-error-code="import-untyped"
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import pptx
from pptx import presentation

from slidesync.internals.run_context import get_pipeline_run_id

log = logging.getLogger("slidesync")


# region Path Helpers
def validate_path(user_path: str | Path) -> Path:
    """Ensure filepath exists and is a file."""
    path = Path(user_path)
    pipeline_id = get_pipeline_run_id()
    if not path.exists():
        log.error(f"File not found: {user_path} [pipeline:{pipeline_id}]")
        raise FileNotFoundError(f"File not found: {user_path}")
    if not path.is_file():
        log.error(
            f"Path is not a file (might be a directory): {user_path} [pipeline:{pipeline_id}]"
        )
        raise ValueError(f"Path is not a file: {user_path}")
    return path


def validate_pptx_path(user_path: str | Path) -> Path:
    """Validates the filepath exists and is actually a pptx file."""
    path = validate_path(user_path)
    pipeline_id = get_pipeline_run_id()

    if path.suffix.lower() == ".ppt":
        log.error(f"Unsupported .ppt file: {path} [pipeline:{pipeline_id}]")
        raise ValueError(
            "This tool only supports .pptx files right now. Please convert your .ppt file to .pptx format first."
        )
    if path.suffix.lower() != ".pptx":
        log.error(
            f"Wrong file extension: expected .pptx, got {path.suffix} [pipeline:{pipeline_id}]"
        )
        raise ValueError(f"Expected a .pptx file, but got: {path.suffix}")
    return path


def build_timestamped_filename(base_filename: str) -> str:
    """Apply a per-run timestamp to a base filename: name.ext -> name_YYYY-MM-DD_HH-MM-SS.ext"""
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    name, ext = base_filename.rsplit(".", 1)
    return f"{name}_{timestamp}.{ext}"


# endregion


# region Disk I/O - Read
def load_and_validate_pptx(pptx_path: Path | str) -> presentation.Presentation:
    """Read a pptx file into a python-pptx Presentation and check it has slides."""
    pipeline_id = get_pipeline_run_id()
    path = validate_pptx_path(pptx_path)

    try:
        prs = pptx.Presentation(str(path))
    except Exception as e:
        log.error(
            f"Could not load PowerPoint file {str(path)} [pipeline:{pipeline_id}]. Error: {e} "
        )
        raise ValueError(f"Presentation appears to be corrupted: {e}") from e

    if not prs.slides:
        log.error(f"Document {str(path)} contains no slides. [pipeline:{pipeline_id}]")
        raise ValueError("Presentation contains no slides.")

    log.info(
        f"The pptx file {path} has {len(prs.slides)} slide(s) in it. [pipeline:{pipeline_id}]"
    )
    return prs


# endregion


# region Disk I/O - Write
def save_presentation(prs: presentation.Presentation, folder: Path, base_filename: str) -> Path:
    """Save a Presentation under a timestamped name in `folder`; returns the written path."""
    pipeline_id = get_pipeline_run_id()
    folder.mkdir(parents=True, exist_ok=True)
    output_filepath = folder / build_timestamped_filename(base_filename)

    if len(prs.slides) > 1000:
        log.warning(
            "This is about to save a pptx file with over 1000 slides ... that seems a bit long!"
        )

    try:
        prs.save(str(output_filepath))
        log.info(f"Successfully saved to {output_filepath}. [pipeline:{pipeline_id}]")
    except PermissionError as e:
        log.error(f"Save failed due to permission error [pipeline:{pipeline_id}]: {e}")
        raise PermissionError("Save failed: File may be open in another program") from e
    except OSError as e:
        log.error(f"Save failed in [pipeline:{pipeline_id}]: {e}")
        raise OSError(f"Save failed (disk space or IO issue): {e}") from e

    return output_filepath


def write_text_output(text: str, folder: Path, base_filename: str) -> Path:
    """Write a UTF-8 text file under a timestamped name in `folder`."""
    pipeline_id = get_pipeline_run_id()
    folder.mkdir(parents=True, exist_ok=True)
    output_filepath = folder / build_timestamped_filename(base_filename)

    try:
        output_filepath.write_text(text, encoding="utf-8")
    except PermissionError as e:
        log.error(f"Write failed due to permission error [pipeline:{pipeline_id}]: {e}")
        raise PermissionError(f"Could not write {output_filepath}") from e
    except OSError as e:
        log.error(f"Write failed in [pipeline:{pipeline_id}]: {e}")
        raise OSError(f"Write failed (disk space or IO issue): {e}") from e

    log.info(f"Wrote {output_filepath} [pipeline:{pipeline_id}]")
    return output_filepath


def write_json_output(data: Any, folder: Path, base_filename: str) -> Path:
    """Pretty-printed JSON counterpart of write_text_output()."""
    return write_text_output(
        json.dumps(data, indent=2, ensure_ascii=False), folder, base_filename
    )


# endregion
