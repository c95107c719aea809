"""User directory structure creation and initialization.
Auto-creates ~/Documents/slidesync/ structure with a README and a sample config

On first run, this creates:
- ~/Documents/slidesync/
  ├── README.md           (explains what each folder is for)
  ├── input/              (optional staging for decks and edit files)
  ├── output/             (edit templates, operation dumps and rewritten decks land here)
  ├── logs/               (slidesync.log lives here)
  ├── configs/            (sample_config.toml)
  └── manifests/          (one JSON manifest per pipeline run)

Safe to call repeatedly - won't overwrite existing user files.
"""

import logging
from pathlib import Path

from slidesync.internals.define_config import PipelineAction, UserConfig
from slidesync.internals.paths import (
    user_base_dir,
    user_configs_dir,
    user_input_dir,
    user_log_dir_path,
    user_manifests_dir,
    user_output_dir,
)

log = logging.getLogger("slidesync")

SAMPLE_CONFIG_FILENAME = "sample_config.toml"

README_TEXT = """# slidesync

This folder was created automatically by slidesync.

- `input/`: put the decks and edit payloads (JSON) you want to work on here.
- `output/`: edit templates, presentation text, compiled operations and rewritten decks.
- `logs/`: `slidesync.log`, plus `trace_slidesync.log` in debug mode.
- `configs/`: TOML configs; pass one with `slidesync --config <file>`.
- `manifests/`: one JSON record per pipeline run.

A typical round trip:

1. `slidesync --action extract --input-pptx input/deck.pptx` writes an edit template to `output/`.
2. Edit the run texts in that template and save it to `input/`.
3. `slidesync --action sync --input-pptx input/deck.pptx --edits-file input/edits.json`
"""


def ensure_user_scaffold() -> None:
    """
    Create folder structure, README and sample config on first run.

    Safe to call every time - won't overwrite existing user files.
    """
    base = user_base_dir()

    # paths.py functions do the mkdir
    input_dir = user_input_dir()
    user_output_dir()
    user_log_dir_path()
    user_manifests_dir()
    configs = user_configs_dir()

    readme_path = base / "README.md"
    if not readme_path.exists():
        readme_path.write_text(README_TEXT, encoding="utf-8")
        log.info(f"Created new README at {readme_path}")

    _write_sample_config_if_missing(configs / SAMPLE_CONFIG_FILENAME, input_dir)

    log.debug(f"User scaffold ready at {base}")


def _write_sample_config_if_missing(target: Path, input_dir: Path) -> None:
    if target.exists():
        log.debug(f"Sample config already exists (not overwriting): {target}")
        return

    sample = UserConfig(
        input_pptx=input_dir / "deck.pptx",
        edits_file=input_dir / "edits.json",
        action=PipelineAction.SYNC,
        dry_run=True,
    )
    sample.save_toml(target)
    log.info(f"Wrote sample config: {target}")
