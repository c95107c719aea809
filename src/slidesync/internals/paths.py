"""Cross-platform path resolution for user directories.

Uses platformdirs to find OS-appropriate locations for:
- Logs (where slidesync.log lives)
- Output (edit templates, compiled operations, rewritten decks)
- Input (optional staging area for decks and edit payloads)
- Configs and run manifests
"""

import os
from pathlib import Path

from platformdirs import user_documents_dir

PACKAGE_NAME = "slidesync"


# region user_base_dir
def user_base_dir() -> Path:
    """
    Base directory for all slidesync user files.

    Returns:
        Path to ~/Documents/slidesync/ (or OS equivalent)
    """
    base = Path(user_documents_dir()) / PACKAGE_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


# endregion


# region _user_subdir
def _user_subdir(name: str) -> Path:
    subdir = user_base_dir() / name
    subdir.mkdir(parents=True, exist_ok=True)
    return subdir


# endregion


# region user_log_dir_path
def user_log_dir_path() -> Path:
    """Directory for log files: ~/Documents/slidesync/logs/"""
    return _user_subdir("logs")


# endregion


# region user_output_dir
def user_output_dir() -> Path:
    """Default output directory: ~/Documents/slidesync/output/"""
    return _user_subdir("output")


# endregion


# region user_input_dir
def user_input_dir() -> Path:
    """Optional staging directory for input decks and edit files: ~/Documents/slidesync/input/"""
    return _user_subdir("input")


# endregion


# region user_configs_dir
def user_configs_dir() -> Path:
    """Directory for saved configuration files: ~/Documents/slidesync/configs/"""
    return _user_subdir("configs")


# endregion


# region user_manifests_dir
def user_manifests_dir() -> Path:
    """Directory for run manifests: ~/Documents/slidesync/manifests/"""
    return _user_subdir("manifests")


# endregion


# region resolve_path
def resolve_path(raw: str) -> Path:
    """
    Expand ~ and ${VARS}; resolve to absolute path.

    Relative paths resolve relative to current working directory.
    """
    expanded = os.path.expandvars(raw)
    return Path(expanded).expanduser().resolve()


# endregion


# region normalize_path
def normalize_path(path_str: str | None) -> str | None:
    """
    Normalize path separators to forward slashes so saved TOML never contains backslash escapes.
    """
    return path_str.replace("\\", "/") if path_str else None


# endregion
