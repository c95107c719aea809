"""Utilities for use across the entire program."""

import io
import logging
import os
import platform
import sys
from typing import Any

from slidesync.internals import constants

log = logging.getLogger("slidesync")


# region setup_console_encoding
def setup_console_encoding() -> None:
    """Configure UTF-8 encoding for the Windows console so bullet glyphs and other non-ASCII text print cleanly."""
    if platform.system() == "Windows":
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")


# endregion


# region get_debug_mode
def get_debug_mode() -> bool:
    """Debug mode from the SLIDESYNC_DEBUG env variable, falling back to the hard-coded default."""
    env_debug_str = os.environ.get("SLIDESYNC_DEBUG")
    if env_debug_str is not None:
        try:
            return str_to_bool(env_debug_str)
        except ValueError:
            log.warning(
                f"Warning: Invalid value for SLIDESYNC_DEBUG env var: '{env_debug_str}'. Using default."
            )

    return constants.DEBUG_MODE_DEFAULT


# endregion


# region str_to_bool
def str_to_bool(value: str) -> bool:
    """Convert strings "True"/"False" to booleans"""
    if value.lower().strip() in {"false", "f", "0", "no", "n"}:
        return False
    elif value.lower().strip() in {"true", "t", "1", "yes", "y"}:
        return True
    else:
        log.warning(f"{value} is not a valid boolean value.")
        raise ValueError(f"{value} is not a valid boolean value.")


# endregion


# region Color conversion
def rgb_to_hex(rgb_color: dict[str, Any]) -> str:
    """
    Slides RgbColor ({"red": 0..1, "green": 0..1, "blue": 0..1}, missing channels are 0) to "RRGGBB".
    """
    channels = (rgb_color.get(name, 0.0) for name in ("red", "green", "blue"))
    return "".join(f"{round(max(0.0, min(1.0, c)) * 255):02X}" for c in channels)


def hex_to_rgb(hex_str: str) -> dict[str, float]:
    """Inverse of rgb_to_hex(); accepts "RRGGBB" with or without a leading "#"."""
    hex_str = hex_str.lstrip("#")
    if len(hex_str) != 6:
        raise ValueError(f"Expected a 6-digit hex color, got '{hex_str}'")
    return {
        "red": int(hex_str[0:2], 16) / 255,
        "green": int(hex_str[2:4], 16) / 255,
        "blue": int(hex_str[4:6], 16) / 255,
    }


# endregion
