# internals/define_config.py
"""User configuration dataclass and validation."""

# region imports
from __future__ import annotations

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    # Python 3.10
    import tomli as tomllib  # type: ignore[no-redef]

import logging
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import tomli_w  # For writing (no stdlib equivalent yet)

from slidesync.internals.paths import resolve_path, user_output_dir

# endregion

log = logging.getLogger("slidesync")


# region Enums
class PipelineAction(Enum):
    """What a pipeline run does with the presentation."""

    EXTRACT = "extract"  # Write the edit template + plain text summary
    SYNC = "sync"  # Apply an edit payload and submit the compiled operations

    @classmethod
    def from_string(cls, value: str) -> "PipelineAction":
        value = value.lower().strip()
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(
            f"'{value}' is not a valid PipelineAction. Valid options: {', '.join(m.value for m in cls)}"
        )


class CustomizationGate(Enum):
    """
    Which shapes honor the per-shape customization flag of an edit payload.

    A shape edit without a flag is always applied. With a flag, the edit is applied only when the
    flag is "CUSTOM", for the shape kinds this setting covers.
    """

    TEXT = "text"  # Gate text shapes only; table edits are never gated
    ALL = "all"  # Gate text and table shapes alike
    OFF = "off"  # Ignore the flag entirely

    @classmethod
    def from_string(cls, value: str) -> "CustomizationGate":
        value = value.lower().strip()

        aliases = {
            "none": cls.OFF,
            "text_only": cls.TEXT,
        }
        if value in aliases:
            return aliases[value]

        for member in cls:
            if member.value == value:
                return member

        valid_values = [m.value for m in cls] + list(aliases.keys())
        raise ValueError(
            f"'{value}' is not a valid CustomizationGate. Valid options: {', '.join(valid_values)}"
        )


class StoreBackend(Enum):
    """Where the presentation lives. Inferred from which document input is set."""

    GOOGLE_SLIDES = "google_slides"
    PPTX = "pptx"


# endregion


# region class UserConfig
@dataclass
class UserConfig:
    """All user-configurable settings for slidesync."""

    # region class fields

    # region Document inputs
    # Exactly one of these identifies the document to work on
    presentation_id: Optional[str] = None  # Google Slides presentation id
    input_pptx: Optional[Path] = None  # Local .pptx used as the document store

    edits_file: Optional[Path] = None  # JSON edit payload (required for sync)
    output_folder: Optional[Path] = None
    credentials_file: Optional[Path] = None  # Service account JSON for Google Slides
    shapes_file: Optional[Path] = None  # JSON list of shape records whose customization flags go into the edit template
    # endregion

    # region Slide selection
    page_object_id: Optional[str] = None
    range_start: Optional[int] = None  # 1-based, inclusive
    range_end: Optional[int] = None
    # endregion

    # region Processing options
    action: PipelineAction = PipelineAction.EXTRACT
    customization_gate: CustomizationGate = CustomizationGate.TEXT
    dry_run: bool = False  # Compile and save operations without submitting them
    # endregion

    # endregion

    # region post_init
    def __post_init__(self) -> None:
        """Convert string inputs of path fields into Path objects."""
        if self.input_pptx is not None:
            self.input_pptx = Path(self.input_pptx)
        if self.edits_file is not None:
            self.edits_file = Path(self.edits_file)
        if self.output_folder is not None:
            self.output_folder = Path(self.output_folder)
        if self.credentials_file is not None:
            self.credentials_file = Path(self.credentials_file)
        if self.shapes_file is not None:
            self.shapes_file = Path(self.shapes_file)

    # endregion

    # region from_toml
    @classmethod
    def from_toml(cls, path: Path) -> UserConfig:
        """
        Load configuration from a TOML file.

        The TOML file should have flat key-value pairs matching the UserConfig field names.

        Example TOML:
            presentation_id = "1AbCdEf..."
            credentials_file = "~/keys/slides-bot.json"
            action = "sync"
            edits_file = "~/Documents/slidesync/input/edits.json"
            customization_gate = "text"

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If TOML is invalid or contains invalid enum values
        """
        if not path.exists():
            error_msg = f"Config file not found: {path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if path.is_dir():
            error_msg = f"This is a directory (folder), not a toml file: {path}"
            log.error(error_msg)
            raise ValueError(error_msg)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML syntax in {path}. Check for missing or mismatched quote marks."
            log.error(error_msg)
            raise ValueError(error_msg) from e
        except PermissionError as e:
            error_msg = f"We hit a permission error when trying to access {path}"
            log.error(error_msg)
            raise ValueError(error_msg) from e

        if not data:
            log.warning(
                f"Config toml file loaded as empty, so no UserConfig fields were set from: {path}."
            )

        valid_fields = {f.name for f in fields(cls)}
        unexpected = set(data.keys()) - valid_fields

        if unexpected:
            log.warning(
                f"Ignoring unexpected fields in TOML config: {', '.join(sorted(unexpected))}. "
                f"Check for typos. Valid fields: {', '.join(sorted(valid_fields))}"
            )
            data = {k: v for k, v in data.items() if k in valid_fields}

        # Convert string enum values to actual enums
        if "action" in data:
            try:
                data["action"] = PipelineAction.from_string(data["action"])
            except ValueError as e:
                error_msg = (
                    f"Invalid action: '{data['action']}'. "
                    f"Valid options: {[a.value for a in PipelineAction]}"
                )
                log.error(error_msg)
                raise ValueError(error_msg) from e

        if "customization_gate" in data:
            try:
                data["customization_gate"] = CustomizationGate.from_string(
                    data["customization_gate"]
                )
            except ValueError as e:
                error_msg = (
                    f"Invalid customization_gate: '{data['customization_gate']}'. "
                    f"Valid options: {[g.value for g in CustomizationGate]}"
                )
                log.error(error_msg)
                raise ValueError(error_msg) from e

        return cls(**data)

    # endregion

    # region backend property
    @property
    def backend(self) -> StoreBackend:
        """Document store backend inferred from which input is set."""
        if self.presentation_id and self.input_pptx:
            log.error(
                "We couldn't pick a document store because both presentation_id and input_pptx were provided. Only 1 document can be specified per run."
            )
            raise ValueError("Cannot determine backend: too many inputs provided")
        elif self.presentation_id:
            return StoreBackend.GOOGLE_SLIDES
        elif self.input_pptx:
            return StoreBackend.PPTX
        else:
            log.error(
                "We couldn't pick a document store because there was no presentation_id or input_pptx provided. You must provide one."
            )
            raise ValueError("Cannot determine backend: no document specified")

    # endregion

    # region get real Path objects from stored cfg values
    def get_input_pptx_file(self) -> Path | None:
        if self.input_pptx:
            return resolve_path(str(self.input_pptx))
        return None

    def get_edits_file(self) -> Path | None:
        if self.edits_file:
            return resolve_path(str(self.edits_file))
        return None

    def get_credentials_file(self) -> Path | None:
        if self.credentials_file:
            return resolve_path(str(self.credentials_file))
        return None

    def get_shapes_file(self) -> Path | None:
        if self.shapes_file:
            return resolve_path(str(self.shapes_file))
        return None

    def get_output_folder(self) -> Path:
        """Output folder, with fallback to ~/Documents/slidesync/output/."""
        if self.output_folder:
            return resolve_path(str(self.output_folder))
        return user_output_dir()

    def get_document_id(self) -> str:
        """The id handed to the document store: the presentation id, or the pptx path as a string."""
        if self.backend == StoreBackend.GOOGLE_SLIDES:
            return str(self.presentation_id)
        return str(self.get_input_pptx_file())

    # endregion

    # region save_toml
    def save_toml(self, path: Path) -> None:
        """Save configuration to a TOML file. None values are left out."""
        path = Path(path)

        if path.exists() and path.is_dir():
            error_msg = f"Cannot save config: path is a directory, not a file: {path}."
            log.error(error_msg)
            raise ValueError(error_msg)

        path.parent.mkdir(parents=True, exist_ok=True)

        # TOML can't serialize None
        data: dict[str, Any] = {
            k: v for k, v in self.config_to_dict().items() if v is not None
        }

        try:
            log.info(f"Attempting to save to {path}")
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
            log.info(f"Saved toml config file at {path}")
        except PermissionError as e:
            error_msg = f"Permission denied writing to: {path}"
            log.error(error_msg)
            raise PermissionError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to write config file to {path}"
            log.error(error_msg)
            raise OSError(error_msg) from e

    # endregion

    # region config_to_dict
    def config_to_dict(self) -> dict[str, Any]:
        """Convert config to a TOML-serializable dict with forward-slash paths."""
        data: dict[str, Any] = {
            "presentation_id": self.presentation_id,
            "input_pptx": self.input_pptx.as_posix() if self.input_pptx else None,
            "edits_file": self.edits_file.as_posix() if self.edits_file else None,
            "output_folder": (
                self.output_folder.as_posix() if self.output_folder else None
            ),
            "credentials_file": (
                self.credentials_file.as_posix() if self.credentials_file else None
            ),
            "shapes_file": self.shapes_file.as_posix() if self.shapes_file else None,
            "page_object_id": self.page_object_id,
            "range_start": self.range_start,
            "range_end": self.range_end,
            "action": self.action.value,
            "customization_gate": self.customization_gate.value,
            "dry_run": self.dry_run,
        }

        log.debug(f"Config as dict: \n{data}")

        return data

    # endregion

    # region instance validation methods
    def pre_run_check(self) -> None:
        """
        Validate everything needed for a pipeline run.
        Combines intrinsic and external validation in one place.
        """
        self.validate()

        if self.backend == StoreBackend.PPTX:
            self._validate_existing_file(self.get_input_pptx_file(), "Input pptx")
        else:
            self._validate_existing_file(
                self.get_credentials_file(), "Credentials file"
            )

        if self.action == PipelineAction.SYNC:
            self._validate_existing_file(self.get_edits_file(), "Edits file")

        if self.shapes_file:
            self._validate_existing_file(self.get_shapes_file(), "Shapes file")

        self._validate_output_folder()

    def validate(self) -> None:
        """
        Validate intrinsic config values (no filesystem access).
        """
        # Raises if zero or two document inputs are set
        _ = self.backend

        if self.presentation_id is not None and not str(self.presentation_id).strip():
            log.error("presentation_id is an empty string")
            raise ValueError("presentation_id must not be empty.")

        if self.backend == StoreBackend.GOOGLE_SLIDES and self.credentials_file is None:
            log.error("No credentials_file specified for a Google Slides presentation")
            raise ValueError(
                "A credentials_file (service account JSON) is required when presentation_id is set."
            )

        if not isinstance(self.action, PipelineAction):  # type: ignore[unreachable]
            log.error("Invalid value in action; must be enum.")
            raise ValueError(
                f"action must be a PipelineAction enum, got {type(self.action).__name__}. "
                f"Valid values: {[e.value for e in PipelineAction]}"
            )

        if not isinstance(self.customization_gate, CustomizationGate):  # type: ignore[unreachable]
            log.error("Invalid value in customization_gate; must be enum.")
            raise ValueError(
                f"customization_gate must be a CustomizationGate enum, got {type(self.customization_gate).__name__}. "
                f"Valid values: {[e.value for e in CustomizationGate]}"
            )

        if self.action == PipelineAction.SYNC and self.edits_file is None:
            log.error("No edits_file specified for a sync run")
            raise ValueError("The sync action requires an edits_file.")

        if not isinstance(self.dry_run, bool):
            log.error(f"dry_run must be a boolean, got {type(self.dry_run).__name__}")
            raise ValueError(
                f"dry_run must be a boolean, got {type(self.dry_run).__name__}"
            )

        for field_name in ("range_start", "range_end"):
            value = getattr(self, field_name)
            if value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                error_msg = f"{field_name} must be an integer, got {type(value).__name__}"
                log.error(error_msg)
                raise ValueError(error_msg)
            if value < 1:
                error_msg = f"{field_name} must be >= 1, got {value}"
                log.error(error_msg)
                raise ValueError(error_msg)

        if self.range_start is not None and self.range_end is not None:
            if self.range_start > self.range_end:
                error_msg = f"range_start ({self.range_start}) cannot be greater than range_end ({self.range_end})"
                log.error(error_msg)
                raise ValueError(error_msg)

    def _validate_existing_file(self, path: Path | None, label: str) -> None:
        """Helper: the path must be set, exist, and be a file."""
        if path is None:
            error_msg = f"{label} not specified."
            log.error(error_msg)
            raise ValueError(error_msg)
        if not path.exists():
            error_msg = f"{label} not found: {path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if not path.is_file():
            error_msg = f"{label} is not a file: {path}"
            log.error(error_msg)
            raise ValueError(error_msg)

    def _validate_output_folder(self) -> None:
        """Helper: validate output folder is usable"""
        output_folder = self.get_output_folder()
        if output_folder.exists() and not output_folder.is_dir():
            raise ValueError(
                f"Output path exists but is not a directory: {output_folder}"
            )

    # endregion


# endregion
