"""CLI Interface Logic (argparse etc)"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path

from slidesync.internals.define_config import (
    CustomizationGate,
    PipelineAction,
    UserConfig,
)
from slidesync.orchestrator import run_pipeline

log = logging.getLogger("slidesync")


def run(argv: list[str] | None = None) -> Path:
    """Run CLI interface. Assumes startup.initialize_application() was already called."""

    args = parse_args(argv)

    # CLI args > config file > defaults
    cfg = build_config_from_args(args)

    return run_pipeline(cfg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slidesync",
        description="Push text edits into a presentation while keeping its run, paragraph and bullet formatting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use config file
  slidesync --config path/to/my_settings.toml

  # Write an edit template for a local deck
  slidesync --input-pptx deck.pptx

  # Apply edits to a Google Slides presentation, but only save the operations
  slidesync --presentation-id 1AbC... --credentials-file key.json --action sync --edits-file edits.json --dry-run

  # Override config file settings
  slidesync --config settings.toml --customization-gate all
        """,
    )

    # Config file (special - loads other values)
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to TOML configuration file for a pipeline run. See example in ~/Documents/slidesync/configs/sample_config.toml after at least 1 run",
    )

    # Document inputs
    parser.add_argument(
        "--presentation-id",
        type=str,
        dest="presentation_id",
        metavar="ID",
        help="Google Slides presentation id",
    )
    parser.add_argument(
        "--input-pptx",
        type=str,
        dest="input_pptx",
        metavar="PATH",
        help="Local PowerPoint file (.pptx) to use instead of Google Slides",
    )
    parser.add_argument(
        "--edits-file",
        type=str,
        dest="edits_file",
        metavar="PATH",
        help="JSON edit payload (required for --action sync)",
    )
    parser.add_argument(
        "--output-folder",
        type=str,
        dest="output_folder",
        metavar="PATH",
        help="Output folder for templates, operation dumps and rewritten decks",
    )
    parser.add_argument(
        "--credentials-file",
        type=str,
        dest="credentials_file",
        metavar="PATH",
        help="Service account key (JSON) for the Google Slides API",
    )
    parser.add_argument(
        "--shapes-file",
        type=str,
        dest="shapes_file",
        metavar="PATH",
        help="JSON list of shape records (shapeId, customization, characterCount) to merge into the edit template",
    )

    # Slide selection
    parser.add_argument(
        "--page-object-id",
        type=str,
        dest="page_object_id",
        metavar="ID",
        help="Only work on the slide with this object id",
    )
    parser.add_argument(
        "--range-start",
        metavar="N",
        type=int,
        help="First slide to work on (1-based, inclusive)",
    )
    parser.add_argument(
        "--range-end",
        metavar="N",
        type=int,
        help="Last slide to work on (1-based, inclusive)",
    )

    # Processing options
    parser.add_argument(
        "--action",
        type=str,
        choices=[a.value for a in PipelineAction],
        help="extract: write an edit template. sync: apply an edit payload (default: extract)",
    )
    parser.add_argument(
        "--customization-gate",
        type=str,
        dest="customization_gate",
        choices=["text", "all", "off", "none", "text_only"],
        help="Which shapes honor the per-shape customization flag (default: text)",
    )

    dry_run_group = parser.add_mutually_exclusive_group()
    dry_run_group.add_argument(
        "--dry-run",
        action="store_true",
        dest="dry_run",
        default=None,
        help="Compile and save the operations without submitting them",
    )
    dry_run_group.add_argument(
        "--no-dry-run",
        action="store_false",
        dest="dry_run",
        default=None,
        help="Submit the compiled operations (default)",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns argparse.Namespace with all the UserConfig fields as attributes.
    Validates that all config fields have corresponding CLI arguments.
    """
    parser = build_parser()
    _validate_args_match_config(parser)
    return parser.parse_args(argv)


def build_config_from_args(args: argparse.Namespace) -> UserConfig:
    """
    Build UserConfig from parsed arguments with proper priority.

    Priority order (highest to lowest):
    1. CLI arguments (if explicitly provided)
    2. Config file values (if --config provided)
    3. UserConfig defaults
    """
    if args.config:
        config_path = Path(args.config)
        log.info(f"Loading config from {config_path}")
        cfg = UserConfig.from_toml(config_path)
    else:
        cfg = UserConfig()

    # A document given on the command line replaces the config file's document of either kind
    if args.presentation_id is not None:
        cfg.presentation_id = args.presentation_id
        cfg.input_pptx = None
    if args.input_pptx is not None:
        cfg.input_pptx = Path(args.input_pptx)
        if args.presentation_id is None:
            cfg.presentation_id = None

    if args.edits_file is not None:
        cfg.edits_file = Path(args.edits_file)
    if args.output_folder is not None:
        cfg.output_folder = Path(args.output_folder)
    if args.credentials_file is not None:
        cfg.credentials_file = Path(args.credentials_file)
    if args.shapes_file is not None:
        cfg.shapes_file = Path(args.shapes_file)

    if args.page_object_id is not None:
        cfg.page_object_id = args.page_object_id
    if args.range_start is not None:
        cfg.range_start = args.range_start  # argparse already validated it's an int
    if args.range_end is not None:
        cfg.range_end = args.range_end

    if args.action is not None:
        cfg.action = PipelineAction.from_string(args.action)
    if args.customization_gate is not None:
        cfg.customization_gate = CustomizationGate.from_string(args.customization_gate)

    # None when neither --dry-run nor --no-dry-run was given
    if args.dry_run is not None:
        cfg.dry_run = args.dry_run

    cfg.validate()

    return cfg


def _validate_args_match_config(parser: argparse.ArgumentParser) -> None:
    """
    Ensure all UserConfig fields have corresponding CLI arguments.

    Raises:
        RuntimeError: If there's a mismatch between config fields and CLI args
    """
    config_fields = {f.name for f in fields(UserConfig)}

    excluded_args = ["help", "config"]
    arg_names = {
        action.dest for action in parser._actions if action.dest not in excluded_args
    }

    missing_in_args = config_fields - arg_names
    extra_in_args = arg_names - config_fields

    if missing_in_args:
        log.error(
            "UserConfig fields must have corresponding arg added to cli.build_parser() to keep the config file and CLI in sync."
        )
        raise RuntimeError(
            f"CLI arguments missing for UserConfig fields: {missing_in_args}\n"
            "These config fields need corresponding arguments added to build_parser()"
        )

    if extra_in_args:
        log.error(
            "Unexpected CLI args that do not match UserConfig fields. Either add the field to UserConfig, "
            "or add the arg to the excluded_args list in _validate_args_match_config() if it is CLI-only."
        )
        raise RuntimeError(
            f"CLI arguments don't match UserConfig fields: {extra_in_args}\n"
            "Either remove these CLI args or add corresponding fields to UserConfig"
        )


def main() -> None:
    """Development entry point - run CLI directly with `python -m slidesync.cli`"""
    from slidesync import startup

    log = startup.initialize_application()
    try:
        run()
    except Exception:
        log.exception("Fatal error in CLI")
        raise


if __name__ == "__main__":
    main()
