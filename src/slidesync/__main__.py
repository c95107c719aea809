"""Entry point for slidesync."""

from __future__ import annotations

import logging

from slidesync import startup
from slidesync.cli import run as run_cli


def main() -> None:
    """Application entry point - handles initialization and runs the CLI.

    Call like:
    ```
    python -m slidesync --input-pptx deck.pptx
    slidesync --config my_settings.toml
    ```
    """

    # Set up logging and user folder scaffold.
    log: logging.Logger = startup.initialize_application()

    try:
        run_cli()
    except Exception:
        log.exception("Unhandled exception - program crashed.")  # Logs full traceback
        raise


if __name__ == "__main__":
    main()
