"""Startup logic that has to run before anything else happens.

- Logging configuration
- User directory scaffolding (output, logs, configs, manifests)
- Console encoding setup
"""

import logging

from slidesync.internals.logger import setup_logger
from slidesync.internals.scaffold import ensure_user_scaffold
from slidesync.utils import get_debug_mode, setup_console_encoding


# region initialize_application
def initialize_application() -> logging.Logger:
    """Common startup tasks for every entry point."""

    # Must happen before any console output, including the logger's
    setup_console_encoding()

    log = setup_logger(enable_trace=_should_enable_trace_on_startup())
    log.info("Starting slidesync Log.")

    log.debug("Checking for existing slidesync user folders and scaffolding if needed.")
    ensure_user_scaffold()

    return log


# endregion


# region _should_enable_trace_on_startup
def _should_enable_trace_on_startup() -> bool:
    """
    Determine if trace logging should start immediately based on Debug Mode switch.

    Checks:
    - Environment variable (SLIDESYNC_DEBUG)
    - System default (DEBUG_MODE_DEFAULT in constants.py)
    """
    return get_debug_mode()


# endregion
