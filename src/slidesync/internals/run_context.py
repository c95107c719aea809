"""Process-global execution context management.

Manages two levels of tracking IDs:
- session_id: Generated once per CLI invocation
- pipeline_run_id: Generated fresh for each pipeline execution
"""

from __future__ import annotations

import logging
import os
import threading
import uuid

# None means "not yet generated"
_session_id: str | None = None
_pipeline_run_id: str | None = None

_session_lock = threading.Lock()
_pipeline_lock = threading.Lock()


# region seed_session_id
def seed_session_id(value: str) -> None:
    """
    Seed the process-global session ID before it is generated.

    Has no effect if the session ID is already set.
    """
    global _session_id

    with _session_lock:
        if _session_id is None:
            _session_id = value


# endregion


# region get_session_id
def get_session_id() -> str:
    """
    Return the process-global session ID, generating it if necessary.

    Resolution order:
    1. Already-seeded value (via `seed_session_id()`).
    2. Environment variable `SLIDESYNC_SESSION_ID`, so CI jobs and tests can
       correlate logs with a known id.
    3. Fresh random 8-character hex string.
    """
    global _session_id

    # Double-checked: fast path without the lock, then re-check inside it
    if _session_id is None:
        with _session_lock:
            if _session_id is None:
                _session_id = (
                    os.environ.get("SLIDESYNC_SESSION_ID") or uuid.uuid4().hex[:8]
                )
    return _session_id


# endregion


# region start_pipeline_run
def start_pipeline_run() -> str:
    """
    Generate and set a fresh pipeline run ID. Always overwrites any previous one.
    """
    global _pipeline_run_id

    with _pipeline_lock:
        _pipeline_run_id = uuid.uuid4().hex[:8]

    return _pipeline_run_id


# endregion


# region get_pipeline_run_id
def get_pipeline_run_id() -> str:
    """
    Return the current pipeline run ID, or "Unknown" if start_pipeline_run() hasn't been called.
    """
    if _pipeline_run_id is None:
        logging.getLogger("slidesync").debug(
            "There is no _pipeline_run_id set yet; returning Unknown. Call start_pipeline_run() at the beginning of pipeline execution."
        )
        return "Unknown"
    return _pipeline_run_id


# endregion


# region seed_pipeline_run_id
def seed_pipeline_run_id(value: str) -> None:
    """Seed the pipeline run ID (primarily for testing)."""
    global _pipeline_run_id
    with _pipeline_lock:
        _pipeline_run_id = value


# endregion
