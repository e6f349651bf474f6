"""Configuration and simple helper utilities for the mailaddrs CLI."""

from __future__ import annotations

import os

DEFAULT_SEPARATOR = ", "
DEFAULT_OUTPUT_FORMAT = "text"
OUTPUT_FORMATS = ("text", "json")
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_separator() -> str:
    """Return the header output separator from env, defaulting to ', '."""
    raw = os.environ.get("MAILADDRS_SEPARATOR")
    return raw if raw else DEFAULT_SEPARATOR


def get_output_format() -> str:
    """Return the default CLI output format, falling back to text."""
    raw = (os.environ.get("MAILADDRS_OUTPUT") or "").strip().lower()
    return raw if raw in OUTPUT_FORMATS else DEFAULT_OUTPUT_FORMAT


def get_log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
