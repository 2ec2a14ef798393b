"""
Error kinds and structured logging helpers for the news migration.

The :mod:`news_migration.utils.errors` module centralizes both the exception
hierarchy raised by the pipeline components and the writing of log entries
for failed and successful operations.  Every entry is appended to a file
under ``reports/migration`` so that a run can be reviewed or parsed after it
finishes.

Three public logging functions are provided:

``log_message``
    Print a human readable line and append it to ``migration.log``.

``report_error``
    Record an error that occurred for an article.  An optional exception can
    be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for an article.  Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


class MigrationError(Exception):
    """Base class for every error raised by the migration pipeline."""


class ConfigError(MigrationError):
    """Configuration file is unreadable or incomplete."""


class FetchError(MigrationError):
    """An archive or article page could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ImageFetchError(MigrationError):
    """A source image could not be downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch image {url}: {reason}")
        self.url = url
        self.reason = reason


class ImageProcessError(MigrationError):
    """A source image could not be decoded, resized or encoded."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to process image {url}: {reason}")
        self.url = url
        self.reason = reason


class ImageStorageError(ImageProcessError):
    """A rendition could not be written to blob storage."""


class DateParseError(MigrationError):
    """A block date did not match the legacy date format."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Unparseable date: {text!r}")
        self.text = text


class DestinationRequestError(MigrationError):
    """The destination content API answered with a non-success status."""

    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(f"Destination request failed ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class PreFlightCheckError(MigrationError):
    """Custom exception for pre-flight check failures."""


# Mapping of event codes used throughout the migration to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "FETCH": "Failed to fetch legacy page",
    "IMAGE_FETCH": "Failed to download image",
    "IMAGE_PROCESS": "Failed to process image",
    "DATE_PARSE": "Could not parse block date",
    "DESTINATION": "Destination API request failed",
    "DUPLICATE": "Article already migrated, skipped",
    "EXTRACTED": "Article extracted successfully",
    "CREATED": "Article created successfully",
}

_REPORT_DIR = os.path.join("reports", "migration")


def set_report_dir(path: str) -> None:
    """Redirect every log and report file to ``path``."""
    global _REPORT_DIR
    _REPORT_DIR = path


def report_dir() -> str:
    return _REPORT_DIR


def _write_jsonl(filename: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``filename``."""
    os.makedirs(_REPORT_DIR, exist_ok=True)
    with open(os.path.join(_REPORT_DIR, filename), "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def log_message(message: str, level: str = "INFO") -> None:
    print(f"[{level}] {message}")
    os.makedirs(_REPORT_DIR, exist_ok=True)
    with open(os.path.join(_REPORT_DIR, "migration.log"), "a", encoding="utf-8") as f:
        f.write(f"{level}: {message}\n")


def _entry(code: str, article: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": code,
        "message": ERRORS.get(code, code),
        "slug": article.get("slug"),
        "title": article.get("title"),
    }


def report_error(code: str, article: Dict[str, Any], exc: Optional[Exception] = None) -> None:
    """Log an error event for ``article``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    article:
        Dictionary describing the article.  Only the ``slug`` and ``title``
        keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    """
    entry = _entry(code, article)
    if exc is not None:
        entry["error"] = str(exc)
    log_message(f"{entry['message']} - {article.get('slug') or article.get('url', '')}", "ERROR")
    _write_jsonl("errors.jsonl", entry)


def report_ok(code: str, article: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``article``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    article:
        Dictionary describing the article.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    entry = _entry(code, article)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {article.get('slug', '')}")
    _write_jsonl("success.jsonl", entry)
