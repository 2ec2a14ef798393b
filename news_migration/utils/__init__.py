"""
Utility helpers used by the migration tool.

This subpackage exposes the error kinds, structured logging, explicit
outcomes and redirect map generation.
"""

from .errors import (
    ERRORS,
    DateParseError,
    DestinationRequestError,
    FetchError,
    ImageFetchError,
    ImageProcessError,
    MigrationError,
    log_message,
    report_error,
    report_ok,
)
from .outcome import Outcome
from .redirects import generate_redirects_csv

__all__ = [
    "ERRORS",
    "DateParseError",
    "DestinationRequestError",
    "FetchError",
    "ImageFetchError",
    "ImageProcessError",
    "MigrationError",
    "Outcome",
    "generate_redirects_csv",
    "log_message",
    "report_error",
    "report_ok",
]
