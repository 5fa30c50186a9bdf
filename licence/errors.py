"""Licence error types and validation failure kinds."""

from enum import Enum


class LicenceError(Exception):
    """Base class for licence key errors."""


class InvalidTypeError(LicenceError, ValueError):
    """Raised when a licence type cannot be generated."""


class InvalidOptionError(LicenceError, ValueError):
    """Raised when generation options are malformed."""


class DecodeError(LicenceError, ValueError):
    """Raised when an encoded payload cannot be turned back into a mapping."""


class FailureKind(str, Enum):
    """Why a licence key was rejected."""

    FORMAT_ERROR = "format_error"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    PARSE_ERROR = "parse_error"
    EXPIRED = "expired"
    UNKNOWN_TYPE = "unknown_type"


# Reason strings reported alongside each failure kind
FAILURE_REASONS = {
    FailureKind.FORMAT_ERROR: "Invalid format",
    FailureKind.CHECKSUM_MISMATCH: "Invalid checksum",
    FailureKind.PARSE_ERROR: "Parse error",
    FailureKind.EXPIRED: "License has expired",
    FailureKind.UNKNOWN_TYPE: "Unknown license type",
}
