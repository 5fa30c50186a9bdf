"""
Licence Key Module.

Generates, parses and validates ``MB-TYPE-CHECKSUM-PAYLOAD`` licence keys.
"""

from licence.checksum import ChecksumEngine, compute_checksum
from licence.codec import KeyCodec
from licence.errors import (
    DecodeError,
    FailureKind,
    InvalidOptionError,
    InvalidTypeError,
    LicenceError,
)
from licence.generator import LicenceGenerator
from licence.payload import LicencePayload
from licence.service import BatchResult, LicenceKeyService, LicenceStatus, features_for
from licence.templates.defaults import LicenceType
from licence.validator import LicenceValidator, ValidationResult, mask_key

__all__ = [
    "BatchResult",
    "ChecksumEngine",
    "DecodeError",
    "FailureKind",
    "InvalidOptionError",
    "InvalidTypeError",
    "KeyCodec",
    "LicenceError",
    "LicenceGenerator",
    "LicenceKeyService",
    "LicencePayload",
    "LicenceStatus",
    "LicenceType",
    "LicenceValidator",
    "ValidationResult",
    "compute_checksum",
    "features_for",
    "mask_key",
]
