"""Licence key validation."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from config.settings import KEY_PREFIX, KEY_SEPARATOR
from licence import codec
from licence.checksum import ChecksumEngine
from licence.errors import FAILURE_REASONS, DecodeError, FailureKind
from licence.payload import LicencePayload

logger = logging.getLogger(__name__)


@dataclass
class ParsedKey:
    """The four segments of a licence key."""

    prefix: str
    licence_type: str
    checksum: str
    data: str


@dataclass
class ValidationResult:
    """Result of a licence validation check."""

    is_valid: bool
    licence_key: str
    licence_type: Optional[str] = None
    payload: Optional[LicencePayload] = None
    data: dict = field(default_factory=dict)
    failure: Optional[FailureKind] = None

    @property
    def reason(self) -> Optional[str]:
        if self.failure is None:
            return None
        return FAILURE_REASONS[self.failure]

    @classmethod
    def failed(cls, licence_key, failure: FailureKind, licence_type=None):
        return cls(
            is_valid=False,
            licence_key=licence_key,
            licence_type=licence_type,
            failure=failure,
        )


def split_key(licence_key: str) -> Optional[ParsedKey]:
    """Split a key into its segments, re-joining everything after the checksum.

    The encoded payload may contain the separator, so only the first three
    separators delimit segments.

    Returns:
        ParsedKey, or None if there are fewer than four segments.
    """
    parts = licence_key.split(KEY_SEPARATOR)
    if len(parts) < 4:
        return None
    prefix, licence_type, checksum = parts[:3]
    return ParsedKey(
        prefix=prefix,
        licence_type=licence_type,
        checksum=checksum,
        data=KEY_SEPARATOR.join(parts[3:]),
    )


def mask_key(licence_key) -> str:
    """Return an anonymised form of a key that is safe to log."""
    if not licence_key or not isinstance(licence_key, str):
        return "none"
    parts = licence_key.split(KEY_SEPARATOR)
    if len(parts) < 2:
        return "invalid"
    return f"{KEY_PREFIX}{KEY_SEPARATOR}{parts[1]}{KEY_SEPARATOR}***"


class LicenceValidator:
    """Validate licence keys against the shared checksum secret."""

    def __init__(self, secret: str):
        """Initialize with the same secret used to generate licences.

        Args:
            secret: Secret used for checksum verification.
        """
        self._checksum = ChecksumEngine(secret)

    def validate(self, licence_key) -> ValidationResult:
        """Validate a licence key's format, checksum and payload.

        Malformed or tampered input is reported through the result and never
        raised.

        Args:
            licence_key: The licence key string to validate.

        Returns:
            ValidationResult with validation status and details.
        """
        if not isinstance(licence_key, str):
            return ValidationResult.failed(licence_key, FailureKind.FORMAT_ERROR)

        parsed = split_key(licence_key)
        if parsed is None or parsed.prefix != KEY_PREFIX:
            logger.debug("Rejected key %s: bad format", mask_key(licence_key))
            return ValidationResult.failed(licence_key, FailureKind.FORMAT_ERROR)

        if not self._checksum.verify(parsed.licence_type + parsed.data, parsed.checksum):
            logger.warning("Rejected key %s: checksum mismatch", mask_key(licence_key))
            return ValidationResult.failed(
                licence_key, FailureKind.CHECKSUM_MISMATCH
            )

        try:
            data = codec.decode(parsed.data)
            payload = LicencePayload.from_dict(data)
        except DecodeError as exc:
            logger.warning("Rejected key %s: %s", mask_key(licence_key), exc)
            return ValidationResult.failed(licence_key, FailureKind.PARSE_ERROR)

        return ValidationResult(
            is_valid=True,
            licence_key=licence_key,
            licence_type=parsed.licence_type.lower(),
            payload=payload,
            data=data,
        )

    def is_key_format_valid(self, licence_key) -> bool:
        """Quick check if the key has the expected prefix and segment count."""
        if not isinstance(licence_key, str):
            return False
        parsed = split_key(licence_key)
        return parsed is not None and parsed.prefix == KEY_PREFIX
