"""Licence key generation."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Union

from config.settings import (
    DEFAULT_TRIAL_DAYS,
    FORMAT_VERSION,
    KEY_PREFIX,
    KEY_SEPARATOR,
)
from licence import codec
from licence.checksum import ChecksumEngine
from licence.errors import InvalidOptionError, InvalidTypeError
from licence.payload import RESERVED_FIELDS, TRIAL_DAYS, LicencePayload
from licence.templates.defaults import GENERATABLE_TYPES, LicenceType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_type(licence_type: Union[str, LicenceType]) -> LicenceType:
    """Resolve a licence type name (any case) to a generatable LicenceType.

    Raises:
        InvalidTypeError: If the type is unknown or cannot be generated.
    """
    name = licence_type.value if isinstance(licence_type, LicenceType) else licence_type
    if not isinstance(name, str):
        raise InvalidTypeError(f"Licence type must be a string, got {name!r}")
    try:
        resolved = LicenceType(name.upper())
    except ValueError:
        resolved = None
    if resolved not in GENERATABLE_TYPES:
        allowed = ", ".join(t.value for t in GENERATABLE_TYPES)
        raise InvalidTypeError(
            f"Invalid licence type '{name}'. Must be one of: {allowed}"
        )
    return resolved


class LicenceGenerator:
    """Build payloads and compose signed licence keys."""

    def __init__(
        self,
        secret: str,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize with the shared checksum secret.

        Args:
            secret: Secret used for the key checksum.
            now: Clock returning an aware datetime; defaults to UTC now.
        """
        self._checksum = ChecksumEngine(secret)
        self._now = now or _utcnow

    def build_payload(
        self,
        licence_type: Union[str, LicenceType],
        options: Optional[Mapping[str, Any]] = None,
    ) -> LicencePayload:
        """Create the payload for a new licence of the given type.

        Args:
            licence_type: PREMIUM or TRIAL.
            options: Extra payload fields; ``trialDays`` sets the trial length.

        Returns:
            An immutable LicencePayload stamped with the current time.
        """
        licence_type = normalize_type(licence_type)
        options = dict(options or {})

        extras = {}
        for name, value in options.items():
            if name in RESERVED_FIELDS:
                logger.warning("Ignoring reserved payload field '%s' in options", name)
                continue
            extras[name] = value

        generated_on = self._now()
        expiry_date = None
        if licence_type is LicenceType.TRIAL:
            trial_days = _trial_days(options.get(TRIAL_DAYS))
            expiry_date = generated_on + timedelta(days=trial_days)

        return LicencePayload(
            generated_on=generated_on,
            version=FORMAT_VERSION,
            extras=extras,
            expiry_date=expiry_date,
        )

    def generate(
        self,
        licence_type: Union[str, LicenceType],
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Generate a licence key string.

        Returns:
            Key in the form ``MB-TYPE-CHECKSUM-PAYLOAD``.

        Raises:
            InvalidTypeError: If the type is not PREMIUM or TRIAL.
            InvalidOptionError: If ``trialDays`` is not a positive integer.
        """
        licence_type = normalize_type(licence_type)
        payload = self.build_payload(licence_type, options)
        key = self.compose(licence_type.value, codec.encode(payload))
        logger.info("Generated %s licence key", licence_type.value)
        return key

    def generate_trial(self, trial_days: int = DEFAULT_TRIAL_DAYS, **extras) -> str:
        """Generate a trial licence key lasting ``trial_days`` days."""
        return self.generate(LicenceType.TRIAL, {**extras, TRIAL_DAYS: trial_days})

    def compose(self, type_name: str, encoded_payload: str) -> str:
        """Join the key segments around an already-encoded payload."""
        checksum = self._checksum.compute(type_name + encoded_payload)
        return KEY_SEPARATOR.join((KEY_PREFIX, type_name, checksum, encoded_payload))


def _trial_days(value) -> int:
    if value is None or value == 0:
        return DEFAULT_TRIAL_DAYS
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidOptionError(
            f"trialDays must be a positive integer, got {value!r}"
        )
    return value
