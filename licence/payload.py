"""Typed licence payload carried inside a licence key."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

GENERATED_ON = "generatedOn"
VERSION = "version"
EXPIRY_DATE = "expiryDate"
TRIAL_DAYS = "trialDays"

RESERVED_FIELDS = (GENERATED_ON, VERSION, EXPIRY_DATE)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds, e.g. ``2026-01-02T03:04:05.678Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime (naive input is UTC).

    Raises:
        ValueError: If the text is not an ISO-8601 timestamp.
    """
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class LicencePayload:
    """Metadata encoded into a licence key.

    Well-known fields are typed attributes; anything else a caller supplied
    lives in ``extras``, which is exposed read-only.
    """

    generated_on: Optional[datetime]
    version: Optional[str]
    extras: Mapping[str, Any] = field(default_factory=dict)
    expiry_date: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    @property
    def trial_days(self) -> Optional[int]:
        return self.extras.get(TRIAL_DAYS)

    def get(self, name: str, default=None):
        """Look up a field by its wire name."""
        return self.to_dict().get(name, default)

    def to_dict(self) -> dict:
        """Return the wire mapping in field order."""
        data = {}
        if self.generated_on is not None:
            data[GENERATED_ON] = format_timestamp(self.generated_on)
        if self.version is not None:
            data[VERSION] = self.version
        data.update(self.extras)
        if self.expiry_date is not None:
            data[EXPIRY_DATE] = format_timestamp(self.expiry_date)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LicencePayload":
        """Rebuild a payload from a decoded wire mapping.

        ``generatedOn`` and ``version`` may be absent. A timestamp field whose
        value is not ISO-8601 leaves the typed attribute as None and keeps the
        raw value in ``extras``.
        """
        extras = {k: v for k, v in data.items() if k not in RESERVED_FIELDS}
        generated_on = _optional_timestamp(data, GENERATED_ON, extras)
        expiry_date = _optional_timestamp(data, EXPIRY_DATE, extras)
        return cls(
            generated_on=generated_on,
            version=data.get(VERSION),
            extras=extras,
            expiry_date=expiry_date,
        )


def _optional_timestamp(
    data: Mapping[str, Any], name: str, extras: dict
) -> Optional[datetime]:
    raw = data.get(name)
    if raw is None:
        return None
    try:
        return parse_timestamp(raw)
    except ValueError:
        logger.debug("Unparseable %s in payload: %r", name, raw)
        extras[name] = raw
        return None
