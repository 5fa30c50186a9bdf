"""High-level licence key operations: generate, validate, batch and status."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Union

from config.settings import DEFAULT_BATCH_COUNT, DEFAULT_TRIAL_DAYS, LICENCE_SECRET
from licence.errors import FAILURE_REASONS, FailureKind
from licence.generator import LicenceGenerator
from licence.payload import TRIAL_DAYS
from licence.templates.defaults import FEATURES, LicenceType
from licence.validator import LicenceValidator, ValidationResult, mask_key

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Keys produced by a batch run."""

    premium: list[str] = field(default_factory=list)
    trial: list[str] = field(default_factory=list)
    trial_days: int = DEFAULT_TRIAL_DAYS

    @property
    def keys(self) -> list[str]:
        return self.premium + self.trial


@dataclass
class LicenceStatus:
    """Evaluated state of a licence key at a point in time."""

    is_valid: bool
    licence_type: Optional[str] = None
    features: tuple = ()
    expiry_date: Optional[datetime] = None
    trial_days_remaining: int = 0
    failure: Optional[FailureKind] = None

    @property
    def reason(self) -> Optional[str]:
        if self.failure is None:
            return None
        return FAILURE_REASONS[self.failure]

    @property
    def is_expired(self) -> bool:
        return self.failure is FailureKind.EXPIRED


def features_for(licence_type: Union[str, LicenceType]) -> tuple:
    """Return the features a licence type unlocks (none for unknown types)."""
    name = licence_type.value if isinstance(licence_type, LicenceType) else str(licence_type)
    try:
        return FEATURES[LicenceType(name.upper())]
    except ValueError:
        return ()


class LicenceKeyService:
    """Issue and check licence keys with a single shared secret."""

    def __init__(
        self,
        secret: str = LICENCE_SECRET,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            secret: Secret for computing/verifying key checksums.
            now: Clock returning an aware datetime; defaults to UTC now.
        """
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._generator = LicenceGenerator(secret, now=self._now)
        self._validator = LicenceValidator(secret)

    @property
    def generator(self) -> LicenceGenerator:
        return self._generator

    @property
    def validator(self) -> LicenceValidator:
        return self._validator

    def generate(
        self,
        licence_type: Union[str, LicenceType],
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        return self._generator.generate(licence_type, options)

    def generate_trial(self, trial_days: int = DEFAULT_TRIAL_DAYS, **extras) -> str:
        return self._generator.generate_trial(trial_days, **extras)

    def validate(self, licence_key) -> ValidationResult:
        return self._validator.validate(licence_key)

    def batch(self, count: int = DEFAULT_BATCH_COUNT) -> BatchResult:
        """Generate ``ceil(count/2)`` premium and ``floor(count/2)`` trial keys.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"Batch count must not be negative, got {count}")

        result = BatchResult()
        for _ in range(math.ceil(count / 2)):
            result.premium.append(self.generate(LicenceType.PREMIUM))
        for _ in range(count // 2):
            result.trial.append(
                self.generate(LicenceType.TRIAL, {TRIAL_DAYS: result.trial_days})
            )
        logger.info(
            "Generated batch of %d premium and %d trial keys",
            len(result.premium), len(result.trial),
        )
        return result

    def status(self, licence_key, now: Optional[datetime] = None) -> LicenceStatus:
        """Validate a key and evaluate its features and expiry.

        Args:
            licence_key: Key to evaluate.
            now: Reference time; defaults to the service clock.

        Returns:
            LicenceStatus; expired or unknown-type keys are reported invalid.
        """
        result = self.validate(licence_key)
        if not result.is_valid:
            return LicenceStatus(is_valid=False, failure=result.failure)

        try:
            licence_type = LicenceType(result.licence_type.upper())
        except ValueError:
            logger.warning("Key %s has an unknown licence type", mask_key(licence_key))
            return LicenceStatus(
                is_valid=False,
                licence_type=result.licence_type,
                failure=FailureKind.UNKNOWN_TYPE,
            )

        now = now or self._now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        expiry = result.payload.expiry_date
        if expiry is not None and now > expiry:
            return LicenceStatus(
                is_valid=False,
                licence_type=result.licence_type,
                expiry_date=expiry,
                failure=FailureKind.EXPIRED,
            )

        remaining = 0
        if licence_type is LicenceType.TRIAL and expiry is not None:
            remaining = max(0, math.ceil((expiry - now) / timedelta(days=1)))

        return LicenceStatus(
            is_valid=True,
            licence_type=result.licence_type,
            features=features_for(licence_type),
            expiry_date=expiry,
            trial_days_remaining=remaining,
        )
