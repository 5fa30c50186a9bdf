"""Licence types and the features each one unlocks."""

from enum import Enum


class LicenceType(str, Enum):
    """Licence types carried in the type segment of a key."""

    FREE = "FREE"
    PREMIUM = "PREMIUM"
    TRIAL = "TRIAL"


# Types the generator will mint; FREE is implied by having no key at all
GENERATABLE_TYPES = (LicenceType.PREMIUM, LicenceType.TRIAL)

ADVANCED_ANALYTICS = "advanced_analytics"
EXPORT_OPTIONS = "export_options"
CUSTOM_THEMES = "custom_themes"
CLOUD_SYNC = "cloud_sync"
UNLIMITED_HISTORY = "unlimited_history"

PREMIUM_FEATURES = (
    ADVANCED_ANALYTICS,
    EXPORT_OPTIONS,
    CUSTOM_THEMES,
    CLOUD_SYNC,
    UNLIMITED_HISTORY,
)

TRIAL_FEATURES = (
    ADVANCED_ANALYTICS,
    EXPORT_OPTIONS,
)

FEATURES = {
    LicenceType.FREE: (),
    LicenceType.PREMIUM: PREMIUM_FEATURES,
    LicenceType.TRIAL: TRIAL_FEATURES,
}
