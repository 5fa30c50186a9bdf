"""Tests for licence key generation."""

import re
import unittest
from datetime import datetime, timedelta, timezone

from licence import codec
from licence.checksum import compute_checksum
from licence.errors import InvalidOptionError, InvalidTypeError
from licence.generator import LicenceGenerator, normalize_type
from licence.templates.defaults import LicenceType

FIXED_NOW = datetime(2026, 10, 18, 9, 15, 2, 123000, tzinfo=timezone.utc)
KEY_PATTERN = re.compile(r"^MB-(PREMIUM|TRIAL)-[0-9A-F]{1,8}-[A-Za-z0-9_-]+$")


def _payload_of(key):
    return codec.decode(key.split("-", 3)[3])


class TestLicenceGenerator(unittest.TestCase):
    """Test LicenceGenerator methods."""

    def setUp(self):
        self.secret = "test-secret-key"
        self.generator = LicenceGenerator(self.secret, now=lambda: FIXED_NOW)

    def test_generate_premium(self):
        key = self.generator.generate("PREMIUM")
        self.assertRegex(key, KEY_PATTERN)
        self.assertTrue(key.startswith("MB-PREMIUM-"))
        data = _payload_of(key)
        self.assertEqual(data["generatedOn"], "2026-10-18T09:15:02.123Z")
        self.assertEqual(data["version"], "1.0.0")
        self.assertNotIn("expiryDate", data)

    def test_checksum_covers_type_and_data(self):
        key = self.generator.generate("PREMIUM", {"owner": "ACME"})
        _, licence_type, checksum, data = key.split("-", 3)
        self.assertEqual(checksum, compute_checksum(self.secret, licence_type + data))

    def test_generate_trial_default_days(self):
        data = _payload_of(self.generator.generate("TRIAL"))
        self.assertEqual(data["expiryDate"], "2026-11-01T09:15:02.123Z")

    def test_generate_trial_custom_days(self):
        key = self.generator.generate("TRIAL", {"trialDays": 30})
        data = _payload_of(key)
        generated = datetime.fromisoformat(data["generatedOn"].replace("Z", "+00:00"))
        expiry = datetime.fromisoformat(data["expiryDate"].replace("Z", "+00:00"))
        self.assertEqual(expiry - generated, timedelta(days=30))
        self.assertEqual(data["trialDays"], 30)

    def test_generate_trial_shorthand(self):
        data = _payload_of(self.generator.generate_trial(7, owner="Trial User"))
        self.assertEqual(data["trialDays"], 7)
        self.assertEqual(data["owner"], "Trial User")
        self.assertEqual(data["expiryDate"], "2026-10-25T09:15:02.123Z")

    def test_options_merged_in_order(self):
        data = _payload_of(self.generator.generate("PREMIUM", {"owner": "ACME", "seats": 5}))
        self.assertEqual(list(data), ["generatedOn", "version", "owner", "seats"])

    def test_reserved_options_ignored(self):
        with self.assertLogs("licence.generator", level="WARNING"):
            key = self.generator.generate(
                "PREMIUM", {"generatedOn": "1999-01-01T00:00:00.000Z", "version": "9"}
            )
        data = _payload_of(key)
        self.assertEqual(data["generatedOn"], "2026-10-18T09:15:02.123Z")
        self.assertEqual(data["version"], "1.0.0")

    def test_payload_superset_excludes_reserved_names(self):
        options = {"owner": "ACME", "expiryDate": "2099-01-01T00:00:00.000Z"}
        with self.assertLogs("licence.generator", level="WARNING"):
            data = _payload_of(self.generator.generate("PREMIUM", options))
        # Every non-reserved option is carried; reserved names keep stamped values
        self.assertEqual(data["owner"], "ACME")
        self.assertNotIn("expiryDate", data)
        self.assertFalse(set(options.items()) <= set(data.items()))

    def test_options_not_mutated(self):
        options = {"trialDays": 30}
        self.generator.generate("TRIAL", options)
        self.assertEqual(options, {"trialDays": 30})

    def test_lowercase_type_accepted(self):
        self.assertTrue(self.generator.generate("trial").startswith("MB-TRIAL-"))

    def test_enum_type_accepted(self):
        key = self.generator.generate(LicenceType.PREMIUM)
        self.assertTrue(key.startswith("MB-PREMIUM-"))

    def test_invalid_type_raises(self):
        for licence_type in ("FREE", "ENTERPRISE", "", None):
            with self.subTest(licence_type=licence_type):
                with self.assertRaises(InvalidTypeError):
                    self.generator.generate(licence_type)

    def test_invalid_type_is_value_error(self):
        with self.assertRaises(ValueError):
            normalize_type("bogus")

    def test_invalid_trial_days(self):
        for days in (-1, "30", 1.5, True):
            with self.subTest(days=days):
                with self.assertRaises(InvalidOptionError):
                    self.generator.generate("TRIAL", {"trialDays": days})

    def test_key_format_default_clock(self):
        key = LicenceGenerator(self.secret).generate("PREMIUM")
        self.assertRegex(key, KEY_PATTERN)


if __name__ == "__main__":
    unittest.main()
