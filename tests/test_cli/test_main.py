"""Tests for the command-line entry point."""

import io
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime, timedelta, timezone
from pathlib import Path

from main import main
from licence.service import LicenceKeyService
from monitor.heartbeat import write_alive, write_crashed

SECRET = "cli-secret"
KEY_RE = re.compile(r"MB-(PREMIUM|TRIAL)-[0-9A-F]{1,8}-[A-Za-z0-9_-]+")


def run(*argv):
    """Run the CLI and return (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(["--secret", SECRET, *argv])
    return code, out.getvalue(), err.getvalue()


class TestGenerateCommand(unittest.TestCase):

    def test_default_is_premium(self):
        code, out, _ = run("generate")
        self.assertEqual(code, 0)
        self.assertIn("Type: PREMIUM", out)
        key = KEY_RE.search(out).group(0)
        self.assertTrue(LicenceKeyService(SECRET).validate(key).is_valid)

    def test_trial_with_days(self):
        code, out, _ = run("gen", "trial", "30")
        self.assertEqual(code, 0)
        self.assertIn("Type: TRIAL", out)
        self.assertIn("Trial Days: 30", out)
        key = KEY_RE.search(out).group(0)
        result = LicenceKeyService(SECRET).validate(key)
        self.assertEqual(result.payload.trial_days, 30)

    def test_trial_zero_days_uses_default(self):
        code, out, _ = run("generate", "TRIAL", "0")
        self.assertEqual(code, 0)
        self.assertIn("Trial Days: 14", out)
        key = KEY_RE.search(out).group(0)
        payload = LicenceKeyService(SECRET).validate(key).payload
        self.assertEqual(payload.trial_days, 14)
        self.assertEqual(payload.expiry_date - payload.generated_on, timedelta(days=14))

    def test_invalid_type(self):
        code, out, err = run("generate", "FREE")
        self.assertEqual(code, 1)
        self.assertIn("Invalid license type", err)
        self.assertNotRegex(out, KEY_RE)


class TestValidateCommand(unittest.TestCase):

    def test_valid_key(self):
        key = LicenceKeyService(SECRET).generate("PREMIUM", {"owner": "ACME"})
        code, out, _ = run("validate", key)
        self.assertEqual(code, 0)
        self.assertIn("Valid: true", out)
        self.assertIn("Type: premium", out)
        self.assertIn('"owner": "ACME"', out)

    def test_invalid_key(self):
        code, out, _ = run("val", "XX-PREMIUM-AAAAAAAA-abc")
        self.assertEqual(code, 1)
        self.assertIn("Valid: false", out)
        self.assertIn("Reason: Invalid format", out)

    def test_checksum_mismatch(self):
        key = LicenceKeyService("other-secret").generate("PREMIUM")
        code, out, _ = run("validate", key)
        self.assertEqual(code, 1)
        self.assertIn("Reason: Invalid checksum", out)


class TestStatusCommand(unittest.TestCase):

    def test_trial_status(self):
        key = LicenceKeyService(SECRET).generate("TRIAL", {"trialDays": 14})
        code, out, _ = run("status", key)
        self.assertEqual(code, 0)
        self.assertIn("VALID - type: trial", out)
        self.assertIn("advanced_analytics", out)
        self.assertRegex(out, r"Trial days remaining: 1[34]")

    def test_expired(self):
        past = datetime.now(timezone.utc) - timedelta(days=30)
        key = LicenceKeyService(SECRET, now=lambda: past).generate("TRIAL")
        code, out, _ = run("status", key)
        self.assertEqual(code, 1)
        self.assertIn("License has expired", out)


class TestBatchCommand(unittest.TestCase):

    def test_batch_count(self):
        code, out, _ = run("batch", "4")
        self.assertEqual(code, 0)
        keys = [m.group(0) for m in KEY_RE.finditer(out)]
        self.assertEqual(len(keys), 4)
        self.assertEqual(sum(k.startswith("MB-PREMIUM-") for k in keys), 2)
        self.assertEqual(sum(k.startswith("MB-TRIAL-") for k in keys), 2)
        self.assertIn("Trial Keys (14 days):", out)

    def test_default_batch(self):
        _, out, _ = run("batch")
        self.assertEqual(len(KEY_RE.findall(out)), 5)

    def test_zero_batch_uses_default(self):
        code, out, _ = run("batch", "0")
        self.assertEqual(code, 0)
        self.assertIn("Generating 5 test license keys:", out)
        self.assertEqual(len(KEY_RE.findall(out)), 5)

    def test_negative_batch(self):
        code, _, err = run("batch", "-3")
        self.assertEqual(code, 1)
        self.assertIn("negative", err)


class TestHeartbeatCommand(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "heartbeat.txt"

    def tearDown(self):
        self._tmp.cleanup()

    def test_running(self):
        write_alive(self.path)
        code, out, _ = run("heartbeat", str(self.path), "--max-age", "60")
        self.assertEqual(code, 0)
        self.assertIn("RUNNING", out)

    def test_not_running(self):
        code, out, _ = run("heartbeat", str(self.path))
        self.assertEqual(code, 1)
        self.assertIn("NOT RUNNING", out)

    def test_crashed(self):
        write_crashed(self.path, "Error: boom")
        code, out, _ = run("heartbeat", str(self.path))
        self.assertEqual(code, 1)
        self.assertIn("CRASHED", out)

    def test_dead(self):
        write_alive(self.path, now=datetime.now(timezone.utc) - timedelta(minutes=5))
        code, out, _ = run("heartbeat", str(self.path))
        self.assertEqual(code, 1)
        self.assertIn("DEAD (no heartbeat for", out)


class TestUsage(unittest.TestCase):

    def test_no_arguments_prints_help(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main([])
        self.assertEqual(code, 0)
        self.assertIn("generate", out.getvalue())
        self.assertIn("batch", out.getvalue())


if __name__ == "__main__":
    unittest.main()
