"""Project-wide settings and defaults."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # Load .env file if present

# Base paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"

# Licence key format
LICENCE_SECRET = os.environ.get("LICENCE_SECRET", "moodbooms_license_v1")
KEY_PREFIX = "MB"
KEY_SEPARATOR = "-"
FORMAT_VERSION = "1.0.0"

# Licence defaults
DEFAULT_TRIAL_DAYS = 14
DEFAULT_BATCH_COUNT = 5

# Heartbeat monitoring
HEARTBEAT_PATH = Path(
    os.environ.get("HEARTBEAT_PATH", str(LOGS_DIR / "menu-heartbeat.txt"))
)
HEARTBEAT_MAX_AGE_SECONDS = float(os.environ.get("HEARTBEAT_MAX_AGE_SECONDS", "3"))

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
