"""Liveness heartbeat file: written by a running app, read by a checker.

The file holds either ``ALIVE: <ISO-8601 timestamp>`` or text starting with
``CRASHED`` followed by diagnostics. A process counts as alive only while the
ALIVE timestamp is within ``max_age_seconds`` of now.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from config.settings import HEARTBEAT_MAX_AGE_SECONDS
from licence.payload import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

ALIVE_PATTERN = re.compile(r"^ALIVE: (.+)$", re.MULTILINE)
CRASHED_MARKER = "CRASHED"


class HeartbeatState(str, Enum):
    """Liveness verdict for a heartbeat file."""

    ALIVE = "alive"
    DEAD = "dead"
    CRASHED = "crashed"
    MISSING = "missing"


@dataclass
class HeartbeatStatus:
    """Result of checking a heartbeat file."""

    state: HeartbeatState
    path: Path
    last_seen: Optional[datetime] = None
    age_seconds: Optional[float] = None
    detail: str = ""

    @property
    def is_alive(self) -> bool:
        return self.state is HeartbeatState.ALIVE


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def write_alive(path: Union[str, Path], now: Optional[datetime] = None) -> Path:
    """Overwrite the heartbeat file with an ALIVE line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"ALIVE: {format_timestamp(_now(now))}")
    return path


def write_crashed(
    path: Union[str, Path], detail: str = "", now: Optional[datetime] = None
) -> Path:
    """Overwrite the heartbeat file with a CRASHED report."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = f"{CRASHED_MARKER}: {format_timestamp(_now(now))}"
    if detail:
        content += f"\n{detail}"
    path.write_text(content)
    return path


def check_heartbeat(
    path: Union[str, Path],
    now: Optional[datetime] = None,
    max_age_seconds: float = HEARTBEAT_MAX_AGE_SECONDS,
) -> HeartbeatStatus:
    """Decide whether the process behind a heartbeat file is alive.

    Args:
        path: Heartbeat file to read.
        now: Reference time; defaults to current UTC time.
        max_age_seconds: Oldest ALIVE timestamp still considered live.

    Returns:
        HeartbeatStatus; read failures are reported as DEAD, not raised.
    """
    path = Path(path)
    if not path.exists():
        return HeartbeatStatus(HeartbeatState.MISSING, path, detail="no heartbeat file")

    try:
        content = path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read heartbeat file %s: %s", path, exc)
        return HeartbeatStatus(HeartbeatState.DEAD, path, detail=str(exc))

    if content.startswith(CRASHED_MARKER):
        return HeartbeatStatus(HeartbeatState.CRASHED, path, detail=content)

    match = ALIVE_PATTERN.search(content)
    if not match:
        return HeartbeatStatus(HeartbeatState.DEAD, path, detail="no ALIVE line")

    try:
        last_seen = parse_timestamp(match.group(1))
    except ValueError:
        return HeartbeatStatus(
            HeartbeatState.DEAD, path,
            detail=f"unparseable timestamp: {match.group(1)!r}",
        )

    age = (_now(now) - last_seen).total_seconds()
    # A timestamp ahead of now is only trusted within the same window
    state = HeartbeatState.ALIVE if abs(age) <= max_age_seconds else HeartbeatState.DEAD
    return HeartbeatStatus(state, path, last_seen=last_seen, age_seconds=age)
