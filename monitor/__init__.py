"""Process liveness monitoring via heartbeat files."""

from monitor.heartbeat import (
    HeartbeatState,
    HeartbeatStatus,
    check_heartbeat,
    write_alive,
    write_crashed,
)

__all__ = [
    "HeartbeatState",
    "HeartbeatStatus",
    "check_heartbeat",
    "write_alive",
    "write_crashed",
]
