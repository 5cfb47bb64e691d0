"""
Command-layer types: result status, command result, rejected-command log entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CommandStatus(Enum):
    """Outcome of a command issued against the session."""

    OK = "ok"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CommandResult:
    """What a command hands back to the caller. Immutable."""

    status: CommandStatus
    message: str = ""
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.status == CommandStatus.OK


@dataclass
class RejectedCommandLog:
    """One entry for a rejected command: which command, why, and with what input."""

    command: str
    reason: str
    timestamp: datetime
    arguments: dict[str, Any] = field(default_factory=dict)
