"""Recoverable problems recorded during resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Severity(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    HINT = "HINT"


@dataclass(frozen=True)
class Issue:
    source: str
    message: str
    severity: Severity = Severity.ERROR
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )
