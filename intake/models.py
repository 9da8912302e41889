"""Data models for scan inputs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union


NarrativeInput = Union[str, Sequence[str], None]


class ScanStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"
    NOT_FOUND = "not_found"


@dataclass(slots=True)
class ScanRecord:
    username: str
    status: ScanStatus = ScanStatus.DONE
    result: Optional[Mapping[str, Any]] = None
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    not_found: bool = False

    @property
    def completed(self) -> bool:
        return self.status == ScanStatus.DONE and self.result is not None


@dataclass(slots=True, frozen=True)
class ScanSources:
    """The three per-entity sources handed to the reconciler."""

    username: str
    structured: Optional[Mapping[str, Any]] = None
    side_row: Optional[Mapping[str, Any]] = None
    narrative: NarrativeInput = None
