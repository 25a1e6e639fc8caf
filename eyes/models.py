"""
Result types passed from the connect probes to the reporters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ProbeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    TIMED_OUT = "timed_out"
    ERROR = "error"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single connect attempt against one port"""
    port: int
    status: ProbeStatus
    cause: Optional[str] = None
    elapsed: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.status is ProbeStatus.OPEN

    @property
    def label(self) -> str:
        return self.status.value.replace('_', ' ')


@dataclass
class ScanSummary:
    """Counts per status, filled in by a reporter as outcomes arrive"""
    counts: Dict[ProbeStatus, int] = field(
        default_factory=lambda: {status: 0 for status in ProbeStatus}
    )
    duration: float = 0.0

    def record(self, outcome: ProbeOutcome):
        self.counts[outcome.status] += 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def open_ports(self) -> int:
        return self.counts[ProbeStatus.OPEN]

    def as_dict(self) -> Dict[str, float]:
        data = {status.value: count for status, count in self.counts.items()}
        data["total"] = self.total
        data["duration"] = round(self.duration, 3)
        return data
