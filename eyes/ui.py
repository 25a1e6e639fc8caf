import json
import time
from typing import AsyncIterator, Optional

from rich.console import Console

from .config import ScanConfig
from .models import ProbeOutcome, ProbeStatus, ScanSummary

console = Console()

FINISHED_MARKER = "[eyes] Finished scan"


class ScanReporter:
    """
    Prints one line per reported outcome, in the order they arrive.
    Non-verbose mode only shows open ports and errors.
    """
    def __init__(self, verbose: bool = False, output: Optional[Console] = None):
        self.verbose = verbose
        self.console = output or console

    def _line(self, text: str):
        # Result lines are plain text; "[eyes]" must not be read as rich markup
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def display_start(self, config: ScanConfig):
        if not self.verbose:
            return
        self._line(f"[eyes] Scanning {len(config.ports)} ports on {config.target_ip}")
        self._line(f"[eyes] Concurrency: {config.concurrency}")
        self._line(f"[eyes] Timeout: {config.timeout:g}")

    def format(self, outcome: ProbeOutcome) -> Optional[str]:
        """Returns the line for an outcome, or None if it is suppressed."""
        if outcome.status is ProbeStatus.ERROR:
            return f"{outcome.port}: error ({outcome.cause})"
        if outcome.is_open or self.verbose:
            return f"{outcome.port}: {outcome.label}"
        return None

    def report(self, outcome: ProbeOutcome):
        line = self.format(outcome)
        if line is not None:
            self._line(line)

    def display_finished(self, summary: ScanSummary):
        self._line(FINISHED_MARKER)

    async def drain(self, outcomes: AsyncIterator[ProbeOutcome]) -> ScanSummary:
        summary = ScanSummary()
        start = time.monotonic()
        async for outcome in outcomes:
            summary.record(outcome)
            self.report(outcome)
        summary.duration = time.monotonic() - start
        self.display_finished(summary)
        return summary


class JsonReporter(ScanReporter):
    """
    Emits one JSON object per outcome, then a summary object.
    Every outcome is written regardless of verbosity.
    """
    def display_start(self, config: ScanConfig):
        self._line(json.dumps({
            "event": "started",
            "target": config.target,
            "target_ip": config.target_ip,
            "ports": len(config.ports),
            "concurrency": config.concurrency,
            "timeout": config.timeout,
        }))

    def format(self, outcome: ProbeOutcome) -> Optional[str]:
        return json.dumps({
            "port": outcome.port,
            "status": outcome.status.value,
            "cause": outcome.cause,
            "elapsed": round(outcome.elapsed, 4),
        })

    def display_finished(self, summary: ScanSummary):
        self._line(json.dumps({"event": "finished", **summary.as_dict()}))
