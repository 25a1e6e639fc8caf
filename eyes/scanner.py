import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, List, Optional

from .config import ScanConfig
from .models import ProbeOutcome, ProbeStatus, ScanSummary
from .probe import connect_probe
from .utils import ConcurrencyLimiter

logger = logging.getLogger(__name__)

Probe = Callable[[str, int, float], Awaitable[ProbeOutcome]]

# Marks the end of the outcome channel
_DONE = object()


class ScanSession:
    """
    Runtime state for one pass over a ScanConfig: the work queue, the
    worker tasks and the outcome channel feeding the reporter.
    """
    def __init__(self, config: ScanConfig, limiter: ConcurrencyLimiter, probe: Probe):
        self.config = config
        self.limiter = limiter
        self.probe = probe
        self.work: asyncio.Queue = asyncio.Queue()
        self.channel: asyncio.Queue = asyncio.Queue()
        self.workers: List[asyncio.Task] = []
        for port in config.ports:
            self.work.put_nowait(port)

    async def _probe_port(self, port: int) -> ProbeOutcome:
        try:
            return await self.probe(self.config.target_ip, port, self.config.timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # A broken probe must not take its siblings down with it
            logger.exception("Probe for port %d raised", port)
            return ProbeOutcome(port, ProbeStatus.ERROR, cause=str(e) or type(e).__name__)

    async def _worker(self):
        while True:
            try:
                port = self.work.get_nowait()
            except asyncio.QueueEmpty:
                return

            async with self.limiter:
                outcome = await self._probe_port(port)
            self.channel.put_nowait(outcome)

    async def _supervise(self):
        try:
            await asyncio.gather(*self.workers)
        finally:
            self.channel.put_nowait(_DONE)

    async def _shutdown(self, supervisor: asyncio.Task):
        for task in self.workers:
            task.cancel()
        supervisor.cancel()
        await asyncio.gather(*self.workers, supervisor, return_exceptions=True)

    async def stream(self) -> AsyncIterator[ProbeOutcome]:
        """
        Yields one outcome per port in completion order.
        Closing the generator (or cancelling its consumer) cancels every
        probe still in flight before returning.
        """
        worker_count = min(self.config.concurrency, len(self.config.ports))
        self.workers = [asyncio.create_task(self._worker()) for _ in range(worker_count)]
        supervisor = asyncio.create_task(self._supervise())
        logger.debug("Started %d workers for %d ports", worker_count, len(self.config.ports))

        try:
            while True:
                item = await self.channel.get()
                if item is _DONE:
                    break
                yield item
        finally:
            await self._shutdown(supervisor)


class PortScanner:
    """
    Drives connect probes over the configured port set, never letting more
    than the limiter allows run at once.
    """
    def __init__(self, config: ScanConfig, limiter: Optional[ConcurrencyLimiter] = None,
                 probe: Probe = connect_probe):
        self.config = config
        # Scans that share a limiter share one cap; otherwise each gets its own
        self.limiter = limiter or ConcurrencyLimiter(config.concurrency)
        self.probe = probe

    def session(self) -> ScanSession:
        return ScanSession(self.config, self.limiter, self.probe)

    async def run(self, reporter) -> ScanSummary:
        """
        Runs a full scan, feeding every outcome to the reporter.
        """
        reporter.display_start(self.config)
        outcomes = self.session().stream()
        try:
            summary = await reporter.drain(outcomes)
        finally:
            await outcomes.aclose()
        logger.debug("Scan of %s finished in %.2fs (peak in flight: %d)",
                     self.config.target_ip, summary.duration, self.limiter.peak)
        return summary
