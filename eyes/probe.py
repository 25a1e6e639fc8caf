import asyncio
import logging
import time

from .models import ProbeOutcome, ProbeStatus

logger = logging.getLogger(__name__)


async def connect_probe(address: str, port: int, timeout: float) -> ProbeOutcome:
    """
    Performs a single TCP connect attempt against address:port.

    Open if the handshake completes within the timeout, closed on an
    explicit refusal, timed out if neither happens before the deadline,
    error for any other socket level failure. No retries.
    """
    start = time.monotonic()
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(address, port),
            timeout=timeout
        )
    except ConnectionRefusedError:
        logger.debug("%s:%d refused", address, port)
        return ProbeOutcome(port, ProbeStatus.CLOSED, elapsed=time.monotonic() - start)
    except (asyncio.TimeoutError, TimeoutError):
        # TimeoutError also covers a kernel ETIMEDOUT before our deadline
        logger.debug("%s:%d timed out after %.2fs", address, port, timeout)
        return ProbeOutcome(port, ProbeStatus.TIMED_OUT, elapsed=time.monotonic() - start)
    except OSError as e:
        logger.debug("%s:%d failed: %s", address, port, e)
        return ProbeOutcome(
            port, ProbeStatus.ERROR,
            cause=str(e) or type(e).__name__,
            elapsed=time.monotonic() - start
        )

    elapsed = time.monotonic() - start
    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        # Peer reset during close; the port still accepted us
        pass

    logger.debug("%s:%d open (%.3fs)", address, port, elapsed)
    return ProbeOutcome(port, ProbeStatus.OPEN, elapsed=elapsed)
