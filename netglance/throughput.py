"""Download/upload rate from interface byte counters."""

import logging
import time

import psutil

logger = logging.getLogger(__name__)

MAX_KBPS = 102400.0  # 100 MB/s, anything above is a counter glitch


def _psutil_counters() -> tuple[int, int]:
    counters = psutil.net_io_counters()
    return counters.bytes_recv, counters.bytes_sent


class ThroughputMeter:
    """Turns cumulative (received, sent) byte counters into KB/s rates.

    The first call only primes the counters and reports 0. Calls closer
    together than ``min_elapsed`` seconds return the previous rates. A
    counter that went backwards (adapter reset) is treated as starting
    from zero.
    """

    def __init__(self, counters=None, clock=None, min_elapsed: float = 0.5):
        self._counters = counters or _psutil_counters
        self._clock = clock or time.monotonic
        self.min_elapsed = min_elapsed

        self._last_received = None
        self._last_sent = None
        self._last_time = None
        self._last_rates = (0.0, 0.0)

    def measure(self) -> tuple[float, float]:
        """Return (download_kbps, upload_kbps) since the previous call."""
        received, sent = self._counters()
        now = self._clock()

        if self._last_time is None:
            self._prime(received, sent, now)
            return (0.0, 0.0)

        elapsed = now - self._last_time
        if elapsed < self.min_elapsed:
            return self._last_rates

        delta_received = received - self._last_received if received >= self._last_received else received
        delta_sent = sent - self._last_sent if sent >= self._last_sent else sent

        download = min(delta_received / elapsed / 1024.0, MAX_KBPS)
        upload = min(delta_sent / elapsed / 1024.0, MAX_KBPS)

        self._prime(received, sent, now)
        self._last_rates = (download, upload)

        logger.debug("Throughput: DL=%.2f KB/s, UL=%.2f KB/s over %.2fs", download, upload, elapsed)
        return self._last_rates

    def _prime(self, received: int, sent: int, now: float):
        self._last_received = received
        self._last_sent = sent
        self._last_time = now
