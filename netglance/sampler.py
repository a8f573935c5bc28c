"""Metric sampler abstraction and the real ping + counters implementation."""

import logging
from collections import deque
from datetime import datetime
from typing import Protocol

from netglance.models import NetworkSnapshot, classify_status
from netglance.ping import PingProbe
from netglance.throughput import ThroughputMeter

logger = logging.getLogger(__name__)


class MetricSampler(Protocol):
    """Protocol defining the interface for network metric samplers."""

    def sample(self) -> NetworkSnapshot:
        """Take one fresh measurement. May raise ProbeError."""
        ...


class PingSampler:
    """Samples latency/loss with one ping per call and throughput from counters.

    Latency and packet loss are averaged over the last ``window`` pings so a
    single lost packet does not blank the display. The snapshot timestamp
    belongs to this sampler only.
    """

    def __init__(
        self,
        probe: PingProbe | None = None,
        meter: ThroughputMeter | None = None,
        window: int = 10,
    ):
        if window <= 0:
            raise ValueError("window must be positive")
        self.probe = probe if probe is not None else PingProbe()
        self.meter = meter if meter is not None else ThroughputMeter()
        self._latencies = deque(maxlen=window)  # latency of each reply, None when lost
        self.window = window

    def sample(self) -> NetworkSnapshot:
        timestamp = datetime.now()

        # ProbeError propagates; the window is left untouched for this tick
        latency = self.probe.probe()
        self._latencies.append(latency)

        download_kbps, upload_kbps = self.meter.measure()

        replies = [value for value in self._latencies if value is not None]
        lost = len(self._latencies) - len(replies)
        packet_loss_pct = lost / len(self._latencies) * 100.0
        avg_latency = int(round(sum(replies) / len(replies))) if replies else None

        snapshot = NetworkSnapshot(
            latency_ms=avg_latency,
            download_kbps=download_kbps,
            upload_kbps=upload_kbps,
            packet_loss_pct=packet_loss_pct,
            status=classify_status(avg_latency, packet_loss_pct),
            ts=timestamp,
        )
        logger.debug(
            "Sample: latency=%s, loss=%.1f%%, status=%s",
            avg_latency,
            packet_loss_pct,
            snapshot.status.value,
        )
        return snapshot
