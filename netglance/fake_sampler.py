"""Simulated network sampler for development and testing."""

import random
from datetime import datetime

from netglance.models import NetworkSnapshot, classify_status


class FakeSampler:
    """Generates plausible network snapshots without touching the network."""

    def __init__(self, seed: int | None = None):
        """Initialize with optional random seed for deterministic behavior."""
        # Isolated random instance, workers may call from pool threads
        self._random = random.Random(seed)

        self.base_latency = 25.0
        self.latency_variance = 5.0
        self.spike_probability = 0.05
        self.spike_multiplier = 3.0
        self.loss_probability = 0.02
        self.base_download_kbps = 850.0
        self.base_upload_kbps = 120.0

    def sample(self) -> NetworkSnapshot:
        timestamp = datetime.now()

        if self._random.random() < self.loss_probability:
            latency = None
            packet_loss_pct = 10.0
        else:
            if self._random.random() < self.spike_probability:
                latency = self.base_latency * self.spike_multiplier
            else:
                latency = self.base_latency
            latency = max(1, int(round(latency + self._random.gauss(0, self.latency_variance))))
            packet_loss_pct = 0.0

        download = max(0.0, self._random.gauss(self.base_download_kbps, self.base_download_kbps / 4))
        upload = max(0.0, self._random.gauss(self.base_upload_kbps, self.base_upload_kbps / 4))

        return NetworkSnapshot(
            latency_ms=latency,
            download_kbps=round(download, 2),
            upload_kbps=round(upload, 2),
            packet_loss_pct=packet_loss_pct,
            status=classify_status(latency, packet_loss_pct),
            ts=timestamp,
        )
