"""Data models for netglance snapshots."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

UNKNOWN = "unknown"


class NetworkStatus(str, Enum):
    """Overall link quality shown next to the metrics."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def classify_status(latency_ms: int | None, packet_loss_pct: float) -> NetworkStatus:
    """Classify link quality from latency and packet loss.

    Unknown latency (no reply in the sample window) is treated as poor.
    """
    if latency_ms is None:
        return NetworkStatus.POOR
    if latency_ms > 100 or packet_loss_pct > 5.0:
        return NetworkStatus.POOR
    if latency_ms > 50 or packet_loss_pct > 2.0:
        return NetworkStatus.FAIR
    return NetworkStatus.GOOD


@dataclass(frozen=True)
class NetworkSnapshot:
    """One network quality sample, superseded by the next one."""

    latency_ms: int | None  # None means unknown
    download_kbps: float
    upload_kbps: float
    packet_loss_pct: float
    status: NetworkStatus
    ts: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.latency_ms is not None and self.latency_ms < 0:
            raise ValueError("latency_ms must be non-negative")
        if self.download_kbps < 0 or self.upload_kbps < 0:
            raise ValueError("throughput must be non-negative")
        if not 0.0 <= self.packet_loss_pct <= 100.0:
            raise ValueError("packet_loss_pct must be within [0, 100]")


@dataclass(frozen=True)
class LocationSnapshot:
    """Best-effort location of the public IP."""

    ip: str = UNKNOWN
    city: str = UNKNOWN
    country: str = UNKNOWN
    region: str = ""
    timezone: str = ""

    @property
    def has_location(self) -> bool:
        return _known(self.city) or bool(self.region)

    @property
    def has_ip(self) -> bool:
        return _known(self.ip)


@dataclass(frozen=True)
class WeatherSnapshot:
    """Weather and local time for the displayed city."""

    temperature: str = "--"
    description: str = "--"
    icon: str = "❓"
    resolved_location_name: str = "--"
    local_time_string: str = "--:--"


@dataclass(frozen=True)
class ProviderAttempt:
    """Diagnostics for one provider tried by the fallback chain."""

    provider: str
    outcome: str  # "resolved", "ip_only" or "unreachable"
    detail: str = ""


@dataclass(frozen=True)
class GeoWeatherResult:
    """Everything published by one geo/weather refresh."""

    location: LocationSnapshot
    weather: WeatherSnapshot
    is_default_location: bool = False
    attempts: tuple[ProviderAttempt, ...] = ()
    ts: datetime = field(default_factory=datetime.now)


def _known(value: str | None) -> bool:
    return bool(value) and value != UNKNOWN
