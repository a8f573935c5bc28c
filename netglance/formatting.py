"""Display strings for snapshots."""

from netglance.models import UNKNOWN, GeoWeatherResult, NetworkSnapshot, NetworkStatus

DASH = "--"

STATUS_LABELS = {
    NetworkStatus.GOOD: "Good",
    NetworkStatus.FAIR: "Fair",
    NetworkStatus.POOR: "Poor",
}

STATUS_COLORS = {
    NetworkStatus.GOOD: "#4ade80",
    NetworkStatus.FAIR: "#facc15",
    NetworkStatus.POOR: "#f87171",
}


def format_speed(kbps: float) -> str:
    """Format a KB/s rate, switching to B/s or MB/s where it reads better.

    Examples:
        >>> format_speed(0.5)
        '512.00 B/s'
        >>> format_speed(2048)
        '2.00 MB/s'
    """
    if kbps < 1:
        return f"{kbps * 1024:.2f} B/s"
    if kbps < 1024:
        return f"{kbps:.2f} KB/s"
    return f"{kbps / 1024:.2f} MB/s"


def format_latency(snapshot: NetworkSnapshot) -> str:
    if snapshot.latency_ms is None:
        return f"{DASH} ms"
    return f"{snapshot.latency_ms} ms"


def format_packet_loss(snapshot: NetworkSnapshot) -> str:
    return f"{snapshot.packet_loss_pct:.1f} %"


def format_ip(result: GeoWeatherResult) -> str:
    ip = result.location.ip
    return DASH if ip == UNKNOWN else ip


def format_location(result: GeoWeatherResult) -> str:
    """City line: "(default)" marks a fallback city, else the country is appended."""
    name = result.weather.resolved_location_name
    if result.is_default_location:
        return f"{name} (default)"
    country = result.location.country
    if country and country != UNKNOWN:
        return f"{name}, {country}"
    return name
