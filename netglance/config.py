"""Runtime settings for netglance, read from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from netglance.timezones import DEFAULT_TIMEZONE

DEFAULT_LOG_FILE = str(Path.home() / ".netglance" / "netglance.log")

CATCH_ALL = "*"

# country name (as returned by the geo providers) -> (city, timezone)
DEFAULT_LOCATIONS = {
    "China": ("Beijing", "Asia/Shanghai"),
    "中国": ("Beijing", "Asia/Shanghai"),
    CATCH_ALL: ("New York", DEFAULT_TIMEZONE),
}


@dataclass(frozen=True)
class Settings:
    """All tunables in one place.

    Environment Variables:
        NETGLANCE_SAMPLER: "ping" (default) or "fake" for simulated data
        NETGLANCE_PING_TARGET: Host pinged for latency/loss (default: the
            default gateway, or 8.8.8.8 when none is found)
        NETGLANCE_PING_TIMEOUT_MS: Per-ping timeout (default 2000)
        NETGLANCE_NETWORK_INTERVAL_MS: Network sampling period (default 5000)
        NETGLANCE_GEO_INTERVAL_MS: IP/weather refresh period (default 600000)
        NETGLANCE_DEBOUNCE_MS: Quiet window for online events (default 5000)
        NETGLANCE_HTTP_TIMEOUT_S: Per-request HTTP timeout (default 8)
        NETGLANCE_LOG_FILE: Log file path; empty disables the file log
        NETGLANCE_LOG_HEAD_LINES / NETGLANCE_LOG_TAIL_LINES: Lines kept on rotation
        NETGLANCE_LOG_CHECK_EVERY: Appended lines between rotation checks
        NETGLANCE_DEFAULT_CITY / NETGLANCE_DEFAULT_TIMEZONE: Catch-all default location,
            the timezone also being the fallback for unresolvable timezones
    """

    sampler: str = "ping"
    ping_target: str = ""  # empty: detect the default gateway
    ping_timeout_ms: int = 2000
    network_interval_ms: int = 5000
    geo_interval_ms: int = 10 * 60 * 1000
    debounce_ms: int = 5000
    http_timeout_s: float = 8.0
    log_file: str = DEFAULT_LOG_FILE
    log_head_lines: int = 200
    log_tail_lines: int = 200
    log_check_every: int = 100
    default_timezone: str = DEFAULT_TIMEZONE
    default_locations: dict = field(default_factory=lambda: dict(DEFAULT_LOCATIONS))

    def default_location_for(self, country: str) -> tuple[str, str]:
        """Return (city, timezone) used when the real city is unknown."""
        if country in self.default_locations:
            return self.default_locations[country]
        return self.default_locations[CATCH_ALL]


def _int(environ: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables (os.environ by default)."""
    if environ is None:
        environ = os.environ

    defaults = Settings()

    locations = dict(DEFAULT_LOCATIONS)
    default_city = environ.get("NETGLANCE_DEFAULT_CITY", "").strip()
    default_tz = environ.get("NETGLANCE_DEFAULT_TIMEZONE", "").strip()
    if default_city or default_tz:
        city, tz = locations[CATCH_ALL]
        locations[CATCH_ALL] = (default_city or city, default_tz or tz)

    return Settings(
        sampler=environ.get("NETGLANCE_SAMPLER", defaults.sampler).strip().lower() or defaults.sampler,
        ping_target=environ.get("NETGLANCE_PING_TARGET", "").strip(),
        ping_timeout_ms=_int(environ, "NETGLANCE_PING_TIMEOUT_MS", defaults.ping_timeout_ms),
        network_interval_ms=_int(environ, "NETGLANCE_NETWORK_INTERVAL_MS", defaults.network_interval_ms),
        geo_interval_ms=_int(environ, "NETGLANCE_GEO_INTERVAL_MS", defaults.geo_interval_ms),
        debounce_ms=_int(environ, "NETGLANCE_DEBOUNCE_MS", defaults.debounce_ms),
        http_timeout_s=_float(environ, "NETGLANCE_HTTP_TIMEOUT_S", defaults.http_timeout_s),
        log_file=environ.get("NETGLANCE_LOG_FILE", defaults.log_file).strip(),
        log_head_lines=_int(environ, "NETGLANCE_LOG_HEAD_LINES", defaults.log_head_lines, minimum=0),
        log_tail_lines=_int(environ, "NETGLANCE_LOG_TAIL_LINES", defaults.log_tail_lines, minimum=0),
        log_check_every=_int(environ, "NETGLANCE_LOG_CHECK_EVERY", defaults.log_check_every),
        default_timezone=default_tz or defaults.default_timezone,
        default_locations=locations,
    )
