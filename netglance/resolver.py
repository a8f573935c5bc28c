"""Geo/weather resolution: provider fallback chain, default location, local time."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable

from netglance.config import Settings
from netglance.errors import AllProvidersExhausted, ProviderUnreachable
from netglance.models import (
    UNKNOWN,
    GeoWeatherResult,
    LocationSnapshot,
    ProviderAttempt,
    WeatherSnapshot,
)
from netglance.providers import (
    DEFAULT_GEO_PROVIDERS,
    GeoProvider,
    HttpClient,
    normalize_geo_payload,
    parse_wttr_payload,
    weather_icon,
)
from netglance.timezones import local_time_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationResolution:
    location: LocationSnapshot
    attempts: tuple[ProviderAttempt, ...]


def _snapshot(fields: dict) -> LocationSnapshot:
    return LocationSnapshot(
        ip=fields["ip"] or UNKNOWN,
        city=fields["city"] or fields["region"] or UNKNOWN,
        country=fields["country"] or UNKNOWN,
        region=fields["region"],
        timezone=fields["timezone"],
    )


def resolve_location(
    providers: Iterable[GeoProvider],
    fetch: Callable[[GeoProvider], dict],
) -> LocationResolution:
    """Try providers in order until one yields an IP plus a city or region.

    A provider that answers with a bare IP does not end the chain; its IP is
    remembered as the best partial result in case nobody does better.

    Args:
        providers: Ordered fallback chain
        fetch: Returns the provider's JSON payload, raises ProviderUnreachable

    Returns:
        LocationResolution with the snapshot and every attempt made

    Raises:
        AllProvidersExhausted: no provider produced a location
    """
    attempts = []
    partial = None

    for provider in providers:
        try:
            payload = fetch(provider)
        except ProviderUnreachable as e:
            logger.debug("Geo provider unreachable: %s", e)
            attempts.append(ProviderAttempt(provider.name, "unreachable", e.reason))
            continue

        fields = normalize_geo_payload(payload)
        if fields["ip"] and (fields["city"] or fields["region"]):
            attempts.append(ProviderAttempt(provider.name, "resolved"))
            return LocationResolution(_snapshot(fields), tuple(attempts))

        attempts.append(ProviderAttempt(provider.name, "ip_only", fields["ip"]))
        if partial is None and fields["ip"]:
            partial = LocationSnapshot(
                ip=fields["ip"],
                country=fields["country"] or UNKNOWN,
                timezone=fields["timezone"],
            )

    raise AllProvidersExhausted(attempts, partial)


class GeoWeatherResolver:
    """Produces one GeoWeatherResult per resolve() call; never raises.

    Steps:
    1. Location from the geo fallback chain (unknown fields when exhausted).
    2. Weather city: the resolved city, or the default-location table entry
       for the country when the city is unknown.
    3. Weather from wttr.in; on failure the weather fields degrade to "--".
    4. Local time from the geo timezone (the weather provider's timezone is
       not used), falling back to the default region.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: HttpClient | None = None,
        providers: Iterable[GeoProvider] = DEFAULT_GEO_PROVIDERS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.client = client if client is not None else HttpClient(timeout=self.settings.http_timeout_s)
        self.providers = tuple(providers)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve(self) -> GeoWeatherResult:
        try:
            resolution = resolve_location(self.providers, self.client.fetch_geo)
            location, attempts = resolution.location, resolution.attempts
        except AllProvidersExhausted as e:
            logger.warning(
                "Geolocation failed: %s (%s)",
                e,
                ", ".join(f"{a.provider}={a.outcome}" for a in e.attempts),
            )
            location = e.partial if e.partial is not None else LocationSnapshot()
            attempts = e.attempts

        city, tz_name, is_default = self.choose_weather_city(location)
        weather = self.fetch_weather(city, tz_name)

        logger.info(
            "Geo/weather resolved: ip=%s, city=%s, default=%s, temp=%s",
            location.ip,
            city,
            is_default,
            weather.temperature,
        )
        return GeoWeatherResult(
            location=location,
            weather=weather,
            is_default_location=is_default,
            attempts=tuple(attempts),
        )

    def choose_weather_city(self, location: LocationSnapshot) -> tuple[str, str, bool]:
        """Return (city, timezone, is_default) for the weather query."""
        if location.has_location:
            if location.timezone:
                return location.city, location.timezone, False
            # no timezone from the geo step: the country's table entry is the best guess
            _, tz_name = self.settings.default_location_for(location.country)
            return location.city, tz_name, False

        city, tz_name = self.settings.default_location_for(location.country)
        # a timezone from the geo step beats the table's guess
        return city, location.timezone or tz_name, True

    def fetch_weather(self, city: str, tz_name: str) -> WeatherSnapshot:
        local_time = local_time_string(tz_name, self._clock(), self.settings.default_timezone)
        try:
            temperature, description = parse_wttr_payload(self.client.fetch_weather(city))
        except ProviderUnreachable as e:
            logger.warning("Weather lookup failed for %s: %s", city, e)
            return WeatherSnapshot(
                description="unavailable",
                resolved_location_name=city,
                local_time_string=local_time,
            )

        return WeatherSnapshot(
            temperature=f"{temperature}°C",
            description=description,
            icon=weather_icon(description),
            resolved_location_name=city,
            local_time_string=local_time,
        )
