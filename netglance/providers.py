"""HTTP providers for public IP geolocation and weather."""

import logging
from dataclasses import dataclass
from urllib.parse import quote

import requests

from netglance.errors import ProviderUnreachable

logger = logging.getLogger(__name__)

USER_AGENT = "netglance/0.1 (+desktop network widget)"


@dataclass(frozen=True)
class GeoProvider:
    """One entry of the geolocation fallback chain."""

    name: str
    url: str


# Order matters: IP-only providers go last, they never yield a city.
DEFAULT_GEO_PROVIDERS = (
    GeoProvider("ipapi.co", "https://ipapi.co/json/"),
    GeoProvider("ip-api.com", "http://ip-api.com/json/"),
    GeoProvider("ipwho.is", "https://ipwho.is/"),
    GeoProvider("ipify", "https://api.ipify.org?format=json"),
)

WTTR_URL = "https://wttr.in/{city}?format=j1"


class HttpClient:
    """Thin requests wrapper that turns every failure into ProviderUnreachable."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 8.0):
        self.session = session if session is not None else requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout

    def get_json(self, url: str, provider: str) -> dict:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ProviderUnreachable(provider, str(e)) from e
        except ValueError as e:
            raise ProviderUnreachable(provider, f"invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ProviderUnreachable(provider, f"unexpected payload type {type(payload).__name__}")
        return payload

    def fetch_geo(self, provider: GeoProvider) -> dict:
        return self.get_json(provider.url, provider.name)

    def fetch_weather(self, city: str) -> dict:
        return self.get_json(WTTR_URL.format(city=quote(city)), "wttr.in")


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_geo_payload(payload: dict) -> dict:
    """Map any provider's JSON onto ip/city/region/country/timezone (pure function).

    Missing fields come back as empty strings. Handles the field-name
    variants of the supported providers, e.g. ``query`` for the IP on
    ip-api.com and ``timezone: {"id": ...}`` on ipwho.is.
    """
    timezone = payload.get("timezone")
    if isinstance(timezone, dict):
        timezone = timezone.get("id") or timezone.get("name")

    return {
        "ip": _text(payload.get("ip") or payload.get("query")),
        "city": _text(payload.get("city")),
        "region": _text(payload.get("region") or payload.get("regionName")),
        "country": _text(payload.get("country_name") or payload.get("country")),
        "timezone": _text(timezone),
    }


def weather_icon(description: str) -> str:
    """Pick an emoji for a weather description (English or Chinese)."""
    text = (description or "").lower()
    if any(word in text for word in ("thunder", "storm", "雷")):
        return "⛈️"
    if any(word in text for word in ("snow", "sleet", "blizzard", "雪")):
        return "❄️"
    if any(word in text for word in ("rain", "drizzle", "shower", "雨")):
        return "🌧️"
    if any(word in text for word in ("fog", "mist", "haze", "雾")):
        return "🌫️"
    if "partly" in text or "多云" in text:
        return "⛅"
    if any(word in text for word in ("cloud", "overcast", "阴")):
        return "☁️"
    if any(word in text for word in ("sunny", "clear", "晴")):
        return "☀️"
    return "🌤️"


def parse_wttr_payload(payload: dict) -> tuple[int, str]:
    """Extract (temperature °C, description) from a wttr.in j1 response.

    nearest_area is ignored on purpose: its timezone is often missing and its
    area name can be a sub-district instead of the queried city.

    Raises:
        ProviderUnreachable: the payload lacks current_condition data
    """
    try:
        current = payload["current_condition"][0]
        temperature = int(float(current["temp_C"]))
        description = _text(current["weatherDesc"][0]["value"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ProviderUnreachable("wttr.in", f"malformed payload: {e!r}") from e
    return temperature, description
