"""Tests for provider payload handling and the HTTP client wrapper."""

from unittest import mock

import pytest
import requests

from netglance.errors import ProviderUnreachable
from netglance.providers import (
    GeoProvider,
    HttpClient,
    normalize_geo_payload,
    parse_wttr_payload,
    weather_icon,
)


class TestNormalizeGeoPayload:
    """Test mapping of the supported providers' field names."""

    def test_ipapi_co(self):
        """Test ipapi.co field names."""
        payload = {
            "ip": "34.105.5.167",
            "city": "The Dalles",
            "region": "Oregon",
            "country_name": "United States",
            "country": "US",
            "timezone": "America/Los_Angeles",
        }
        assert normalize_geo_payload(payload) == {
            "ip": "34.105.5.167",
            "city": "The Dalles",
            "region": "Oregon",
            "country": "United States",
            "timezone": "America/Los_Angeles",
        }

    def test_ip_api_com(self):
        """Test ip-api.com field names."""
        payload = {
            "status": "success",
            "query": "8.8.4.4",
            "city": "Mountain View",
            "regionName": "California",
            "country": "United States",
            "timezone": "America/Los_Angeles",
        }
        fields = normalize_geo_payload(payload)
        assert fields["ip"] == "8.8.4.4"
        assert fields["region"] == "California"

    def test_ipwho_is_timezone_object(self):
        """Test a timezone given as an object."""
        payload = {"ip": "1.1.1.1", "city": "Sydney", "timezone": {"id": "Australia/Sydney", "utc": "+10:00"}}
        assert normalize_geo_payload(payload)["timezone"] == "Australia/Sydney"

    def test_ip_only(self):
        """Test a payload with only an IP."""
        assert normalize_geo_payload({"ip": "1.2.3.4"}) == {
            "ip": "1.2.3.4",
            "city": "",
            "region": "",
            "country": "",
            "timezone": "",
        }

    def test_nulls_and_whitespace(self):
        """Test nulls and blank strings become empty fields."""
        fields = normalize_geo_payload({"ip": " 1.2.3.4 ", "city": None, "timezone": None})
        assert fields["ip"] == "1.2.3.4"
        assert fields["city"] == ""
        assert fields["timezone"] == ""


class TestParseWttrPayload:
    """Test wttr.in j1 parsing."""

    def test_current_condition(self):
        """Test temperature and description come from current_condition."""
        payload = {
            "current_condition": [{"temp_C": "21", "weatherDesc": [{"value": "Partly cloudy"}]}],
            "nearest_area": [{"areaName": [{"value": "Chaoyang"}]}],
        }
        assert parse_wttr_payload(payload) == (21, "Partly cloudy")

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"current_condition": []},
            {"current_condition": [{"temp_C": "warm", "weatherDesc": [{"value": "Sunny"}]}]},
        ],
    )
    def test_malformed(self, payload):
        """Test malformed payloads raise ProviderUnreachable."""
        with pytest.raises(ProviderUnreachable):
            parse_wttr_payload(payload)


class TestWeatherIcon:
    """Test description keyword to icon mapping."""

    @pytest.mark.parametrize(
        "description, icon",
        [
            ("Sunny", "☀️"),
            ("Clear", "☀️"),
            ("Partly cloudy", "⛅"),
            ("Overcast", "☁️"),
            ("Light rain shower", "🌧️"),
            ("Heavy snow", "❄️"),
            ("Thundery outbreaks possible", "⛈️"),
            ("Mist", "🌫️"),
            ("多云", "⛅"),
            ("", "🌤️"),
        ],
    )
    def test_mapping(self, description, icon):
        """Verify description keywords map to icons."""
        assert weather_icon(description) == icon


class TestHttpClient:
    """Test that every failure becomes ProviderUnreachable."""

    def make_client(self, response=None, side_effect=None):
        session = mock.Mock(spec=requests.Session)
        session.headers = {}
        session.get.return_value = response
        session.get.side_effect = side_effect
        return HttpClient(session=session, timeout=3.0), session

    def test_success(self):
        """Test a JSON object is returned."""
        response = mock.Mock()
        response.json.return_value = {"ip": "1.2.3.4"}
        client, session = self.make_client(response)

        assert client.fetch_geo(GeoProvider("p", "https://example.test/")) == {"ip": "1.2.3.4"}
        session.get.assert_called_once_with("https://example.test/", timeout=3.0)
        assert "User-Agent" in session.headers

    def test_connection_error(self):
        """Test a connection error becomes ProviderUnreachable."""
        client, _ = self.make_client(side_effect=requests.ConnectionError("refused"))
        with pytest.raises(ProviderUnreachable) as excinfo:
            client.fetch_geo(GeoProvider("p", "https://example.test/"))
        assert excinfo.value.provider == "p"

    def test_http_error_status(self):
        """Test an HTTP error status becomes ProviderUnreachable."""
        response = mock.Mock()
        response.raise_for_status.side_effect = requests.HTTPError("429 Too Many Requests")
        client, _ = self.make_client(response)
        with pytest.raises(ProviderUnreachable, match="429"):
            client.fetch_geo(GeoProvider("p", "https://example.test/"))

    def test_invalid_json(self):
        """Test an invalid JSON body becomes ProviderUnreachable."""
        response = mock.Mock()
        response.json.side_effect = ValueError("Expecting value")
        client, _ = self.make_client(response)
        with pytest.raises(ProviderUnreachable, match="invalid JSON"):
            client.fetch_geo(GeoProvider("p", "https://example.test/"))

    def test_non_object_payload(self):
        """Test a non-object JSON body becomes ProviderUnreachable."""
        response = mock.Mock()
        response.json.return_value = ["not", "a", "dict"]
        client, _ = self.make_client(response)
        with pytest.raises(ProviderUnreachable, match="unexpected payload"):
            client.fetch_geo(GeoProvider("p", "https://example.test/"))

    def test_weather_url_quotes_city(self):
        """Test the city is URL-quoted in the weather request."""
        response = mock.Mock()
        response.json.return_value = {}
        client, session = self.make_client(response)
        client.fetch_weather("The Dalles")
        assert session.get.call_args.args[0] == "https://wttr.in/The%20Dalles?format=j1"
