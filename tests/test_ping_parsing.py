"""Unit tests for ping latency parsing (pure function tests)."""

from netglance.ping import parse_ping_latency_ms


class TestParsePingLatencyLinuxMacOS:
    """Test parsing Linux and macOS ping output formats."""

    def test_linux_multiline_output(self):
        """Test parsing from multi-line Linux output."""
        output = """
PING 8.8.8.8 (8.8.8.8) 56(84) bytes of data.
64 bytes from 8.8.8.8: icmp_seq=1 ttl=117 time=12.3 ms

--- 8.8.8.8 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
"""
        assert parse_ping_latency_ms(output) == 12.3

    def test_macos_standard_format(self):
        """Test standard macOS ping output."""
        output = "64 bytes from 172.217.14.206: icmp_seq=0 ttl=56 time=8.123 ms"
        assert parse_ping_latency_ms(output) == 8.123


class TestParsePingLatencyWindows:
    """Test parsing Windows ping output formats."""

    def test_windows_standard_format(self):
        """Test standard Windows ping output: time=12ms (no space)."""
        output = "Reply from 142.250.185.46: bytes=32 time=15ms TTL=117"
        assert parse_ping_latency_ms(output) == 15.0

    def test_windows_less_than_is_midpoint(self):
        """Test "time<Nms" is read as N/2."""
        assert parse_ping_latency_ms("Reply from 192.168.1.1: bytes=32 time<1ms TTL=64") == 0.5
        assert parse_ping_latency_ms("Reply from 192.168.1.1: bytes=32 time<10ms TTL=64") == 5.0

    def test_case_and_spacing_variations(self):
        """Test parsing tolerates case and whitespace differences."""
        assert parse_ping_latency_ms("TIME=15.5 MS") == 15.5
        assert parse_ping_latency_ms("time = 25 ms") == 25.0


class TestParsePingLatencyFailures:
    """Test outputs without a usable latency."""

    def test_empty_and_none(self):
        """Test empty output yields None."""
        assert parse_ping_latency_ms("") is None
        assert parse_ping_latency_ms(None) is None

    def test_timeout_message(self):
        """Test a timeout message yields None."""
        assert parse_ping_latency_ms("Request timed out.") is None

    def test_localized_output_not_parsed(self):
        """German Windows uses "Zeit", which is not recognized."""
        assert parse_ping_latency_ms("Antwort von 8.8.8.8: Bytes=32 Zeit=15ms TTL=117") is None
