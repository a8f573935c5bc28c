"""Tests for ThroughputMeter rate computation."""

import pytest

from netglance.throughput import MAX_KBPS, ThroughputMeter


class FakeCounters:
    """Scripted (received, sent) counters and clock."""

    def __init__(self):
        self.received = 0
        self.sent = 0
        self.now = 100.0

    def counters(self):
        return self.received, self.sent

    def clock(self):
        return self.now


@pytest.fixture
def source():
    return FakeCounters()


@pytest.fixture
def meter(source):
    return ThroughputMeter(counters=source.counters, clock=source.clock)


class TestThroughputMeter:
    """Test rate computation from cumulative counters."""

    def test_first_call_primes(self, source, meter):
        """Test the first call primes counters and returns zeros."""
        source.received, source.sent = 10_000_000, 5_000_000
        assert meter.measure() == (0.0, 0.0)

    def test_rates_in_kilobytes_per_second(self, source, meter):
        """Test byte deltas are converted to KB/s."""
        meter.measure()
        source.received += 2048 * 5
        source.sent += 1024 * 5
        source.now += 5.0
        download, upload = meter.measure()
        assert download == pytest.approx(2.0)
        assert upload == pytest.approx(1.0)

    def test_too_soon_returns_previous_rates(self, source, meter):
        """Test calls closer than min_elapsed return the last rates."""
        meter.measure()
        source.received += 10240
        source.now += 1.0
        first = meter.measure()

        source.received += 999_999
        source.now += 0.1
        assert meter.measure() == first

    def test_counter_reset_counts_from_zero(self, source, meter):
        """Test a counter reset uses the new value as the delta."""
        source.received = 50_000
        meter.measure()
        source.received = 1024
        source.now += 1.0
        download, _ = meter.measure()
        assert download == pytest.approx(1.0)

    def test_rates_are_capped(self, source, meter):
        """Test rates are capped at MAX_KBPS."""
        meter.measure()
        source.received += 10 * 1024 ** 3
        source.now += 1.0
        download, _ = meter.measure()
        assert download == MAX_KBPS
