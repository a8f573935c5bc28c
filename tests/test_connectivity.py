"""Tests for ConnectivityMonitor events."""

from PySide6.QtCore import QObject, Signal
from PySide6.QtNetwork import QNetworkInformation
from PySide6.QtTest import QTest

from netglance.connectivity import ConnectivityMonitor, is_online_reachability
from netglance.fake_sampler import FakeSampler
from netglance.models import GeoWeatherResult, LocationSnapshot, WeatherSnapshot
from netglance.scheduler import RefreshScheduler

Reachability = QNetworkInformation.Reachability
TransportMedium = QNetworkInformation.TransportMedium


class FakeNetworkInformation(QObject):
    """QNetworkInformation stand-in whose signals tests emit directly."""

    reachabilityChanged = Signal(object)
    transportMediumChanged = Signal(object)
    isBehindCaptivePortalChanged = Signal(bool)

    def __init__(self, reachability=Reachability.Online):
        super().__init__()
        self.current = reachability

    def reachability(self):
        return self.current

    def backendName(self):
        return "fake"


class CountingResolver:
    def __init__(self):
        self.calls = 0

    def resolve(self):
        self.calls += 1
        return GeoWeatherResult(location=LocationSnapshot(), weather=WeatherSnapshot())


class TestReachabilityMapping:
    """Test which reachability values count as online."""

    def test_only_online_counts(self):
        """Verify only full internet reachability maps to online."""
        assert is_online_reachability(Reachability.Online)
        assert not is_online_reachability(Reachability.Local)
        assert not is_online_reachability(Reachability.Site)
        assert not is_online_reachability(Reachability.Disconnected)
        assert not is_online_reachability(Reachability.Unknown)


class TestConnectivityMonitor:
    """Test events delivered by ConnectivityMonitor."""

    def test_changes_forwarded_as_bool(self, qapp):
        """Test reachability changes are re-emitted as booleans."""
        monitor = ConnectivityMonitor()
        received = []
        monitor.online_changed.connect(lambda online: received.append(online))

        monitor._on_reachability_changed(QNetworkInformation.Reachability.Disconnected)
        monitor._on_reachability_changed(QNetworkInformation.Reachability.Online)
        monitor._on_reachability_changed(QNetworkInformation.Reachability.Online)

        assert received == [False, True, True]

    def test_assumes_online_before_start(self, qapp):
        """Test the monitor reports online until a backend says otherwise."""
        assert ConnectivityMonitor().is_online()


class TestNetworkChanges:
    """Test medium and captive-portal changes reach the scheduler."""

    def test_start_with_injected_source(self, qapp):
        """Test start() attaches to a provided network information source."""
        monitor = ConnectivityMonitor(info=FakeNetworkInformation(Reachability.Site))

        assert monitor.start()
        assert monitor.available
        assert not monitor.is_online()

    def test_medium_change_emits_current_state(self, qapp):
        """Test a medium change re-emits the current online state."""
        info = FakeNetworkInformation()
        monitor = ConnectivityMonitor(info=info)
        monitor.start()
        received = []
        monitor.online_changed.connect(lambda online: received.append(online))

        info.transportMediumChanged.emit(TransportMedium.WiFi)
        info.current = Reachability.Disconnected
        info.isBehindCaptivePortalChanged.emit(True)
        info.reachabilityChanged.emit(Reachability.Online)

        assert received == [True, False, True]

    def test_medium_switches_while_online_yield_one_refresh(self, qapp, immediate_pool):
        """Verify network switches while online are debounced into one refresh."""
        info = FakeNetworkInformation()
        monitor = ConnectivityMonitor(info=info)
        monitor.start()
        resolver = CountingResolver()
        scheduler = RefreshScheduler(
            FakeSampler(seed=1),
            resolver,
            debounce_ms=100,
            is_online=monitor.is_online(),
            thread_pool=immediate_pool,
        )
        monitor.online_changed.connect(scheduler.on_connectivity_change)

        try:
            info.transportMediumChanged.emit(TransportMedium.WiFi)
            info.transportMediumChanged.emit(TransportMedium.Ethernet)
            info.isBehindCaptivePortalChanged.emit(False)

            assert resolver.calls == 0
            assert scheduler.debounce_timer.isActive()

            QTest.qWait(300)
            assert resolver.calls == 1

            QTest.qWait(200)
            assert resolver.calls == 1
        finally:
            scheduler.stop()
            scheduler.debounce_timer.stop()
