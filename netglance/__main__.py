"""Entry point for the netglance overlay."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from netglance.config import load_settings
from netglance.connectivity import ConnectivityMonitor
from netglance.fake_sampler import FakeSampler
from netglance.gateway import detect_default_gateway, resolve_ping_target
from netglance.logging_config import configure_logging
from netglance.resolver import GeoWeatherResolver
from netglance.scheduler import RefreshScheduler
from netglance.ui.overlay import OverlayWidget

logger = logging.getLogger(__name__)


def build_sampler(settings, detect_gateway=detect_default_gateway):
    """Create the configured sampler, falling back to simulated data.

    Without a configured ping target the default gateway is pinged, or
    8.8.8.8 when no gateway can be found.

    Returns:
        (sampler, user_message) where user_message explains a fallback
    """
    if settings.sampler == "fake":
        logger.info("Fake sampler explicitly requested via NETGLANCE_SAMPLER")
        return FakeSampler(), "simulated data (NETGLANCE_SAMPLER=fake)"

    # Step 1: Try importing the module (psutil may be missing)
    try:
        from netglance.ping import PingProbe
        from netglance.sampler import PingSampler
    except ImportError as e:
        logger.warning("PingSampler unavailable: %s", e)
        return FakeSampler(), "simulated data (real network monitoring unavailable)"

    # Step 2: Try instantiating
    try:
        target = resolve_ping_target(settings.ping_target, detect_gateway)
        probe = PingProbe(target=target, timeout_ms=settings.ping_timeout_ms)
        sampler = PingSampler(probe=probe)
        logger.info("PingSampler initialized: target=%s", target)
        return sampler, None
    except ValueError as e:
        logger.error("PingSampler configuration invalid: %s", e)
        return FakeSampler(), "simulated data (configuration error)"


def main():
    """Main entry point for the netglance application."""
    settings = load_settings()
    log_handler = configure_logging(
        settings.log_file,
        head_lines=settings.log_head_lines,
        tail_lines=settings.log_tail_lines,
        check_every=settings.log_check_every,
    )
    logger.info("=== netglance starting ===")

    app = QApplication(sys.argv)

    sampler, user_message = build_sampler(settings)
    resolver = GeoWeatherResolver(settings)

    connectivity = ConnectivityMonitor()
    connectivity.start()

    scheduler = RefreshScheduler(
        sampler,
        resolver,
        network_interval_ms=settings.network_interval_ms,
        geo_interval_ms=settings.geo_interval_ms,
        debounce_ms=settings.debounce_ms,
        is_online=connectivity.is_online(),
    )
    connectivity.online_changed.connect(scheduler.on_connectivity_change)
    if log_handler is not None:
        scheduler.watch_log_handler(log_handler)

    window = OverlayWidget(scheduler=scheduler)
    scheduler.network_snapshot_ready.connect(window.show_network)
    scheduler.geo_weather_ready.connect(window.show_geo_weather)
    scheduler.error.connect(window.show_error)

    if user_message:
        window.status_label.setText("Simulated")
        window.status_label.setToolTip(f"Using {user_message}")

    window.show()
    scheduler.start()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
