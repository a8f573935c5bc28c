"""Refresh scheduler with independent cadences per action."""

import logging
import time
from enum import Enum

from PySide6.QtCore import QObject, Qt, QThreadPool, QTimer, Signal

from netglance.log_rotation import HeadTailFileHandler, Rotator
from netglance.resolver import GeoWeatherResolver
from netglance.sampler import MetricSampler
from netglance.workers import ResolveWorker, SampleWorker

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Scheduled actions, each with its own last-run timestamp."""

    NETWORK = "network"
    GEO_WEATHER = "geo_weather"
    LOG_ROTATION = "log_rotation"
    CONNECTIVITY_DEBOUNCE = "connectivity_debounce"


class RefreshScheduler(QObject):
    """Drives network sampling, geo/weather refresh and log rotation.

    Key features:
    - One QTimer per periodic action; changing one interval never touches another
    - Per-action last-run timestamps, never a shared "last updated" field
    - Blocking work runs in QThreadPool workers, results come back via signals
    - Per-action generation IDs to drop stale results after stop() or a forced refresh
    - Online events debounced with a single-shot timer (restart = cancel and replace)

    Thread-safe: All state access on Qt main thread via signals/slots.
    """

    # Signals
    network_snapshot_ready = Signal(object)  # NetworkSnapshot
    geo_weather_ready = Signal(object)  # GeoWeatherResult
    log_rotated = Signal()
    error = Signal(str, str)  # (action, error_msg)

    def __init__(
        self,
        sampler: MetricSampler,
        resolver: GeoWeatherResolver,
        rotator: Rotator | None = None,
        network_interval_ms: int = 5000,
        geo_interval_ms: int = 10 * 60 * 1000,
        debounce_ms: int = 5000,
        is_online: bool = True,
        clock=None,
        thread_pool=None,
        parent=None,
    ):
        """Initialize the scheduler.

        Args:
            sampler: Produces NetworkSnapshots
            resolver: Produces GeoWeatherResults
            rotator: Bounds the log file, None disables log rotation
            network_interval_ms: Network sampling period
            geo_interval_ms: Geo/weather refresh period
            debounce_ms: Quiet window for repeated online events
            is_online: Connectivity state at startup
            clock: Monotonic clock used for last-run timestamps
            thread_pool: Pool running workers (global pool by default)
            parent: Qt parent object
        """
        super().__init__(parent)

        self.sampler = sampler
        self.resolver = resolver
        self.rotator = rotator
        self._clock = clock or time.monotonic

        self._last_run = {action: None for action in Action}
        self._in_flight = {Action.NETWORK: 0, Action.GEO_WEATHER: 0}
        self._generation = {Action.NETWORK: 0, Action.GEO_WEATHER: 0}

        self._is_online = is_online
        self.is_monitoring = False

        self.thread_pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()

        self.network_timer = QTimer(self)
        self.network_timer.setInterval(network_interval_ms)
        self.network_timer.timeout.connect(self.tick_network)

        self.geo_timer = QTimer(self)
        self.geo_timer.setInterval(geo_interval_ms)
        self.geo_timer.timeout.connect(self.tick_geo_weather)

        self.debounce_timer = QTimer(self)
        self.debounce_timer.setSingleShot(True)
        self.debounce_timer.setInterval(debounce_ms)
        self.debounce_timer.timeout.connect(self._on_debounce_elapsed)

    @property
    def network_interval_ms(self) -> int:
        return self.network_timer.interval()

    @property
    def geo_interval_ms(self) -> int:
        return self.geo_timer.interval()

    @property
    def is_online(self) -> bool:
        return self._is_online

    def last_run(self, action: Action) -> float | None:
        """Clock value of the action's most recent run, None if never run."""
        return self._last_run[action]

    def start(self):
        """Start all cadences and refresh everything once right away."""
        if self.is_monitoring:
            return

        self.is_monitoring = True
        self.network_timer.start()
        self.geo_timer.start()
        logger.info(
            "Scheduler started: network=%dms, geo_weather=%dms",
            self.network_timer.interval(),
            self.geo_timer.interval(),
        )

        self.tick_network()
        self.tick_geo_weather()

    def stop(self):
        """Stop all timers and invalidate in-flight results."""
        if not self.is_monitoring:
            return

        self.is_monitoring = False
        self.network_timer.stop()
        self.geo_timer.stop()
        self.debounce_timer.stop()
        for action in self._generation:
            self._generation[action] += 1
        logger.info("Scheduler stopped")

    def set_network_interval(self, interval_ms: int):
        """Change the network sampling period only."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.network_timer.setInterval(interval_ms)
        logger.debug("Network interval updated: %dms", interval_ms)

    def set_geo_interval(self, interval_ms: int):
        """Change the geo/weather refresh period only."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.geo_timer.setInterval(interval_ms)
        logger.debug("Geo/weather interval updated: %dms", interval_ms)

    def watch_log_handler(self, handler: HeadTailFileHandler):
        """Rotate handler's file whenever it reports another batch of lines.

        Queued so rotation always runs on the scheduler's thread, outside
        the handler's emit().
        """
        self.rotator = handler
        handler.signals.lines_appended.connect(self._on_lines_appended, type=Qt.QueuedConnection)

    # ------------------------------------------------------------------
    # Ticks

    def tick_network(self):
        """Start one network sample unless the previous one is still running."""
        if self._in_flight[Action.NETWORK]:
            logger.debug("Network tick skipped: sample in flight")
            return

        self._last_run[Action.NETWORK] = self._clock()
        self._in_flight[Action.NETWORK] += 1

        worker = SampleWorker(self.sampler, self._generation[Action.NETWORK])
        worker.signals.result_ready.connect(self._on_network_ready)
        worker.signals.error.connect(self._on_network_error)
        worker.signals.finished.connect(self._on_network_finished)
        self.thread_pool.start(worker)

    def tick_geo_weather(self, force: bool = False):
        """Start one geo/weather resolve.

        Periodic ticks are skipped while a resolve is running. A forced tick
        supersedes the running one: its result will be discarded.
        """
        if self._in_flight[Action.GEO_WEATHER]:
            if not force:
                logger.debug("Geo/weather tick skipped: resolve in flight")
                return
            self._generation[Action.GEO_WEATHER] += 1
            logger.debug("Superseding in-flight geo/weather resolve")

        self._last_run[Action.GEO_WEATHER] = self._clock()
        self._in_flight[Action.GEO_WEATHER] += 1

        worker = ResolveWorker(self.resolver, self._generation[Action.GEO_WEATHER])
        worker.signals.result_ready.connect(self._on_geo_ready)
        worker.signals.error.connect(self._on_geo_error)
        worker.signals.finished.connect(self._on_geo_finished)
        self.thread_pool.start(worker)

    def tick_log_rotation(self) -> bool:
        """Bound the log file to head+tail lines.

        Returns:
            True if the log was rewritten
        """
        if self.rotator is None:
            return False

        self._last_run[Action.LOG_ROTATION] = self._clock()
        try:
            rotated = self.rotator.rotate_if_needed()
        except OSError as e:
            logger.warning("Log rotation failed: %s", e)
            self.error.emit(Action.LOG_ROTATION.value, str(e))
            return False

        if rotated:
            self.log_rotated.emit()
        return rotated

    def on_connectivity_change(self, is_online: bool):
        """Handle an online/offline event.

        offline -> online refreshes geo/weather immediately. Further online
        events restart the debounce window, so a burst yields one refresh
        timed from its last event. Going offline cancels a pending refresh.
        """
        was_online = self._is_online
        self._is_online = is_online

        if not is_online:
            if self.debounce_timer.isActive():
                self.debounce_timer.stop()
                logger.debug("Offline: pending geo/weather refresh cancelled")
            logger.info("Connectivity lost")
            return

        if not was_online:
            self.debounce_timer.stop()
            logger.info("Connectivity restored, refreshing geo/weather now")
            self.tick_geo_weather(force=True)
            return

        # start() on an active single-shot timer restarts it
        self.debounce_timer.start()
        logger.debug("Online event debounced: refresh in %dms", self.debounce_timer.interval())

    # ------------------------------------------------------------------
    # Worker callbacks (main thread)

    def _on_debounce_elapsed(self):
        self._last_run[Action.CONNECTIVITY_DEBOUNCE] = self._clock()
        self.tick_geo_weather(force=True)

    def _on_lines_appended(self, count: int):
        self.tick_log_rotation()

    def _on_network_ready(self, snapshot, generation_id: int):
        if generation_id != self._generation[Action.NETWORK]:
            logger.debug("Ignoring stale network sample: generation_id=%d", generation_id)
            return
        self.network_snapshot_ready.emit(snapshot)

    def _on_network_error(self, error_msg: str):
        logger.error("Network sampling error: %s", error_msg)
        self.error.emit(Action.NETWORK.value, error_msg)

    def _on_network_finished(self):
        self._in_flight[Action.NETWORK] = max(0, self._in_flight[Action.NETWORK] - 1)

    def _on_geo_ready(self, result, generation_id: int):
        if generation_id != self._generation[Action.GEO_WEATHER]:
            logger.debug("Ignoring stale geo/weather result: generation_id=%d", generation_id)
            return
        self.geo_weather_ready.emit(result)

    def _on_geo_error(self, error_msg: str):
        logger.error("Geo/weather refresh error: %s", error_msg)
        self.error.emit(Action.GEO_WEATHER.value, error_msg)

    def _on_geo_finished(self):
        self._in_flight[Action.GEO_WEATHER] = max(0, self._in_flight[Action.GEO_WEATHER] - 1)

    def get_stats(self):
        """Get scheduler statistics.

        Returns:
            Dict with scheduler state info
        """
        return {
            "monitoring": self.is_monitoring,
            "online": self._is_online,
            "network_interval_ms": self.network_timer.interval(),
            "geo_interval_ms": self.geo_timer.interval(),
            "in_flight": {action.value: count for action, count in self._in_flight.items()},
            "last_run": {action.value: value for action, value in self._last_run.items()},
        }
