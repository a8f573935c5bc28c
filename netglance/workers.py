"""Worker classes for background sampling and geo/weather tasks."""

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from netglance.errors import ProbeError
from netglance.resolver import GeoWeatherResolver
from netglance.sampler import MetricSampler

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """Signals for communicating between worker threads and main thread."""

    result_ready = Signal(object, int)  # Emits (snapshot or GeoWeatherResult, generation_id)
    error = Signal(str)  # Emits error message
    finished = Signal()  # Emits when worker completes


class SampleWorker(QRunnable):
    """Worker that executes sampler.sample() in background thread."""

    def __init__(self, sampler: MetricSampler, generation_id: int):
        super().__init__()
        self.sampler = sampler
        self.generation_id = generation_id
        self.signals = WorkerSignals()

    def run(self):
        """Execute the sampling task in background thread."""
        try:
            logger.debug("Sample worker starting: generation_id=%d", self.generation_id)

            # May be slow, the ping waits for its reply
            snapshot = self.sampler.sample()

            self.signals.result_ready.emit(snapshot, self.generation_id)

        except ProbeError as e:
            # Expected when the link is down, no traceback
            logger.warning("Probe failed: generation_id=%d, %s", self.generation_id, e)
            self.signals.error.emit(str(e))

        except Exception as e:
            logger.exception(
                "Sample worker exception: generation_id=%d, error=%s",
                self.generation_id,
                str(e),
            )
            self.signals.error.emit(str(e))

        finally:
            self.signals.finished.emit()


class ResolveWorker(QRunnable):
    """Worker that executes resolver.resolve() in background thread."""

    def __init__(self, resolver: GeoWeatherResolver, generation_id: int):
        super().__init__()
        self.resolver = resolver
        self.generation_id = generation_id
        self.signals = WorkerSignals()

    def run(self):
        try:
            logger.debug("Resolve worker starting: generation_id=%d", self.generation_id)
            result = self.resolver.resolve()
            self.signals.result_ready.emit(result, self.generation_id)
        except Exception as e:
            logger.exception(
                "Resolve worker exception: generation_id=%d, error=%s",
                self.generation_id,
                str(e),
            )
            self.signals.error.emit(str(e))
        finally:
            self.signals.finished.emit()
