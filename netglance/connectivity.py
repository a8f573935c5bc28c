"""Online/offline events from the operating system's network status."""

import logging

from PySide6.QtCore import QObject, Signal
from PySide6.QtNetwork import QNetworkInformation

logger = logging.getLogger(__name__)


def is_online_reachability(reachability) -> bool:
    """Only full internet reachability counts as online."""
    return reachability == QNetworkInformation.Reachability.Online


class ConnectivityMonitor(QObject):
    """Re-emits QNetworkInformation changes as online_changed(bool).

    Reachability changes carry the new online state. A switch of transport
    medium (Wi-Fi to Ethernet, say) or of captive-portal state does not
    change reachability, so it is emitted as the current state; while online
    that yields repeated True events, which the scheduler debounces.
    When no backend is available on this platform the monitor stays silent
    and periodic refreshes still run.
    """

    online_changed = Signal(bool)

    def __init__(self, parent=None, info=None):
        """Initialize the monitor.

        Args:
            parent: Qt parent object
            info: QNetworkInformation-like source; the platform backend by default
        """
        super().__init__(parent)
        self.available = False
        self._info = info

    def start(self) -> bool:
        """Attach to the network information source.

        Returns:
            True if connectivity events will be delivered
        """
        if self.available:
            return True

        if self._info is None:
            if not QNetworkInformation.loadDefaultBackend():
                logger.warning("No network information backend, connectivity events disabled")
                return False
            self._info = QNetworkInformation.instance()
            if self._info is None:
                logger.warning("Network information backend failed to load")
                return False

        self._info.reachabilityChanged.connect(self._on_reachability_changed)
        self._info.transportMediumChanged.connect(self._on_network_changed)
        self._info.isBehindCaptivePortalChanged.connect(self._on_network_changed)
        self.available = True
        logger.info(
            "Connectivity monitor started: backend=%s, online=%s",
            self._info.backendName(),
            self.is_online(),
        )
        return True

    def is_online(self) -> bool:
        if self._info is None:
            return True
        return is_online_reachability(self._info.reachability())

    def _on_reachability_changed(self, reachability):
        online = is_online_reachability(reachability)
        logger.debug("Reachability changed: %s (online=%s)", reachability, online)
        self.online_changed.emit(online)

    def _on_network_changed(self, value):
        online = self.is_online()
        logger.debug("Network changed: %s (online=%s)", value, online)
        self.online_changed.emit(online)
