"""Always-on-top overlay widget showing network and weather snapshots."""

from datetime import datetime

from PySide6.QtCore import QPoint, Qt
from PySide6.QtGui import QCloseEvent, QMouseEvent
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from netglance.formatting import (
    DASH,
    STATUS_COLORS,
    STATUS_LABELS,
    format_ip,
    format_latency,
    format_location,
    format_packet_loss,
    format_speed,
)
from netglance.models import GeoWeatherResult, NetworkSnapshot

WIDGET_WIDTH = 280


class OverlayWidget(QWidget):
    """Frameless, translucent widget; draggable with the left mouse button.

    Display-only: it receives finished snapshots and never triggers work
    itself besides the optional scheduler stop on close.
    """

    def __init__(self, scheduler=None):
        super().__init__()
        self.scheduler = scheduler
        self._drag_offset: QPoint | None = None

        self.setWindowTitle("netglance")
        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setFixedWidth(WIDGET_WIDTH)

        self.setup_ui()
        self.set_opacity_percent(85)

    def setup_ui(self):
        """Build the panel: title bar, network grid, weather block, opacity slider."""
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)

        self.panel = QFrame()
        self.panel.setObjectName("panel")
        outer.addWidget(self.panel)

        layout = QVBoxLayout(self.panel)
        layout.setContentsMargins(12, 8, 12, 10)

        # Title bar
        title_row = QHBoxLayout()
        title = QLabel("Network")
        title.setStyleSheet("font-weight: bold; font-size: 13px;")
        title_row.addWidget(title)
        title_row.addStretch(1)
        self.close_button = QPushButton("✕")
        self.close_button.setFixedSize(20, 20)
        self.close_button.setFlat(True)
        self.close_button.clicked.connect(self.close)
        title_row.addWidget(self.close_button)
        layout.addLayout(title_row)

        # Network stats
        grid = QGridLayout()
        self.latency_label = self._add_row(grid, 0, "Latency")
        self.download_label = self._add_row(grid, 1, "Download")
        self.upload_label = self._add_row(grid, 2, "Upload")
        self.packet_loss_label = self._add_row(grid, 3, "Packet loss")
        self.status_label = self._add_row(grid, 4, "Status")
        self.update_time_label = self._add_row(grid, 5, "Updated")
        self.ip_label = self._add_row(grid, 6, "IP")
        layout.addLayout(grid)

        # Weather
        weather_row = QHBoxLayout()
        self.weather_icon_label = QLabel("❓")
        self.weather_icon_label.setStyleSheet("font-size: 26px;")
        weather_row.addWidget(self.weather_icon_label)

        weather_text = QVBoxLayout()
        self.weather_temp_label = QLabel(DASH)
        self.weather_temp_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        self.weather_desc_label = QLabel(DASH)
        weather_text.addWidget(self.weather_temp_label)
        weather_text.addWidget(self.weather_desc_label)
        weather_row.addLayout(weather_text, 1)

        place_text = QVBoxLayout()
        self.weather_location_label = QLabel(DASH)
        self.weather_location_label.setAlignment(Qt.AlignRight)
        self.location_time_label = QLabel("--:--")
        self.location_time_label.setAlignment(Qt.AlignRight)
        place_text.addWidget(self.weather_location_label)
        place_text.addWidget(self.location_time_label)
        weather_row.addLayout(place_text, 1)
        layout.addLayout(weather_row)

        # Opacity
        self.opacity_slider = QSlider(Qt.Horizontal)
        self.opacity_slider.setRange(20, 100)
        self.opacity_slider.setValue(85)
        self.opacity_slider.valueChanged.connect(self.set_opacity_percent)
        layout.addWidget(self.opacity_slider)

    def _add_row(self, grid: QGridLayout, row: int, caption: str) -> QLabel:
        grid.addWidget(QLabel(caption), row, 0)
        value = QLabel(DASH)
        value.setAlignment(Qt.AlignRight)
        grid.addWidget(value, row, 1)
        return value

    def set_opacity_percent(self, value: int):
        """Apply the slider value to the panel background only (text stays opaque)."""
        alpha = value / 100
        self.panel.setStyleSheet(
            "#panel {"
            f" background-color: rgba(25, 25, 42, {alpha:.2f});"
            " border-radius: 10px; }"
            " QLabel { color: #e5e7eb; }"
        )

    # ------------------------------------------------------------------
    # Presentation sink

    def show_network(self, snapshot: NetworkSnapshot):
        self.latency_label.setText(format_latency(snapshot))
        self.download_label.setText(format_speed(snapshot.download_kbps))
        self.upload_label.setText(format_speed(snapshot.upload_kbps))
        self.packet_loss_label.setText(format_packet_loss(snapshot))

        self.status_label.setText(STATUS_LABELS[snapshot.status])
        self.status_label.setStyleSheet(
            f"color: {STATUS_COLORS[snapshot.status]}; font-weight: bold;"
        )
        self.update_time_label.setText(snapshot.ts.strftime("%H:%M"))

    def show_error(self, action: str, error_msg: str):
        """Degrade only the fields owned by the failing action."""
        if action == "network":
            self.latency_label.setText(f"{DASH} ms")
            self.download_label.setText(DASH)
            self.upload_label.setText(DASH)
            self.packet_loss_label.setText(DASH)
            self.status_label.setText(DASH)
            self.status_label.setStyleSheet("")
            self.status_label.setToolTip(error_msg)
        elif action == "geo_weather":
            self.weather_desc_label.setText("network error")
            self.weather_desc_label.setToolTip(error_msg)

    def show_geo_weather(self, result: GeoWeatherResult):
        self.ip_label.setText(format_ip(result))
        self.weather_temp_label.setText(result.weather.temperature)
        self.weather_desc_label.setText(result.weather.description)
        self.weather_desc_label.setToolTip("")
        self.weather_icon_label.setText(result.weather.icon)
        self.weather_location_label.setText(format_location(result))
        self.location_time_label.setText(result.weather.local_time_string)

        tried = ", ".join(f"{a.provider}: {a.outcome}" for a in result.attempts)
        self.ip_label.setToolTip(f"Updated {datetime.now():%H:%M}\n{tried}" if tried else "")
        self.adjustSize()

    # ------------------------------------------------------------------
    # Window behavior

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._drag_offset is not None and event.buttons() & Qt.LeftButton:
            self.move(event.globalPosition().toPoint() - self._drag_offset)
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self._drag_offset = None
        super().mouseReleaseEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop the scheduler and wait briefly for in-flight workers."""
        if self.scheduler is not None:
            self.scheduler.stop()
            self.scheduler.thread_pool.waitForDone(1000)
        super().closeEvent(event)
