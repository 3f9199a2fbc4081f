"""Playback timeline bar: play/pause, skip, slider and time display"""

from PySide6.QtWidgets import (
    QWidget,
    QHBoxLayout,
    QPushButton,
    QLabel,
    QSlider,
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QFont

from ...signals import get_app_signals
from ...core.config import get_config_manager
from ...core.playback_clock import PlaybackState, PlaybackStatus


def format_timestamp(seconds: float) -> str:
    """Format seconds as mm:ss, or h:mm:ss past the hour"""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class TimelineBar(QWidget):
    """
    Playback control bar above the transcript.
    Contains play/pause and skip buttons, the seek slider and a time label.
    Controls stay disabled until the session has playable audio.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = get_app_signals()
        self.setObjectName("timelineBar")
        self.setFixedHeight(56)

        self._seek_step = get_config_manager().config.seek_step_seconds
        self._is_dragging = False
        self._controls_enabled = False

        self._setup_ui()
        self._connect_signals()
        self.set_controls_enabled(False)

    def _setup_ui(self):
        """Set up the timeline bar UI"""
        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 8, 16, 8)
        layout.setSpacing(10)

        # Skip back
        self.back_btn = QPushButton(f"-{self._seek_step:g}s")
        self.back_btn.setToolTip("Skip back")
        self.back_btn.setFixedHeight(32)
        self.back_btn.clicked.connect(lambda: self.signals.skip_requested.emit(-self._seek_step))
        layout.addWidget(self.back_btn)

        # Play / pause
        self.play_btn = QPushButton("Play")
        self.play_btn.setObjectName("playButton")
        self.play_btn.setToolTip("Play (Space)")
        self.play_btn.setFixedSize(72, 32)
        self.play_btn.clicked.connect(self.signals.play_toggle_requested.emit)
        layout.addWidget(self.play_btn)

        # Skip forward
        self.forward_btn = QPushButton(f"+{self._seek_step:g}s")
        self.forward_btn.setToolTip("Skip forward")
        self.forward_btn.setFixedHeight(32)
        self.forward_btn.clicked.connect(lambda: self.signals.skip_requested.emit(self._seek_step))
        layout.addWidget(self.forward_btn)

        layout.addSpacing(12)

        # Seek slider, in milliseconds
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setObjectName("seekSlider")
        self.slider.setRange(0, 0)
        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(self._on_slider_moved)
        layout.addWidget(self.slider, stretch=1)

        layout.addSpacing(12)

        # Time display
        self.time_label = QLabel("00:00 / 00:00")
        self.time_label.setObjectName("timeLabel")
        self.time_label.setFont(QFont("Consolas", 12, QFont.DemiBold))
        self.time_label.setMinimumWidth(120)
        self.time_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.time_label)

    def _connect_signals(self):
        """Connect to app signals"""
        self.signals.playback_state_changed.connect(self.update_state)
        self.signals.session_changed.connect(self._on_session_changed)
        self.signals.session_updated.connect(self._on_session_updated)

    def set_controls_enabled(self, enabled: bool):
        self._controls_enabled = enabled
        for widget in (self.back_btn, self.play_btn, self.forward_btn, self.slider):
            widget.setEnabled(enabled)
        self.play_btn.setToolTip("Play (Space)" if enabled else "No playable audio")

    @Slot(object)
    def update_state(self, state: PlaybackState):
        """Render a playback snapshot"""
        duration_ms = int(state.duration * 1000)
        if self.slider.maximum() != duration_ms:
            self.slider.setRange(0, duration_ms)

        # The native position must not fight the user's drag
        if not self._is_dragging:
            self.slider.setValue(int(state.current_time * 1000))
            self._set_time_label(state.current_time, state.duration)

        self.play_btn.setText("Pause" if state.is_playing else "Play")
        if state.status == PlaybackStatus.LOADING:
            self.play_btn.setToolTip("Loading audio...")

    @Slot(object)
    def _on_session_changed(self, view):
        self._is_dragging = False
        self.update_state(view.playback)
        self.set_controls_enabled(view.controls_enabled)

    @Slot(object)
    def _on_session_updated(self, view):
        if view.controls_enabled != self._controls_enabled:
            self.set_controls_enabled(view.controls_enabled)

    def _set_time_label(self, current: float, duration: float):
        total = format_timestamp(duration) if duration > 0 else "--:--"
        self.time_label.setText(f"{format_timestamp(current)} / {total}")

    @Slot()
    def _on_slider_pressed(self):
        self._is_dragging = True

    @Slot(int)
    def _on_slider_moved(self, value: int):
        self._set_time_label(value / 1000.0, self.slider.maximum() / 1000.0)

    @Slot()
    def _on_slider_released(self):
        self._is_dragging = False
        self.signals.seek_requested.emit(self.slider.value() / 1000.0)
