"""Main application window"""

from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
    QSplitter,
    QStatusBar,
    QLabel,
    QPushButton,
    QTabWidget,
    QMessageBox,
)
from PySide6.QtCore import Qt, QTimer, QByteArray, Slot
from PySide6.QtGui import QFont, QKeySequence, QShortcut
from loguru import logger

from .. import __version__
from ..signals import get_app_signals
from ..core.config import get_config_manager
from ..core.session_controller import get_session_controller
from .widgets.sidebar import SidebarWidget
from .widgets.timeline_bar import TimelineBar
from .widgets.transcript_panel import TranscriptPanel
from .widgets.chat_panel import ChatPanel
from .widgets.insights_panel import InsightsPanel


class MainWindow(QMainWindow):
    """
    Main application window with Notion-style layout.

    Layout:
    - Header bar with title and actions
    - Timeline bar with playback controls
    - Error banner (hidden unless a fetch or playback failed)
    - Left sidebar with the conversation list
    - Right content area (transcript + chat/insights tabs)
    - Status bar
    """

    def __init__(self):
        super().__init__()
        self.signals = get_app_signals()
        self._config = get_config_manager()
        self._controller = get_session_controller()

        self._setup_window()
        self._setup_ui()
        self._setup_shortcuts()
        self._connect_signals()

        # Load the conversation list once the window is up
        QTimer.singleShot(100, self._load_initial_state)

    def _setup_window(self):
        """Configure window properties"""
        self.setWindowTitle("ConvoReview")
        self.setMinimumSize(1024, 680)
        self.resize(1360, 860)

        geometry = self._config.config.last_window_geometry
        if geometry and self.restoreGeometry(QByteArray.fromBase64(geometry.encode("ascii"))):
            return

        # Center on screen
        screen = self.screen().availableGeometry()
        x = (screen.width() - self.width()) // 2
        y = (screen.height() - self.height()) // 2
        self.move(x, y)

    def _setup_ui(self):
        """Set up the main UI layout"""
        central = QWidget()
        central.setObjectName("centralWidget")
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # Header bar
        header = self._create_header()
        main_layout.addWidget(header)

        # Timeline bar - below header
        self.timeline_bar = TimelineBar()
        main_layout.addWidget(self.timeline_bar)

        # Error banner
        self.error_banner = QLabel("")
        self.error_banner.setObjectName("errorBanner")
        self.error_banner.setWordWrap(True)
        self.error_banner.hide()
        main_layout.addWidget(self.error_banner)

        # Content area (horizontal split)
        content_widget = QWidget()
        content_widget.setObjectName("contentArea")
        content_layout = QHBoxLayout(content_widget)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(0)

        # Sidebar
        self.sidebar = SidebarWidget()
        content_layout.addWidget(self.sidebar)

        # Right content area with padding for card effect
        right_container = QWidget()
        right_container.setObjectName("contentArea")
        right_layout = QVBoxLayout(right_container)
        right_layout.setContentsMargins(12, 12, 12, 12)
        right_layout.setSpacing(12)

        right_splitter = QSplitter(Qt.Horizontal)
        right_splitter.setObjectName("contentSplitter")
        right_splitter.setChildrenCollapsible(False)
        right_splitter.setHandleWidth(12)

        # Transcript panel (card)
        self.transcript_panel = TranscriptPanel()
        right_splitter.addWidget(self.transcript_panel)

        # Chat and insights share the side column
        self.side_tabs = QTabWidget()
        self.side_tabs.setDocumentMode(True)
        self.chat_panel = ChatPanel()
        self.side_tabs.addTab(self.chat_panel, "Chat")
        self.insights_panel = InsightsPanel()
        self.side_tabs.addTab(self.insights_panel, "Insights")
        right_splitter.addWidget(self.side_tabs)

        right_splitter.setSizes([640, 380])
        right_splitter.setStretchFactor(0, 3)
        right_splitter.setStretchFactor(1, 2)

        right_layout.addWidget(right_splitter)
        content_layout.addWidget(right_container, stretch=1)

        main_layout.addWidget(content_widget, stretch=1)

        self._setup_status_bar()

    def _create_header(self) -> QWidget:
        """Create the header bar"""
        header = QWidget()
        header.setObjectName("headerBar")
        header.setFixedHeight(56)

        layout = QHBoxLayout(header)
        layout.setContentsMargins(20, 0, 20, 0)
        layout.setSpacing(12)

        title_container = QVBoxLayout()
        title_container.setContentsMargins(0, 0, 0, 0)
        title_container.setSpacing(0)

        self.title_label = QLabel("ConvoReview")
        self.title_label.setObjectName("logoLabel")
        title_font = QFont()
        title_font.setPointSize(14)
        title_font.setWeight(QFont.Bold)
        self.title_label.setFont(title_font)
        title_container.addWidget(self.title_label)

        self.subtitle_label = QLabel("Conversation review")
        self.subtitle_label.setObjectName("logoSubtitle")
        subtitle_font = QFont()
        subtitle_font.setPointSize(9)
        self.subtitle_label.setFont(subtitle_font)
        self.subtitle_label.setStyleSheet("color: #9B9A97;")
        title_container.addWidget(self.subtitle_label)

        layout.addLayout(title_container)
        layout.addStretch()

        self.reload_btn = QPushButton("↻ Reload")
        self.reload_btn.setObjectName("iconButton")
        self.reload_btn.setToolTip("Reload the selected conversation")
        self.reload_btn.setEnabled(False)
        self.reload_btn.clicked.connect(self._controller.refresh)
        layout.addWidget(self.reload_btn)

        about_btn = QPushButton("ℹ About")
        about_btn.setObjectName("iconButton")
        about_btn.clicked.connect(self._on_about_clicked)
        layout.addWidget(about_btn)

        return header

    def _setup_status_bar(self):
        """Set up the status bar"""
        status_bar = QStatusBar()
        self.setStatusBar(status_bar)

        self.status_label = QLabel("Ready")
        status_bar.addWidget(self.status_label)

        status_bar.addWidget(QWidget(), stretch=1)

        self.busy_label = QLabel("")
        self.busy_label.setStyleSheet("color: #9B9A97;")
        status_bar.addPermanentWidget(self.busy_label)

        self.audio_label = QLabel("")
        status_bar.addPermanentWidget(self.audio_label)

        self.conversation_label = QLabel("No conversation")
        status_bar.addPermanentWidget(self.conversation_label)

    def _setup_shortcuts(self):
        """Space toggles playback unless a text field has focus"""
        self._play_shortcut = QShortcut(QKeySequence(Qt.Key_Space), self)
        self._play_shortcut.setContext(Qt.WindowShortcut)
        self._play_shortcut.activated.connect(self._on_space_pressed)

    def _connect_signals(self):
        """Connect application signals to the controller and window chrome"""
        signals = self.signals
        controller = self._controller

        # User intents
        signals.conversation_selected.connect(self._on_conversation_selected)
        signals.play_toggle_requested.connect(controller.toggle_playback)
        signals.seek_requested.connect(controller.seek)
        signals.skip_requested.connect(controller.skip)
        signals.sentence_seek_requested.connect(controller.seek_to_sentence)
        signals.chat_submitted.connect(controller.send_chat_message)
        self.sidebar.search_requested.connect(controller.search_conversations)
        self.sidebar.refresh_requested.connect(controller.refresh_conversations)

        # Session state
        signals.session_changed.connect(self._on_session_changed)
        signals.session_updated.connect(self._update_error_banner)
        signals.transcript_loaded.connect(self._on_transcript_loaded)
        signals.audio_ready.connect(self._on_audio_ready)
        signals.audio_unavailable.connect(self._on_audio_unavailable)
        signals.busy_state_changed.connect(self._on_busy_changed)
        signals.status_message.connect(self._show_status_message)

    def _load_initial_state(self):
        """Fetch the conversation list and reopen the last conversation"""
        self._controller.refresh_conversations()
        last_id = self._config.config.last_conversation_id
        if last_id:
            logger.info(f"Reopening last conversation {last_id}")
            self.signals.conversation_selected.emit(last_id, "")

    @Slot()
    def _on_space_pressed(self):
        focus = self.focusWidget()
        if focus is not None and focus.inherits("QLineEdit"):
            return
        self.signals.play_toggle_requested.emit()

    @Slot(str, str)
    def _on_conversation_selected(self, conversation_id: str, name: str):
        self._controller.select_conversation(conversation_id, name or None)

    @Slot(object)
    def _on_session_changed(self, view):
        self.title_label.setText(view.title)
        self.subtitle_label.setText("Loading conversation...")
        self.conversation_label.setText(f"Conversation: {view.conversation_id}")
        self.audio_label.setText("Audio: loading")
        self.setWindowTitle(f"ConvoReview - {view.title}")
        self.reload_btn.setEnabled(True)
        self._update_error_banner(view)

    @Slot(object)
    def _on_transcript_loaded(self, view):
        self.title_label.setText(view.title)
        self.subtitle_label.setText(f"{len(view.sentences)} sentences")
        self.setWindowTitle(f"ConvoReview - {view.title}")

    @Slot(object)
    def _on_audio_ready(self, source):
        self.audio_label.setText(f"Audio: {source.display_name or 'ready'}")

    @Slot(str)
    def _on_audio_unavailable(self, reason: str):
        # Empty reason: the conversation simply has no recording
        self.audio_label.setText("Audio: failed" if reason else "No audio")

    @Slot(object)
    def _update_error_banner(self, view):
        """Show fetch and playback failures without blocking the rest of the session"""
        message = view.error_banner
        if message:
            if self.error_banner.text() != message:
                self.error_banner.setText(message)
            self.error_banner.show()
        else:
            self.error_banner.hide()

    @Slot(bool)
    def _on_busy_changed(self, busy: bool):
        self.busy_label.setText("Loading..." if busy else "")

    def _show_status_message(self, message: str, timeout: int = 3000):
        """Show a message in the status bar"""
        self.status_label.setText(message)
        if timeout > 0:
            QTimer.singleShot(timeout, lambda: self.status_label.setText("Ready"))

    def _on_about_clicked(self):
        """Handle about button click"""
        QMessageBox.about(
            self,
            "About ConvoReview",
            "<h3>ConvoReview</h3>"
            "<p>Review recorded conversations with synchronized audio and transcript</p>"
            f"<p>Version {__version__}</p>",
        )

    def closeEvent(self, event):
        """Handle window close"""
        geometry = bytes(self.saveGeometry().toBase64()).decode("ascii")
        self._config.set_window_geometry(geometry)
        self._controller.shutdown()
        event.accept()
