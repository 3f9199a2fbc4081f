"""Chat-over-transcript panel"""

import html

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QTextBrowser,
    QLineEdit,
    QPushButton,
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QFont

from ...signals import get_app_signals
from ...styles.colors import ReviewColors
from ...core.chat_log import ChatEntry, DeliveryStatus


class ChatPanel(QWidget):
    """
    Ordered chat history for the selected conversation plus a message box.
    Messages appear as soon as they are submitted; failed sends stay visible
    and are marked.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = get_app_signals()
        self.setObjectName("chatPanel")

        self._entries: dict[int, ChatEntry] = {}

        self._setup_ui()
        self._connect_signals()
        self.setEnabled(False)

    def _setup_ui(self):
        """Set up the panel UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 12)
        layout.setSpacing(8)

        title = QLabel("Chat")
        title.setObjectName("panelTitle")
        title_font = QFont()
        title_font.setPointSize(11)
        title_font.setWeight(QFont.DemiBold)
        title.setFont(title_font)
        layout.addWidget(title)

        self.history_view = QTextBrowser()
        self.history_view.setOpenExternalLinks(False)
        layout.addWidget(self.history_view, stretch=1)

        self.notice_label = QLabel("")
        self.notice_label.setObjectName("chatNotice")
        self.notice_label.setStyleSheet(f"color: {ReviewColors.ERROR};")
        self.notice_label.setWordWrap(True)
        self.notice_label.hide()
        layout.addWidget(self.notice_label)

        input_row = QHBoxLayout()
        input_row.setSpacing(8)

        self.input_box = QLineEdit()
        self.input_box.setObjectName("chatInput")
        self.input_box.setPlaceholderText("Ask about this conversation...")
        self.input_box.returnPressed.connect(self._on_send_clicked)
        input_row.addWidget(self.input_box, stretch=1)

        self.send_btn = QPushButton("Send")
        self.send_btn.clicked.connect(self._on_send_clicked)
        input_row.addWidget(self.send_btn)

        layout.addLayout(input_row)

    def _connect_signals(self):
        """Connect to app signals"""
        self.signals.session_changed.connect(self._on_session_changed)
        self.signals.transcript_loaded.connect(self._on_transcript_loaded)
        self.signals.chat_message_appended.connect(self._on_entry_appended)
        self.signals.chat_message_updated.connect(self._on_entry_updated)
        self.signals.chat_send_failed.connect(self._on_send_failed)

    @Slot()
    def _on_send_clicked(self):
        text = self.input_box.text().strip()
        if not text:
            return
        self.notice_label.hide()
        self.input_box.clear()
        self.signals.chat_submitted.emit(text)

    @Slot(object)
    def _on_session_changed(self, view):
        self._entries = {}
        self.notice_label.hide()
        self.setEnabled(True)
        self._render()

    @Slot(object)
    def _on_transcript_loaded(self, view):
        # Persisted history arrives with the conversation detail
        self._entries = {entry.entry_id: entry for entry in view.chat_entries}
        self._render()

    @Slot(object)
    def _on_entry_appended(self, entry: ChatEntry):
        self._entries[entry.entry_id] = entry
        self._render()

    @Slot(object)
    def _on_entry_updated(self, entry: ChatEntry):
        self._entries[entry.entry_id] = entry
        self._render()

    @Slot(str)
    def _on_send_failed(self, message: str):
        self.notice_label.setText(f"Message not sent: {message}")
        self.notice_label.show()

    def _render(self):
        blocks = []
        for entry in sorted(self._entries.values(), key=lambda e: e.sequence):
            text = f"<b>{html.escape(entry.author)}:</b> {html.escape(entry.text)}"
            if entry.delivery == DeliveryStatus.PENDING:
                text += ' <span style="color: #9B9A97;">(sending...)</span>'
            elif entry.delivery == DeliveryStatus.FAILED:
                text += f' <span style="color: {ReviewColors.ERROR};">(not sent)</span>'
            blocks.append(f"<p>{text}</p>")

        self.history_view.setHtml("".join(blocks))
        scrollbar = self.history_view.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())
