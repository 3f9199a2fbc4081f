"""Sidebar widget with the conversation list - Notion style"""

from typing import Optional

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QLabel,
)
from PySide6.QtCore import Qt, Signal, QTimer, Slot

from ...signals import get_app_signals
from ...core.conversation import ConversationSummary


class SidebarWidget(QWidget):
    """
    Left sidebar listing conversations available for review.
    Search text is sent to the server after a short pause in typing.
    """

    search_requested = Signal(str)
    refresh_requested = Signal()

    SEARCH_DELAY_MS = 300

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = get_app_signals()
        self.setObjectName("sidebar")
        self.setMinimumWidth(240)
        self.setMaximumWidth(300)

        self._selected_id: Optional[str] = None

        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(self.SEARCH_DELAY_MS)
        self._search_timer.timeout.connect(self._emit_search)

        self._setup_ui()
        self._connect_signals()

    def _setup_ui(self):
        """Set up the sidebar UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Sidebar header section
        header = QWidget()
        header.setObjectName("sidebarHeader")
        header.setStyleSheet("""
            QWidget#sidebarHeader {
                background-color: #FFFFFF;
                border-bottom: 1px solid #E8E8E8;
            }
        """)
        header.setFixedHeight(48)
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(16, 0, 16, 0)

        title = QLabel("Conversations")
        title.setObjectName("sidebarTitle")
        title.setStyleSheet("""
            font-size: 13px;
            font-weight: 600;
            color: #37352F;
        """)
        header_layout.addWidget(title)

        header_layout.addStretch()

        refresh_btn = QPushButton("↻")
        refresh_btn.setFixedSize(24, 24)
        refresh_btn.setStyleSheet("""
            QPushButton {
                background-color: transparent;
                border: none;
                border-radius: 4px;
                font-size: 14px;
                color: #787774;
            }
            QPushButton:hover {
                background-color: #F0F0F0;
                color: #37352F;
            }
        """)
        refresh_btn.clicked.connect(self._on_refresh_clicked)
        refresh_btn.setToolTip("Refresh")
        header_layout.addWidget(refresh_btn)

        layout.addWidget(header)

        # Search box
        search_container = QWidget()
        search_container.setStyleSheet("background-color: #FFFFFF;")
        search_layout = QVBoxLayout(search_container)
        search_layout.setContentsMargins(12, 10, 12, 10)

        self.search_box = QLineEdit()
        self.search_box.setObjectName("searchBox")
        self.search_box.setPlaceholderText("Search conversations...")
        self.search_box.setClearButtonEnabled(True)
        self.search_box.textChanged.connect(self._on_search_changed)
        search_layout.addWidget(self.search_box)

        layout.addWidget(search_container)

        # Conversation list
        self.conversation_list = QListWidget()
        self.conversation_list.setObjectName("conversationList")
        self.conversation_list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self.conversation_list, stretch=1)

        # Footer status
        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet("""
            background-color: #FAFAFA;
            border-top: 1px solid #E8E8E8;
            color: #9B9A97;
            font-size: 11px;
            padding: 8px 12px;
        """)
        layout.addWidget(self.status_label)

    def _connect_signals(self):
        """Connect to app signals"""
        self.signals.conversations_loaded.connect(self.set_conversations)
        self.signals.conversations_failed.connect(self._on_conversations_failed)
        self.signals.conversation_selected.connect(self._on_external_selection)

    def _on_search_changed(self, text: str):
        """Restart the search delay on every keystroke"""
        self._search_timer.start()

    def _emit_search(self):
        self.status_label.setText("Searching...")
        self.search_requested.emit(self.search_box.text().strip())

    def _on_refresh_clicked(self):
        self._search_timer.stop()
        self.status_label.setText("Loading...")
        query = self.search_box.text().strip()
        if query:
            self.search_requested.emit(query)
        else:
            self.refresh_requested.emit()

    @Slot(object)
    def set_conversations(self, conversations: list[ConversationSummary]):
        """Replace the list contents, keeping the current selection highlighted"""
        self.conversation_list.clear()
        for summary in conversations:
            item = QListWidgetItem(summary.display_name)
            item.setData(Qt.UserRole, summary.id)
            if summary.updated_at or summary.created_at:
                item.setToolTip(f"Updated {summary.updated_at or summary.created_at}")
            self.conversation_list.addItem(item)
            if summary.id == self._selected_id:
                item.setSelected(True)

        count = len(conversations)
        self.status_label.setText(
            "No conversations found" if count == 0 else f"{count} conversation{'s' if count != 1 else ''}"
        )

    @Slot(str)
    def _on_conversations_failed(self, message: str):
        self.status_label.setText(f"Could not load conversations: {message}")

    def _on_item_clicked(self, item: QListWidgetItem):
        """Handle conversation click"""
        conversation_id = item.data(Qt.UserRole)
        if conversation_id:
            self.signals.conversation_selected.emit(conversation_id, item.text())

    @Slot(str, str)
    def _on_external_selection(self, conversation_id: str, name: str):
        self._selected_id = conversation_id
        for row in range(self.conversation_list.count()):
            item = self.conversation_list.item(row)
            item.setSelected(item.data(Qt.UserRole) == conversation_id)

    def get_selected_conversation(self) -> str | None:
        """Get the currently selected conversation id"""
        return self._selected_id
