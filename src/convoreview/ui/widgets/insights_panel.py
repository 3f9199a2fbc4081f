"""Summary and action items for the selected conversation"""

import html

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QTabWidget,
    QTextBrowser,
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QFont

from ...signals import get_app_signals


INSIGHTS_STYLE = """
<style>
    body { font-family: 'Segoe UI', sans-serif; line-height: 1.6; color: #37352F; }
    li { margin-bottom: 8px; }
    .empty { color: #9B9A97; }
</style>
"""


class InsightsPanel(QWidget):
    """
    Read-only view of the conversation's generated summary and action items.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = get_app_signals()
        self.setObjectName("insightsPanel")

        self._setup_ui()
        self._connect_signals()
        self._show_empty("Select a conversation")

    def _setup_ui(self):
        """Set up the panel UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header_widget = QWidget()
        header_widget.setFixedHeight(44)
        header = QHBoxLayout(header_widget)
        header.setContentsMargins(12, 0, 12, 0)

        title = QLabel("Insights")
        title.setObjectName("panelTitle")
        title_font = QFont()
        title_font.setPointSize(11)
        title_font.setWeight(QFont.DemiBold)
        title.setFont(title_font)
        header.addWidget(title)
        header.addStretch()
        layout.addWidget(header_widget)

        self.tabs = QTabWidget()
        self.tabs.setDocumentMode(True)

        self.summary_view = QTextBrowser()
        self.tabs.addTab(self.summary_view, "Summary")

        self.actions_view = QTextBrowser()
        self.tabs.addTab(self.actions_view, "Action Items")

        layout.addWidget(self.tabs)

    def _connect_signals(self):
        """Connect to app signals"""
        self.signals.session_changed.connect(self._on_session_changed)
        self.signals.transcript_loaded.connect(self.show_insights)
        self.signals.transcript_failed.connect(self._on_transcript_failed)

    def _show_empty(self, message: str):
        text = f'{INSIGHTS_STYLE}<p class="empty">{html.escape(message)}</p>'
        self.summary_view.setHtml(text)
        self.actions_view.setHtml(text)

    @Slot(object)
    def _on_session_changed(self, view):
        self._show_empty("Loading...")

    @Slot(str)
    def _on_transcript_failed(self, message: str):
        self._show_empty("Conversation details unavailable")

    @Slot(object)
    def show_insights(self, view):
        """Render summary and action items from a session view model"""
        if view.summary:
            paragraphs = "".join(
                f"<p>{html.escape(p)}</p>" for p in view.summary.split("\n") if p.strip()
            )
            self.summary_view.setHtml(INSIGHTS_STYLE + paragraphs)
        else:
            self.summary_view.setHtml(f'{INSIGHTS_STYLE}<p class="empty">No summary yet</p>')

        if view.action_items:
            items = "".join(f"<li>{html.escape(item)}</li>" for item in view.action_items)
            self.actions_view.setHtml(f"{INSIGHTS_STYLE}<ul>{items}</ul>")
        else:
            self.actions_view.setHtml(f'{INSIGHTS_STYLE}<p class="empty">No action items</p>')
