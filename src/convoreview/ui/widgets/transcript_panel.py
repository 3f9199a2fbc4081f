"""Time-aligned transcript panel with active sentence and word highlight"""

import html
from typing import Optional

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QFrame,
    QScrollArea,
    QPushButton,
    QLineEdit,
)
from PySide6.QtCore import Qt, QTimer, Slot, Signal
from PySide6.QtGui import QFont

from ...signals import get_app_signals
from ...styles.colors import ReviewColors
from ...core.config import get_config_manager
from ...core.sync_resolver import ActivePosition
from ...core.transcript import TranscriptSentence, TranscriptStore
from .timeline_bar import format_timestamp


class SentenceBubble(QFrame):
    """Single transcript sentence; clicking it seeks to the sentence start"""

    seek_requested = Signal(int)  # sentence index

    def __init__(self, index: int, sentence: TranscriptSentence, speaker_color: str, parent=None):
        super().__init__(parent)
        self.setObjectName("sentenceBubble")
        self.setCursor(Qt.PointingHandCursor)
        self._index = index
        self._sentence = sentence
        self._is_active = False
        self._is_match = False
        self._active_word: Optional[int] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 10, 16, 10)
        layout.setSpacing(4)

        # Header row with speaker and timestamp
        header_layout = QHBoxLayout()
        header_layout.setSpacing(8)

        if sentence.speaker_label:
            speaker = QLabel(sentence.speaker_label)
            speaker.setStyleSheet(f"color: {speaker_color}; font-weight: 600; font-size: 12px;")
            header_layout.addWidget(speaker)

        time_label = QLabel(
            f"{format_timestamp(sentence.start_time)} - {format_timestamp(sentence.end_time)}"
        )
        time_label.setStyleSheet("color: #9B9A97; font-size: 11px;")
        header_layout.addWidget(time_label)
        header_layout.addStretch()
        layout.addLayout(header_layout)

        self.text_label = QLabel()
        self.text_label.setTextFormat(Qt.RichText)
        self.text_label.setWordWrap(True)
        self.text_label.setStyleSheet("color: #37352F; font-size: 13px;")
        layout.addWidget(self.text_label)

        self._render_text()
        self._update_style()

    @property
    def index(self) -> int:
        return self._index

    def set_active(self, active: bool, word_index: Optional[int] = None):
        word_index = word_index if active else None
        if active == self._is_active and word_index == self._active_word:
            return
        self._is_active = active
        self._active_word = word_index
        self._render_text()
        self._update_style()

    def set_match(self, match: bool):
        if match != self._is_match:
            self._is_match = match
            self._update_style()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.seek_requested.emit(self._index)
        super().mousePressEvent(event)

    def _render_text(self):
        sentence = self._sentence
        if self._active_word is None or not sentence.words:
            self.text_label.setText(html.escape(sentence.text))
            return

        parts = []
        for i, word in enumerate(sentence.words):
            text = html.escape(word.text.strip())
            if i == self._active_word:
                text = f'<span style="background-color: {ReviewColors.ACTIVE_WORD_BG};">{text}</span>'
            parts.append(text)
        self.text_label.setText(" ".join(parts))

    def _update_style(self):
        """Update bubble style based on state (active, search match)"""
        if self._is_active:
            background, border = ReviewColors.ACTIVE_SENTENCE_BG, ReviewColors.ACTIVE_SENTENCE_BORDER
        elif self._is_match:
            background, border = ReviewColors.SEARCH_MATCH_BG, ReviewColors.WARNING
        else:
            background, border = "#F7F7F5", "#E8E8E6"
        self.setStyleSheet(f"""
            QFrame#sentenceBubble {{
                background-color: {background};
                border: 1px solid {border};
                border-radius: 8px;
                margin: 2px 16px;
            }}
        """)


class TranscriptPanel(QWidget):
    """
    Panel displaying the transcript of the selected conversation.
    Highlights the sentence under the playhead and keeps it in view.
    Card-style design with header.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = get_app_signals()
        self.setObjectName("transcriptPanel")

        config = get_config_manager().config
        self._auto_scroll = config.auto_scroll_transcript
        self._highlight_words = config.highlight_active_word

        self._bubbles: list[SentenceBubble] = []
        self._store = TranscriptStore()
        self._active: Optional[ActivePosition] = None
        self._placeholder: Optional[QLabel] = None

        self._setup_ui()
        self._connect_signals()
        self._show_placeholder("Select a conversation to view its transcript")

    def _setup_ui(self):
        """Set up the panel UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Header (styled as card header)
        header_widget = QWidget()
        header_widget.setFixedHeight(52)

        header = QHBoxLayout(header_widget)
        header.setContentsMargins(20, 0, 20, 0)
        header.setSpacing(12)

        title = QLabel("Transcript")
        title.setObjectName("panelTitle")
        title_font = QFont()
        title_font.setPointSize(11)
        title_font.setWeight(QFont.DemiBold)
        title.setFont(title_font)
        header.addWidget(title)

        header.addStretch()

        # Status indicator
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #9B9A97; font-size: 11px;")
        header.addWidget(self.status_label)

        # Search within transcript
        self.search_box = QLineEdit()
        self.search_box.setObjectName("searchBox")
        self.search_box.setPlaceholderText("Search transcript...")
        self.search_box.setMaximumWidth(200)
        self.search_box.textChanged.connect(self._on_search_changed)
        header.addWidget(self.search_box)

        # Auto-scroll toggle
        self.auto_scroll_btn = QPushButton("Auto-scroll")
        self.auto_scroll_btn.setCheckable(True)
        self.auto_scroll_btn.setChecked(self._auto_scroll)
        self.auto_scroll_btn.clicked.connect(self._toggle_auto_scroll)
        header.addWidget(self.auto_scroll_btn)

        layout.addWidget(header_widget)

        # Scroll area for sentences
        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.scroll_area.setFrameShape(QFrame.NoFrame)

        self.sentences_container = QWidget()
        self.sentences_container.setStyleSheet("background-color: #FFFFFF;")
        self.sentences_layout = QVBoxLayout(self.sentences_container)
        self.sentences_layout.setContentsMargins(0, 12, 0, 20)
        self.sentences_layout.setSpacing(6)
        self.sentences_layout.addStretch()

        self.scroll_area.setWidget(self.sentences_container)
        layout.addWidget(self.scroll_area)

    def _connect_signals(self):
        """Connect to app signals"""
        self.signals.session_changed.connect(self._on_session_changed)
        self.signals.transcript_loaded.connect(self._on_transcript_loaded)
        self.signals.transcript_failed.connect(self._on_transcript_failed)
        self.signals.active_position_changed.connect(self.set_active_position)

    def _show_placeholder(self, text: str, color: str = "#9B9A97"):
        """Show placeholder text instead of sentences"""
        self._hide_placeholder()
        self._placeholder = QLabel(text)
        self._placeholder.setAlignment(Qt.AlignCenter)
        self._placeholder.setWordWrap(True)
        self._placeholder.setStyleSheet(f"color: {color}; font-size: 13px; padding: 40px;")
        self.sentences_layout.insertWidget(0, self._placeholder)

    def _hide_placeholder(self):
        if self._placeholder:
            self._placeholder.deleteLater()
            self._placeholder = None

    def clear_transcript(self):
        """Remove all sentence bubbles"""
        for bubble in self._bubbles:
            bubble.deleteLater()
        self._bubbles.clear()
        self._store = TranscriptStore()
        self._active = None
        self.status_label.setText("")

    @Slot(object)
    def _on_session_changed(self, view):
        self.clear_transcript()
        self.search_box.clear()
        self.status_label.setText("Loading...")
        self._show_placeholder("Loading transcript...")

    @Slot(object)
    def _on_transcript_loaded(self, view):
        self.clear_transcript()
        self._hide_placeholder()

        if view.show_empty_transcript:
            self._show_placeholder("No transcript yet for this conversation")
            return

        speakers: dict[str, str] = {}
        for index, sentence in enumerate(view.sentences):
            label = sentence.speaker_label or ""
            if label not in speakers:
                speakers[label] = ReviewColors.speaker_color(len(speakers))
            bubble = SentenceBubble(index, sentence, speakers[label])
            bubble.seek_requested.connect(self.signals.sentence_seek_requested.emit)
            self.sentences_layout.insertWidget(self.sentences_layout.count() - 1, bubble)
            self._bubbles.append(bubble)

        self._store = TranscriptStore(list(view.sentences))
        self.status_label.setText(f"{len(self._bubbles)} sentences")
        self.set_active_position(view.active)

    @Slot(str)
    def _on_transcript_failed(self, message: str):
        self.clear_transcript()
        self._show_placeholder(f"No transcript: {message}", ReviewColors.ERROR)
        self.status_label.setText("Unavailable")

    @Slot(object)
    def set_active_position(self, active: Optional[ActivePosition]):
        """Move the highlight; None leaves the transcript unhighlighted"""
        previous = self._active
        self._active = active

        if previous is not None and previous.sentence_index < len(self._bubbles):
            if active is None or active.sentence_index != previous.sentence_index:
                self._bubbles[previous.sentence_index].set_active(False)

        if active is None or active.sentence_index >= len(self._bubbles):
            return

        word = active.word_index if self._highlight_words else None
        bubble = self._bubbles[active.sentence_index]
        bubble.set_active(True, word)

        if self._auto_scroll and (previous is None or previous.sentence_index != active.sentence_index):
            QTimer.singleShot(10, lambda: self._scroll_to_bubble(bubble))

    def _scroll_to_bubble(self, bubble: SentenceBubble):
        # The transcript may have been cleared before a delayed scroll fires
        if bubble in self._bubbles:
            self.scroll_area.ensureWidgetVisible(bubble, 0, 80)

    def _on_search_changed(self, text: str):
        """Highlight sentences containing the search text"""
        matches = set(self._store.find(text))
        first_match = None
        for bubble in self._bubbles:
            match = bubble.index in matches
            bubble.set_match(match)
            if match and first_match is None:
                first_match = bubble
        if first_match is not None:
            self.scroll_area.ensureWidgetVisible(first_match, 0, 80)

    def _toggle_auto_scroll(self, checked: bool):
        """Toggle auto-scroll behavior"""
        self._auto_scroll = checked
        if checked and self._active is not None and self._active.sentence_index < len(self._bubbles):
            self.scroll_area.ensureWidgetVisible(self._bubbles[self._active.sentence_index], 0, 80)
