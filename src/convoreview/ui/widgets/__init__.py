"""Reusable UI widgets"""

from .sidebar import SidebarWidget
from .timeline_bar import TimelineBar, format_timestamp
from .transcript_panel import TranscriptPanel, SentenceBubble
from .chat_panel import ChatPanel
from .insights_panel import InsightsPanel

__all__ = [
    "SidebarWidget",
    "TimelineBar",
    "format_timestamp",
    "TranscriptPanel",
    "SentenceBubble",
    "ChatPanel",
    "InsightsPanel",
]
