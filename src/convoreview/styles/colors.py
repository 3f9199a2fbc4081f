"""Notion-inspired color definitions for the light theme"""


class ReviewColors:
    """
    Notion-style color palette for bright/light mode.
    Clean, minimal, professional appearance.
    """

    # Primary brand color
    PRIMARY = "#2383E2"
    PRIMARY_HOVER = "#0077D4"
    PRIMARY_LIGHT = "#E8F4FD"

    # Background colors
    BACKGROUND = "#FFFFFF"
    BACKGROUND_SECONDARY = "#FBFBFA"
    BACKGROUND_TERTIARY = "#F7F6F3"

    # Text colors
    TEXT_PRIMARY = "#37352F"
    TEXT_SECONDARY = "#787774"
    TEXT_TERTIARY = "#9B9A97"

    # Border colors
    BORDER = "#E5E5E5"

    # Status colors
    SUCCESS = "#0F7B6C"
    WARNING = "#D9730D"
    ERROR = "#E03E3E"
    ERROR_BG = "#FBE4E4"

    # Transcript highlight
    ACTIVE_SENTENCE_BG = "#E8F4FD"
    ACTIVE_SENTENCE_BORDER = "#2383E2"
    ACTIVE_WORD_BG = "#FFE58F"
    SEARCH_MATCH_BG = "#FAEBDD"

    # Speaker colors, cycled by order of first appearance
    SPEAKER_COLORS = [
        "#2383E2",  # Blue
        "#0F7B6C",  # Green/Teal
        "#D9730D",  # Orange
        "#9B51E0",  # Purple
        "#E03E3E",  # Red
        "#0E7C86",  # Cyan
        "#AD5700",  # Brown
        "#5E5E5E",  # Gray
    ]

    @classmethod
    def palette(cls) -> dict[str, str]:
        """Named colours for stylesheet substitution"""
        return {
            name: value
            for name, value in vars(cls).items()
            if name.isupper() and isinstance(value, str)
        }

    @classmethod
    def speaker_color(cls, index: int) -> str:
        return cls.SPEAKER_COLORS[index % len(cls.SPEAKER_COLORS)]
