"""Theme and colour definitions"""

from .colors import ReviewColors
from .theme import ThemeManager

__all__ = ["ReviewColors", "ThemeManager"]
