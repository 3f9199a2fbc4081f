"""Theme manager: renders the palette into the stylesheet and applies it"""

from pathlib import Path
from string import Template

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QFont
from loguru import logger

from .colors import ReviewColors


class ThemeManager:
    """Loads review_light.qss with ReviewColors substituted for $NAME placeholders"""

    STYLES_DIR = Path(__file__).parent
    LIGHT_THEME = "review_light.qss"

    @classmethod
    def render_stylesheet(cls, name: str = LIGHT_THEME) -> str:
        """Stylesheet text with palette colours filled in; empty if missing"""
        qss_path = cls.STYLES_DIR / name
        try:
            template = Template(qss_path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning(f"Theme file not readable: {qss_path} ({e})")
            return ""
        return template.safe_substitute(ReviewColors.palette())

    @classmethod
    def apply_light_theme(cls, app: QApplication) -> None:
        """Apply the light theme to the application"""
        font = QFont()
        font.setFamily("Segoe UI")
        font.setPointSize(10)
        font.setStyleStrategy(QFont.PreferAntialias)
        app.setFont(font)

        stylesheet = cls.render_stylesheet()
        if stylesheet:
            app.setStyleSheet(stylesheet)
            logger.info(f"Applied theme {cls.LIGHT_THEME}")
