"""Application object: metadata, logging sinks and theme"""

import sys
from PySide6.QtWidgets import QApplication
from loguru import logger

from . import __version__
from .core.config import get_config_dir, get_config_manager
from .styles.theme import ThemeManager

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


class ConvoReviewApp(QApplication):
    """
    Qt application for ConvoReview.
    Logs to stderr at the configured level and to a rotating file in the
    config directory.
    """

    def __init__(self, argv: list[str] | None = None):
        super().__init__(sys.argv if argv is None else argv)

        self.setApplicationName("ConvoReview")
        self.setApplicationVersion(__version__)
        self.setOrganizationName("ConvoReview")

        self._setup_logging()
        ThemeManager.apply_light_theme(self)

    def _setup_logging(self) -> None:
        """Configure loguru sinks"""
        level = get_config_manager().config.log_level.upper()
        logger.remove()  # Remove default handler
        logger.add(sys.stderr, format=LOG_FORMAT, level=level)
        logger.add(
            get_config_dir() / "logs" / "convoreview.log",
            level="DEBUG",
            rotation="5 MB",
            retention=3,
            encoding="utf-8",
        )
        logger.info(f"ConvoReview {__version__} starting (log level {level})")
