"""Application entry point"""

import sys
from loguru import logger

from .app import ConvoReviewApp
from .ui.main_window import MainWindow


def main() -> int:
    """Run the review window until it is closed"""
    try:
        app = ConvoReviewApp()
        window = MainWindow()
        window.show()
        return app.exec()
    except Exception as e:
        logger.exception(f"ConvoReview failed to start: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
