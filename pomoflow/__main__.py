"""Allow running Pomoflow as a module: python -m pomoflow."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import PomoflowApp


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomoflow")


def main() -> None:
    logger = setup_logging()
    init_db()
    logger.info("Pomoflow ready")

    app = QApplication(sys.argv)
    app.setApplicationName("Pomoflow")
    app.setOrganizationName("Pomoflow")
    app.setQuitOnLastWindowClosed(False)

    window = PomoflowApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
