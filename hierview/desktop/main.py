"""Application entry point"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from PySide6.QtWidgets import QApplication

from hierview.config import settings
from hierview.desktop.ui.main_window import MainWindow


def setup_logging():
    """Configure logging with file output"""
    logs_dir = Path(settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "desktop.log"

    handlers = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ]

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("=== hierview desktop starting ===")
    logger.info(f"Logs written to: {log_file}")


def main():
    """Main entry point"""
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("hierview")

    window = MainWindow()
    window.show()
    window.load_tree()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
