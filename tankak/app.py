"""Application entry point and setup for the Tankak typing tutor."""

import logging
import sys

from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication

from tankak.core.lessons import LessonRepository
from tankak.core.progress import ProgressStore
from tankak.ui.main_window import PracticeWindow

DEVANAGARI_FONTS = [
    "Noto Sans Devanagari",  # Linux (common)
    "Mangal",  # Windows
    "Kohinoor Devanagari",  # macOS
    "Lohit Devanagari",
]


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_font(app: QApplication) -> None:
    """Prefer a Devanagari-capable font; Qt falls back through the list."""
    app_font = QFont(app.font())
    app_font.setFamilies([app_font.family(), *DEVANAGARI_FONTS])
    app_font.setPointSize(11)
    app.setFont(app_font)
    QGuiApplication.setFont(app_font)
    logging.info("Font fallbacks: %s", ", ".join(DEVANAGARI_FONTS))


def run() -> None:
    """Initialize the application, load lessons and progress, and show the window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Tankak")
    app.setApplicationDisplayName("Tankak")

    configure_font(app)

    lessons = LessonRepository()
    progress_store = ProgressStore()

    window = PracticeWindow(lessons=lessons, progress_store=progress_store)
    window.resize(1000, 720)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
