"""Allow running ConfTimer as a module: python -m conftimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .log import configure_logging
from .settings import load_settings
from .app import ConferenceTimerApp

log = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, console=settings.console_logging)
    if settings.record_sessions:
        init_db()
    log.info("ConfTimer ready")

    app = QApplication(sys.argv)
    app.setApplicationName("ConfTimer")
    app.setOrganizationName("ConfTimer")

    window = ConferenceTimerApp(settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
