import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.admin_gate import AdminGate
from core.errors import StorageError
from core.state import AppState, Notify
from db.database import initialize_database, table_columns
from db.repository import SongRepository
from player.player import Player
from ui.main_window import MainWindow

logger = logging.getLogger("songbook")

AUDIO_CACHE_DIR = "audio-cache"


def setup_logging() -> None:
    level = os.getenv("SONGBOOK_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def debug_print_schema(db) -> None:
    for table in ("kv_store", "config_data"):
        print(f"\n[{table} table schema]")
        for name, col_type in table_columns(db, table):
            print(f"- {name} ({col_type})")


def get_app_data_dir() -> str:
    base = os.getenv("SONGBOOK_DATA_DIR") or QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base


def init_app_state() -> AppState:
    app_state = AppState()

    app_data_dir = get_app_data_dir()
    app_state.app_data_dir = app_data_dir
    app_state.cache_dir = os.path.join(app_data_dir, AUDIO_CACHE_DIR)

    app_state.db = initialize_database(app_data_dir)

    if os.getenv("SONGBOOK_DEBUG_SCHEMA") == "1":
        debug_print_schema(app_state.db)

    app_state.repository = SongRepository(app_state.db)
    try:
        app_state.repository.initialize()
    except StorageError as e:
        logger.error("Could not save the initial song list: %s", e)
        app_state.queued_notifications.append(
            Notify(message=f"Songs could not be saved: {e}", notify_type="error")
        )

    app_state.admin_gate = AdminGate.from_env()
    if not app_state.admin_gate.configured:
        logger.warning("Admin credentials are not set; editing is disabled")

    try:
        app_state.player = Player()
    except Exception as e:
        logger.exception("Failed to initialize audio player")
        app_state.player = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    return app_state


def main() -> int:
    setup_logging()
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("Songbook")

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
