from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error

class AppState(QObject):
    notification = Signal(object)   # emits Notify
    songs_changed = Signal()        # any add/update/delete
    admin_changed = Signal(bool)    # admin mode on/off

    def __init__(self):
        super().__init__()
        self.app_data_dir: str | None = None
        self.cache_dir: str | None = None
        self.db = None
        self.repository = None      # db.repository.SongRepository
        self.admin_gate = None      # core.admin_gate.AdminGate
        self.player = None
        self.is_admin = False
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))

    def set_admin(self, enabled: bool):
        if self.is_admin != enabled:
            self.is_admin = enabled
            self.admin_changed.emit(enabled)
