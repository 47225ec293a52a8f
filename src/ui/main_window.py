import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QMessageBox, QLineEdit, QHBoxLayout,
    QSplitter, QComboBox, QToolButton, QPushButton, QStyle
)
from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QShortcut, QKeySequence, QDesktopServices

from core.audio_files import playable_source, read_audio_file_as_data_url
from core.audio_links import PlayerVariant, classify
from core.errors import SongbookError
from core.models import patch_changes, patch_from_draft
from db.database import get_config, set_config
from player.player import NowPlaying
from ui.dialogs.admin_login_dialog import AdminLoginDialog
from ui.dialogs.song_editor_dialog import SongEditorDialog
from ui.dialogs.tag_filter_dialog import TagFilterDialog
from ui.player_bar import PlayerBar
from ui.song_detail_view import SongDetailView
from ui.widgets.song_list_widget import SongListWidget
from ui.widgets.toast import ToastManager

logger = logging.getLogger(__name__)

SORT_OPTIONS = [("A → Z", "az"), ("Z → A", "za")]


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Songbook")
        self.resize(1000, 640)
        self.app_state = app_state
        self.repo = app_state.repository
        self.config = get_config(app_state.db)

        self._tags: list[str] = []

        # --- Shortcuts ---
        QShortcut(QKeySequence("Ctrl+F"), self, activated=lambda: self.search_box.setFocus())
        QShortcut(QKeySequence("Return"), self, activated=self._play_selected)
        if self.app_state.player:
            QShortcut(QKeySequence("Space"), self, activated=self.app_state.player.toggle_play_pause)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)

        # --- Top controls (search + sort + tags) ---
        top_bar = QHBoxLayout()

        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search songs / composers / lyrics / tags...")
        top_bar.addWidget(self.search_box, stretch=1)

        self.sort_combo = QComboBox()
        for label, key in SORT_OPTIONS:
            self.sort_combo.addItem(label, key)
        self.sort_combo.setCurrentIndex(max(0, self.sort_combo.findData(self.config.sort_key)))
        top_bar.addWidget(self.sort_combo)

        self.btn_tags = QPushButton("Tags")
        self.btn_tags.clicked.connect(self.open_tag_filter)
        top_bar.addWidget(self.btn_tags)

        top_bar.addStretch(1)

        # --- Admin actions (hidden until unlocked) ---
        self.btn_add = QPushButton("Add")
        self.btn_edit = QPushButton("Edit")
        self.btn_delete = QPushButton("Delete")
        self.btn_add.clicked.connect(self.add_song)
        self.btn_edit.clicked.connect(lambda: self.edit_song(self._current_song_id()))
        self.btn_delete.clicked.connect(lambda: self.delete_song(self._current_song_id()))
        for b in (self.btn_add, self.btn_edit, self.btn_delete):
            top_bar.addWidget(b)

        # --- Action icons (top-right) ---
        self.btn_view = QToolButton()
        self.btn_view.clicked.connect(self.toggle_view_mode)

        self.btn_admin = QToolButton()
        self.btn_admin.clicked.connect(self.toggle_admin)

        top_bar.addWidget(self.btn_view)
        top_bar.addWidget(self.btn_admin)

        self.layout.addLayout(top_bar)

        # --- List + detail ---
        splitter = QSplitter(Qt.Orientation.Horizontal)

        self.song_list = SongListWidget(self.app_state)
        splitter.addWidget(self.song_list)

        self.detail_view = SongDetailView()
        self.detail_view.show_none("Select a song to see lyrics")
        splitter.addWidget(self.detail_view)

        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        self.layout.addWidget(splitter, 1)

        self.player_bar = PlayerBar(self.app_state.player, self)
        self.layout.addWidget(self.player_bar)

        # --- Signals ---
        self.song_list.songSelected.connect(self.show_song)
        self.song_list.playSong.connect(self.play_song)
        self.song_list.editSong.connect(self.edit_song)
        self.song_list.deleteSong.connect(self.delete_song)

        self.detail_view.playRequested.connect(self.play_song)
        self.detail_view.openEmbedRequested.connect(self._open_embed)

        self.search_box.textChanged.connect(self._apply_filters)
        self.sort_combo.currentIndexChanged.connect(self._on_sort_changed)

        self.app_state.songs_changed.connect(self._apply_filters)
        self.app_state.admin_changed.connect(self._on_admin_changed)
        if self.app_state.player:
            self.app_state.player.errorOccurred.connect(
                lambda msg: self.app_state.notify(f"Playback failed: {msg}", "error")
            )

        # initial state
        self.song_list.setViewMode(self.config.view_mode)
        self._update_view_button()
        self._on_admin_changed(self.app_state.is_admin)
        self._apply_filters()
        self.show_queued_notifications()

        self.setStyleSheet(self.styleSheet() + """
            QToolButton {
                border: 1px solid transparent;
                background: transparent;
                padding: 6px;
                border-radius: 10px;
            }

            QToolButton:hover {
                background: #0b1222;
                border-color: #1f2937;
            }

            QToolButton:pressed {
                background: #0f172a;
            }
            """)

    # ------------------ filters ------------------
    def _apply_filters(self):
        self.song_list.setQuery(
            self.search_box.text(),
            self.sort_combo.currentData() or "az",
            self._tags,
        )
        count = self.song_list.row_count()
        total = self.repo.song_count()
        self.statusBar().showMessage(f"{count} of {total} songs")

        current = self.detail_view.current_song_id()
        if current is not None:
            if self.repo.get_by_id(current) is None:
                self.detail_view.show_none("Select a song to see lyrics")
            else:
                self.show_song(current)
                self.song_list.select_song(current)

    def _on_sort_changed(self, _index: int):
        self.config.sort_key = self.sort_combo.currentData() or "az"
        self._save_config()
        self._apply_filters()

    def open_tag_filter(self):
        tags = self.repo.list_tags()
        if not tags:
            self.app_state.notify("No tags available", "info")
            return

        dlg = TagFilterDialog(tags, self._tags, self)
        if dlg.exec():
            self._tags = dlg.selected_tags()
            self.btn_tags.setText(f"Tags ({len(self._tags)})" if self._tags else "Tags")
            self._apply_filters()

    # ------------------ view mode ------------------
    def toggle_view_mode(self):
        mode = "list" if self.song_list.viewMode() == "grid" else "grid"
        self.song_list.setViewMode(mode)
        self.config.view_mode = mode
        self._save_config()
        self._update_view_button()

    def _update_view_button(self):
        if self.song_list.viewMode() == "grid":
            self.btn_view.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
            self.btn_view.setToolTip("List view")
        else:
            self.btn_view.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogListView))
            self.btn_view.setToolTip("Grid view")

    def _save_config(self):
        try:
            set_config(self.app_state.db, self.config)
        except Exception as e:
            logger.error("Failed to save preferences: %s", e)
            self.app_state.notify(f"Failed to save preferences: {e}", "error")

    # ------------------ song detail + audio ------------------
    def show_song(self, song_id: str):
        song = self.repo.get_by_id(song_id)
        if song is None:
            self.detail_view.show_none("Song not found")
            return
        self.detail_view.set_song(song, classify(song.audio))

    def play_song(self, song_id: str):
        song = self.repo.get_by_id(song_id)
        if song is None:
            return
        self.show_song(song_id)

        audio = classify(song.audio)
        if audio.variant is PlayerVariant.NONE:
            self.app_state.notify("No audio available", "info")
            return
        if audio.invalid:
            self.app_state.notify(f"Invalid {audio.label} link", "warning")
            return
        if audio.variant is not PlayerVariant.DIRECT_FILE:
            self._open_embed(audio.embed_url)
            return

        if not self.app_state.player:
            self.app_state.notify("Audio playback is unavailable", "error")
            return

        try:
            source = playable_source(audio.source, self.app_state.cache_dir)
        except SongbookError as e:
            self.app_state.notify(str(e), "error")
            return

        meta = NowPlaying(song_id=song.id, name=song.name, composer=song.composer, source=source)
        self.app_state.player.play_source(source, meta)

    def _open_embed(self, url: str | None):
        if not url:
            return
        if not QDesktopServices.openUrl(QUrl(url)):
            self.app_state.notify("Could not open the player in a browser", "error")

    def _play_selected(self):
        song_id = self.song_list.selected_song_id()
        if song_id is not None:
            self.play_song(song_id)

    def _current_song_id(self) -> str | None:
        return self.song_list.selected_song_id() or self.detail_view.current_song_id()

    # ------------------ admin ------------------
    def toggle_admin(self):
        if self.app_state.is_admin:
            self.app_state.set_admin(False)
            self.app_state.notify("Admin mode off", "info")
            return

        dlg = AdminLoginDialog(self.app_state.admin_gate, self)
        if dlg.exec():
            self.app_state.set_admin(True)
            self.app_state.notify("Admin mode on", "success")

    def _on_admin_changed(self, enabled: bool):
        for b in (self.btn_add, self.btn_edit, self.btn_delete):
            b.setVisible(enabled)
        pixmap = QStyle.StandardPixmap.SP_DialogCloseButton if enabled else QStyle.StandardPixmap.SP_DialogApplyButton
        self.btn_admin.setIcon(self.style().standardIcon(pixmap))
        self.btn_admin.setToolTip("Leave admin mode" if enabled else "Admin login")

    def _read_audio(self, path: str | None) -> tuple[bool, str | None]:
        if not path:
            return True, None
        try:
            return True, read_audio_file_as_data_url(path)
        except SongbookError as e:
            self.app_state.notify(str(e), "error")
            return False, None

    def add_song(self):
        if not self.app_state.is_admin:
            return
        dlg = SongEditorDialog(parent=self)
        if not dlg.exec():
            return
        result = dlg.result_data()

        ok, file_data = self._read_audio(result.audio_path)
        if not ok:
            return

        try:
            song = self.repo.add(result.draft, file_data=file_data, url=result.audio_url)
        except SongbookError as e:
            self.app_state.notify(str(e), "error")
            return

        self.app_state.songs_changed.emit()
        self.show_song(song.id)
        self.song_list.select_song(song.id)
        self.app_state.notify(f"Added “{song.name}”", "success")

    def edit_song(self, song_id: str | None):
        if not self.app_state.is_admin or song_id is None:
            return
        song = self.repo.get_by_id(song_id)
        if song is None:
            self.app_state.notify("Song not found", "warning")
            return

        dlg = SongEditorDialog(song=song, parent=self)
        if not dlg.exec():
            return
        result = dlg.result_data()

        ok, file_data = self._read_audio(result.audio_path)
        if not ok:
            return

        patch = patch_from_draft(result.draft)
        new_audio = bool(file_data or result.audio_url)
        fields_changed = patch_changes(song, patch)
        if not new_audio and not fields_changed:
            self.app_state.notify("No changes", "info")
            return

        try:
            if fields_changed:
                updated = self.repo.update(song_id, patch, file_data=file_data, url=result.audio_url)
            else:
                updated = self.repo.update_audio_reference(song_id, file_data=file_data, url=result.audio_url)
        except SongbookError as e:
            self.app_state.notify(str(e), "error")
            return

        if not updated:
            self.app_state.notify("Song not found", "warning")
            return
        self.app_state.songs_changed.emit()
        self.app_state.notify("Song updated" if fields_changed else "Audio updated", "success")

    def delete_song(self, song_id: str | None):
        if not self.app_state.is_admin or song_id is None:
            return
        song = self.repo.get_by_id(song_id)
        if song is None:
            return

        res = QMessageBox.question(
            self,
            "Delete song",
            f"Delete “{song.name}”?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if res != QMessageBox.StandardButton.Yes:
            return

        try:
            removed = self.repo.delete(song_id)
        except SongbookError as e:
            self.app_state.notify(str(e), "error")
            return

        if removed:
            if self.app_state.player and self.app_state.player.track and self.app_state.player.track.song_id == song_id:
                self.app_state.player.stop()
            self.app_state.songs_changed.emit()
            self.app_state.notify(f"Deleted “{song.name}”", "success")

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        kind = (getattr(n, "notify_type", "info") or "info").lower()
        if kind == "warn":
            kind = "warning"

        msg = getattr(n, "message", "") or ""
        if not msg:
            return

        self.toasts.show_toast(msg, notify_type=kind, timeout_ms=3000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()
