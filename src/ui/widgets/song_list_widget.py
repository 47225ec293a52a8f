# ui/song_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt, QItemSelectionModel, QSize
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QTableView, QListView, QMenu, QStackedWidget, QLabel
)

from ui.models.song_table_model import SongTableModel
from core.audio_links import classify
from core.models import SongListRow


class SongListWidget(QWidget):
    songSelected = Signal(str)    # song_id
    playSong = Signal(str)        # song_id
    editSong = Signal(str)        # song_id
    deleteSong = Signal(str)      # song_id

    def __init__(self, app_state):
        super().__init__()
        self.app_state = app_state
        self._search = ""
        self._sort_key = "az"
        self._tags: list[str] = []
        self._view_mode = "list"

        self.model = SongTableModel([])

        # list view: one row per song
        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.setColumnWidth(0, 260)
        self.table.setColumnWidth(1, 180)
        self.table.setColumnWidth(2, 200)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setObjectName("SongTable")
        self.table.verticalHeader().setDefaultSectionSize(24)

        # grid view: same model, name column as tiles
        self.grid = QListView()
        self.grid.setModel(self.model)
        self.grid.setModelColumn(0)
        self.grid.setViewMode(QListView.ViewMode.IconMode)
        self.grid.setResizeMode(QListView.ResizeMode.Adjust)
        self.grid.setWrapping(True)
        self.grid.setGridSize(QSize(180, 64))
        self.grid.setUniformItemSizes(True)
        self.grid.setWordWrap(True)
        self.grid.setSelectionMode(QListView.SelectionMode.SingleSelection)
        self.grid.setObjectName("SongGrid")

        self.empty = QLabel("No songs found")
        self.empty.setAlignment(Qt.AlignCenter)
        self.empty.setObjectName("EmptyLabel")

        self.stack = QStackedWidget()
        self.stack.addWidget(self.table)
        self.stack.addWidget(self.grid)
        self.stack.addWidget(self.empty)

        for view in (self.table, self.grid):
            view.doubleClicked.connect(self._on_double_click)
            view.clicked.connect(self._on_clicked)
            view.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
            view.customContextMenuRequested.connect(
                lambda pos, v=view: self._on_context_menu(v, pos)
            )

        self._apply_styles()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.stack)

    # -------------------------
    # External API
    # -------------------------
    def setQuery(self, search: str, sort_key: str, tags: list[str]):
        self._search = search or ""
        self._sort_key = sort_key or "az"
        self._tags = list(tags or [])
        self.refresh()

    def setViewMode(self, mode: str):
        self._view_mode = "grid" if mode == "grid" else "list"
        self._show_current_view()

    def viewMode(self) -> str:
        return self._view_mode

    def refresh(self):
        repo = self.app_state.repository
        songs = repo.search(self._search, self._sort_key, self._tags)

        rows: list[SongListRow] = []
        for song in songs:
            rows.append(
                SongListRow(
                    song_id=song.id,
                    name=song.name,
                    composer=song.composer,
                    tags=tuple(song.tags),
                    audio_label=classify(repo.get_audio_reference(song.id)).label,
                )
            )

        self.model.set_rows(rows)
        self._show_current_view()

    def row_count(self) -> int:
        return self.model.rowCount()

    def selected_song_id(self) -> str | None:
        view = self._active_view()
        idx = view.currentIndex()
        if not idx.isValid():
            return None
        return self.model.song_id_at(idx.row())

    def select_song(self, song_id: str | None):
        view = self._active_view()
        if song_id is None:
            view.clearSelection()
            return

        row = self.model.row_for_song_id(song_id)
        if row < 0:
            return  # not in the current filtered view

        idx = self.model.index(row, 0)
        sm = view.selectionModel()
        if sm is None:
            return
        sm.setCurrentIndex(idx, QItemSelectionModel.ClearAndSelect | QItemSelectionModel.Rows)
        view.scrollTo(idx)

    # -------------------------
    # UI Events
    # -------------------------
    def _active_view(self):
        return self.grid if self._view_mode == "grid" else self.table

    def _show_current_view(self):
        if self.model.rowCount() == 0:
            self.stack.setCurrentWidget(self.empty)
        else:
            self.stack.setCurrentWidget(self._active_view())

    def _on_clicked(self, index):
        if not index.isValid():
            return
        song_id = self.model.song_id_at(index.row())
        if song_id is not None:
            self.songSelected.emit(song_id)

    def _on_double_click(self, index):
        if not index.isValid():
            return
        song_id = self.model.song_id_at(index.row())
        if song_id is not None:
            self.playSong.emit(song_id)

    def _on_context_menu(self, view, pos):
        idx = view.indexAt(pos)
        if not idx.isValid():
            return

        song_id = self.model.song_id_at(idx.row())
        if song_id is None:
            return

        menu = QMenu(self)
        act_play = menu.addAction("Play audio")
        act_edit = act_delete = None
        if self.app_state.is_admin:
            menu.addSeparator()
            act_edit = menu.addAction("Edit song…")
            act_delete = menu.addAction("Delete song")

        chosen = menu.exec(view.viewport().mapToGlobal(pos))
        if chosen is None:
            return
        if chosen == act_play:
            self.playSong.emit(song_id)
        elif chosen == act_edit:
            self.editSong.emit(song_id)
        elif chosen == act_delete:
            self.deleteSong.emit(song_id)

    def _apply_styles(self):
        self.setStyleSheet("""
        QTableView#SongTable, QListView#SongGrid {
            background-color: #020617;
            alternate-background-color: #030712;
            border: none;
            color: #e5e7eb;
            gridline-color: #020617;
            selection-background-color: rgba(56, 189, 248, 0.2);
            selection-color: #e5e7eb;
        }

        QListView#SongGrid::item {
            border: 1px solid #111827;
            border-radius: 10px;
            margin: 4px;
            padding: 6px;
        }

        QHeaderView::section {
            background-color: #020617;
            color: #9ca3af;
            padding: 4px 6px;
            border: none;
            border-bottom: 1px solid #111827;
            font-size: 11px;
            text-transform: uppercase;
            letter-spacing: 0.08em;
        }

        QTableView::item {
            padding: 4px 6px;
        }

        QLabel#EmptyLabel {
            color: #6b7280;
            font-size: 13px;
        }
        """)
