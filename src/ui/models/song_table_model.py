# ui/song_table_model.py
from __future__ import annotations
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from core.models import SongListRow

HEADERS = ["Song", "Composer", "Tags", "Audio"]

class SongTableModel(QAbstractTableModel):
    def __init__(self, rows):
        super().__init__()
        self._rows: list[SongListRow] = list(rows)

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return len(HEADERS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return HEADERS[section]

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == 0:
                return row.name
            if col == 1:
                return row.composer
            if col == 2:
                return ", ".join(row.tags)
            if col == 3:
                return row.audio_label
        if role == Qt.ToolTipRole and col == 0:
            return f"{row.name}\n{row.composer}" if row.composer else row.name
        if role == Qt.UserRole:
            return row
        return None

    def song_id_at(self, row: int) -> str | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row].song_id

    def row_for_song_id(self, song_id: str) -> int:
        for i, r in enumerate(self._rows):
            if r.song_id == song_id:
                return i
        return -1
