# ui/models/song_table_model.py
from __future__ import annotations

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from cloudmusic.core.models import SongInfo


def fmt_duration(ms: int | None) -> str:
    if not ms:
        return ""
    s = int(ms) // 1000
    return f"{s // 60}:{s % 60:02d}"


class SongTableModel(QAbstractTableModel):
    HEADERS = ["Title", "Artist", "Album", "Duration"]

    def __init__(self, rows=()):
        super().__init__()
        self._rows: list[SongInfo] = list(rows)

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return len(self.HEADERS)

    def headerData(self, section, orientation, role=Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole or orientation != Qt.Orientation.Horizontal:
            return None
        return self.HEADERS[section]

    def data(self, index: QModelIndex, role=Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        song = self._rows[index.row()]
        col = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0:
                return song.name
            if col == 1:
                return song.singer
            if col == 2:
                return song.album
            if col == 3:
                return fmt_duration(song.duration_ms)
        if role == Qt.ItemDataRole.UserRole:
            return song
        return None

    def songs(self) -> list[SongInfo]:
        return list(self._rows)

    def row_for_song_id(self, song_id: int) -> int:
        for i, s in enumerate(self._rows):
            if s.id == song_id:
                return i
        return -1
