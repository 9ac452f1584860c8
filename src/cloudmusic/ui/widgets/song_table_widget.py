# ui/widgets/song_table_widget.py
from __future__ import annotations

from PySide6.QtCore import QItemSelectionModel, Qt, Signal
from PySide6.QtWidgets import QMenu, QTableView, QVBoxLayout, QWidget

from cloudmusic.core.models import SongInfo
from cloudmusic.ui.models.song_table_model import SongTableModel

TABLE_STYLE = """
QTableView {
    background-color: #020617;
    alternate-background-color: #030712;
    border: none;
    color: #e5e7eb;
    gridline-color: #020617;
    selection-background-color: rgba(56, 189, 248, 0.2);
    selection-color: #e5e7eb;
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
"""


class SongTableWidget(QWidget):
    playSong = Signal(int)  # row

    def __init__(self, parent=None):
        super().__init__(parent)

        self.table = QTableView()
        self.model = SongTableModel()
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.verticalHeader().setDefaultSectionSize(24)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.setColumnWidth(0, 320)
        self.table.setColumnWidth(1, 180)
        self.table.setColumnWidth(2, 200)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setStyleSheet(TABLE_STYLE)

        self.table.doubleClicked.connect(self._on_double_click)
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    def set_songs(self, songs: list[SongInfo]) -> None:
        self.model.set_rows(songs)

    def songs(self) -> list[SongInfo]:
        return self.model.songs()

    def set_now_playing(self, song_id: int | None) -> None:
        if song_id is None:
            self.table.clearSelection()
            return
        row = self.model.row_for_song_id(song_id)
        if row < 0:
            return
        idx = self.model.index(row, 0)
        sm = self.table.selectionModel()
        if sm is None:
            return
        sm.setCurrentIndex(idx, QItemSelectionModel.SelectionFlag.ClearAndSelect | QItemSelectionModel.SelectionFlag.Rows)
        self.table.scrollTo(idx, QTableView.ScrollHint.PositionAtCenter)

    def _on_double_click(self, index):
        if index.isValid():
            self.playSong.emit(index.row())

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return
        menu = QMenu(self)
        act_play = menu.addAction("Play from here")
        if menu.exec(self.table.viewport().mapToGlobal(pos)) == act_play:
            self.playSong.emit(idx.row())
