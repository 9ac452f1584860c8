# ui/widgets/song_list_widget.py
from __future__ import annotations

from typing import Iterable

from PySide6.QtCore import QModelIndex, Qt, Signal
from PySide6.QtGui import QStandardItem, QStandardItemModel
from PySide6.QtWidgets import QHeaderView, QTableView, QVBoxLayout, QWidget

from cloudmusic.core.models import SongList
from cloudmusic.ui.widgets.song_table_widget import TABLE_STYLE


class SongListWidget(QWidget):
    """Table of playlists; double click opens one."""

    openSongList = Signal(object)  # SongList

    def __init__(self, parent=None):
        super().__init__(parent)
        self._lists: list[SongList] = []

        self.table = QTableView()
        self.model = QStandardItemModel(0, 1, self)
        self.model.setHorizontalHeaderLabels(["Playlist"])
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.verticalHeader().setDefaultSectionSize(24)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.setStyleSheet(TABLE_STYLE)

        self.table.doubleClicked.connect(self._on_double_click)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.table)

    def set_rows(self, rows: Iterable[SongList]) -> None:
        self._lists = list(rows)
        self.model.setRowCount(0)
        for sl in self._lists:
            it = QStandardItem(sl.name)
            it.setEditable(False)
            it.setToolTip(sl.cover_img_url)
            self.model.appendRow([it])

    def rows(self) -> list[SongList]:
        return list(self._lists)

    def _on_double_click(self, index: QModelIndex):
        if not index.isValid() or index.row() >= len(self._lists):
            return
        self.openSongList.emit(self._lists[index.row()])
