# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import QByteArray, QSize, Qt
from PySide6.QtGui import QIcon, QPainter, QPixmap
from PySide6.QtSvg import QSvgRenderer
from PySide6.QtWidgets import QHBoxLayout, QLabel, QSlider, QToolButton, QVBoxLayout, QWidget

from cloudmusic.core.lrc import line_at, parse_lrc


def _fmt(ms: int) -> str:
    s = max(0, int(ms)) // 1000
    return f"{s // 60}:{s % 60:02d}"


def _svg_icon(path_d: str, size: int = 20, color: str = "#e5e7eb") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.GlobalColor.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)


SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"


class PlayerBar(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.player = None

        self._dragging = False
        self._lrc: list[tuple[int, str]] = []

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 6, 8, 6)
        root.setSpacing(10)

        self.btn_prev = QToolButton()
        self.btn_prev.setIcon(_svg_icon(SVG_PREV, 20))
        self.btn_prev.setIconSize(QSize(20, 20))
        self.btn_prev.setToolTip("Previous")

        self.btn_play = QToolButton()
        self.btn_play.setObjectName("BtnPlay")
        self.btn_play.setIcon(_svg_icon(SVG_PLAY, 22))
        self.btn_play.setIconSize(QSize(22, 22))
        self.btn_play.setToolTip("Play/Pause")

        self.btn_next = QToolButton()
        self.btn_next.setIcon(_svg_icon(SVG_NEXT, 20))
        self.btn_next.setIconSize(QSize(20, 20))
        self.btn_next.setToolTip("Next")

        titles = QVBoxLayout()
        titles.setSpacing(2)
        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_title.setObjectName("NowPlaying")
        self.lbl_lyric = QLabel("")
        self.lbl_lyric.setObjectName("LyricLine")
        titles.addWidget(self.lbl_title)
        titles.addWidget(self.lbl_lyric)

        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(1000)
        self.slider.setPageStep(5000)

        self.volume = QSlider(Qt.Orientation.Horizontal)
        self.volume.setRange(0, 100)
        self.volume.setFixedWidth(90)
        self.volume.setToolTip("Volume")

        root.addWidget(self.btn_prev)
        root.addWidget(self.btn_play)
        root.addWidget(self.btn_next)
        root.addSpacing(6)
        root.addLayout(titles, 1)
        root.addWidget(self.lbl_time)
        root.addWidget(self.slider, 3)
        root.addWidget(self.lbl_dur)
        root.addSpacing(6)
        root.addWidget(self.volume)

        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(lambda v: self.lbl_time.setText(_fmt(v)))

        self.setObjectName("player_bar")
        self._apply_styles()

    def bind(self, player) -> None:
        self.player = player
        player.trackChanged.connect(self._on_track_changed)
        player.statusChanged.connect(self._on_status_changed)
        player.positionChanged.connect(self._on_position)
        player.durationChanged.connect(self._on_duration)
        self.btn_play.clicked.connect(player.toggle_play_pause)

        self.volume.setValue(round(player.volume() * 100))
        self.volume.valueChanged.connect(lambda v: player.set_volume(v / 100))

    def set_prev_next_handlers(self, prev_fn, next_fn):
        self.btn_prev.clicked.connect(prev_fn)
        self.btn_next.clicked.connect(next_fn)

    # --- surface updates ---
    def show_loading(self, song) -> None:
        self.lbl_title.setText(f"{song.display_title()}  (loading…)")
        self.set_lyrics("")

    def set_lyrics(self, text: str) -> None:
        self._lrc = parse_lrc(text)
        if self._lrc:
            self.lbl_lyric.setToolTip("")
            self.lbl_lyric.setText(line_at(self._lrc, self.player.position_ms() if self.player else 0))
        else:
            # Plain lyrics: nothing to follow, keep them one hover away.
            self.lbl_lyric.setText("")
            self.lbl_lyric.setToolTip(text)

    # --- slider handling ---
    def _on_slider_pressed(self):
        self._dragging = True

    def _on_slider_released(self):
        self._dragging = False
        if self.player:
            self.player.seek_ms(int(self.slider.value()))

    # --- player updates ---
    def _on_track_changed(self, song):
        if song:
            self.lbl_title.setText(song.display_title())
        else:
            self.lbl_title.setText("Nothing playing")
            self.slider.setValue(0)
            self.lbl_time.setText("0:00")
            self.lbl_dur.setText("0:00")
            self._set_playing(False)

    def _on_status_changed(self, status):
        self._set_playing(getattr(status, "name", "") == "PLAYING")

    def _set_playing(self, playing: bool):
        if playing:
            self.btn_play.setIcon(_svg_icon(SVG_PAUSE, 22))
            self.btn_play.setToolTip("Pause")
        else:
            self.btn_play.setIcon(_svg_icon(SVG_PLAY, 22))
            self.btn_play.setToolTip("Play")

    def _on_duration(self, ms: int):
        self.slider.setRange(0, max(0, int(ms)))
        self.lbl_dur.setText(_fmt(int(ms)))

    def _on_position(self, ms: int):
        if self._lrc:
            self.lbl_lyric.setText(line_at(self._lrc, int(ms)))
        if self._dragging:
            return
        self.lbl_time.setText(_fmt(int(ms)))
        self.slider.setValue(int(ms))

    def _apply_styles(self):
        self.setStyleSheet("""
        QWidget#player_bar {
            background-color: #020617;
            border-top: 1px solid #111827;
        }
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
        QToolButton#BtnPlay {
            background: #111827;
            border: 1px solid #1f2937;
            border-radius: 999px;
            padding: 8px;
        }
        QSlider::groove:horizontal {
            height: 4px;
            background: #0f172a;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            width: 12px;
            height: 12px;
            margin: -4px 0;
            border-radius: 6px;
            background: #38bdf8;
        }
        QSlider::sub-page:horizontal {
            background: #38bdf8;
            border-radius: 2px;
        }
        QLabel {
            color: #9ca3af;
            font-size: 11px;
        }
        QLabel#NowPlaying {
            color: #e5e7eb;
            font-size: 12px;
        }
        QLabel#LyricLine {
            color: #38bdf8;
        }
        """)
