# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt, QSize, QByteArray
from PySide6.QtGui import QIcon, QPixmap, QPainter
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QToolButton, QSlider
from PySide6.QtSvg import QSvgRenderer

def _fmt(ms: int) -> str:
    s = max(0, int(ms)) // 1000
    return f"{s // 60}:{s % 60:02d}"

def _svg_icon(path_d: str, size: int = 20, color: str = "#e5e7eb") -> QIcon:
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">'
        f'<path d="{path_d}" fill="{color}"/></svg>'
    )
    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)
    p = QPainter(pm)
    renderer.render(p)
    p.end()
    return QIcon(pm)

SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"
SVG_STOP = "M6 6h12v12H6z"

class PlayerBar(QWidget):
    """Transport for songs whose audio plays locally (stored files, direct links)."""

    def __init__(self, player, parent=None):
        super().__init__(parent)
        self.player = player
        self._dragging = False

        self._icon_play = _svg_icon(SVG_PLAY, 22)
        self._icon_pause = _svg_icon(SVG_PAUSE, 22)

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 6, 8, 6)
        root.setSpacing(10)

        self.btn_play = QToolButton()
        self.btn_play.setObjectName("BtnPlay")
        self.btn_play.setIcon(self._icon_play)
        self.btn_play.setIconSize(QSize(22, 22))
        self.btn_play.setToolTip("Play/Pause")
        self.btn_play.setEnabled(False)

        self.btn_stop = QToolButton()
        self.btn_stop.setIcon(_svg_icon(SVG_STOP, 18))
        self.btn_stop.setIconSize(QSize(18, 18))
        self.btn_stop.setToolTip("Stop")
        self.btn_stop.setEnabled(False)

        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_title.setObjectName("NowPlaying")

        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(1000)
        self.slider.setPageStep(5000)

        self.volume = QSlider(Qt.Orientation.Horizontal)
        self.volume.setRange(0, 100)
        self.volume.setValue(70)
        self.volume.setFixedWidth(90)
        self.volume.setToolTip("Volume")

        root.addWidget(self.btn_play)
        root.addWidget(self.btn_stop)
        root.addSpacing(6)
        root.addWidget(self.lbl_title, 1)
        root.addWidget(self.lbl_time)
        root.addWidget(self.slider, 3)
        root.addWidget(self.lbl_dur)
        root.addSpacing(6)
        root.addWidget(self.volume)

        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(lambda v: self.lbl_time.setText(_fmt(v)))

        if self.player:
            self.player.trackChanged.connect(self._on_track_changed)
            self.player.statusChanged.connect(self._on_status_changed)
            self.player.positionChanged.connect(self._on_position)
            self.player.durationChanged.connect(self._on_duration)
            self.player.ended.connect(lambda: self._on_position(0))
            self.volume.valueChanged.connect(lambda v: self.player.set_volume(v / 100))
            self.btn_play.clicked.connect(self.player.toggle_play_pause)
            self.btn_stop.clicked.connect(self.player.stop)
        else:
            self.setEnabled(False)
            self.lbl_title.setText("Audio playback unavailable")

        self.setObjectName("PlayerBar")
        self._apply_styles()

    def _on_slider_pressed(self):
        self._dragging = True

    def _on_slider_released(self):
        self._dragging = False
        if self.player:
            self.player.seek_ms(int(self.slider.value()))

    def _on_track_changed(self, now_playing):
        self.btn_play.setEnabled(now_playing is not None)
        self.btn_stop.setEnabled(now_playing is not None)
        if now_playing:
            self.lbl_title.setText(
                f"{now_playing.composer} — {now_playing.name}" if now_playing.composer else now_playing.name
            )
            return
        self.lbl_title.setText("Nothing playing")
        self.slider.setValue(0)
        self.lbl_time.setText("0:00")
        self.lbl_dur.setText("0:00")

    def _on_status_changed(self, status):
        playing = getattr(status, "name", "") == "PLAYING"
        self.btn_play.setIcon(self._icon_pause if playing else self._icon_play)
        self.btn_play.setToolTip("Pause" if playing else "Play")

    def _on_duration(self, ms: int):
        self.slider.setRange(0, max(0, int(ms)))
        self.lbl_dur.setText(_fmt(ms))

    def _on_position(self, ms: int):
        if self._dragging:
            return
        self.lbl_time.setText(_fmt(ms))
        self.slider.setValue(int(ms))

    def _apply_styles(self):
        self.setStyleSheet("""
        QWidget#PlayerBar {
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
        QLabel { color: #9ca3af; font-size: 11px; }
        QLabel#NowPlaying { color: #e5e7eb; font-size: 12px; }
        """)
