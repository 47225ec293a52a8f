# ui/song_detail_view.py
from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QStackedWidget,
    QPlainTextEdit, QPushButton, QHBoxLayout, QFrame
)

from core.audio_links import Classification, PlayerVariant
from core.models import Song

_INVALID_LINK_TEXT = {
    PlayerVariant.YOUTUBE: "Invalid YouTube URL",
    PlayerVariant.GOOGLE_DRIVE: "Invalid Google Drive URL",
}


class SongDetailView(QWidget):
    """
    Right-side panel for one song:
      - header: name, composer, demo label
      - audio row: play button (direct files), open button (embeds),
        or a message (invalid link / no audio)
      - lyrics, read only
      - tags as #tag
    """
    playRequested = Signal(str)        # song_id
    openEmbedRequested = Signal(str)   # embed url

    def __init__(self, parent=None):
        super().__init__(parent)

        self._song_id: str | None = None
        self._embed_url: str | None = None

        root = QVBoxLayout(self)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)

        self.stack = QStackedWidget()
        root.addWidget(self.stack, 1)

        # --- page 0: message ---
        self.msg = QLabel("Select a song")
        self.msg.setAlignment(Qt.AlignCenter)
        self.msg.setWordWrap(True)
        self.msg.setObjectName("DetailMessage")
        self.stack.addWidget(self.msg)

        # --- page 1: song ---
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.title = QLabel()
        self.title.setObjectName("SongTitle")
        self.title.setWordWrap(True)
        layout.addWidget(self.title)

        self.composer = QLabel()
        self.composer.setObjectName("SongComposer")
        layout.addWidget(self.composer)

        audio_box = QFrame()
        audio_box.setObjectName("AudioBox")
        audio_layout = QVBoxLayout(audio_box)
        audio_layout.setContentsMargins(10, 8, 10, 8)

        self.demo_label = QLabel()
        self.demo_label.setObjectName("DemoLabel")
        audio_layout.addWidget(self.demo_label)

        audio_row = QHBoxLayout()
        self.audio_status = QLabel()
        self.audio_status.setObjectName("AudioStatus")
        self.audio_status.setWordWrap(True)
        audio_row.addWidget(self.audio_status, 1)

        self.btn_play = QPushButton("Play")
        self.btn_play.clicked.connect(self._emit_play)
        audio_row.addWidget(self.btn_play)

        self.btn_open = QPushButton("Open player")
        self.btn_open.clicked.connect(self._emit_open)
        audio_row.addWidget(self.btn_open)

        audio_layout.addLayout(audio_row)
        layout.addWidget(audio_box)

        self.lyrics = QPlainTextEdit()
        self.lyrics.setReadOnly(True)
        self.lyrics.setObjectName("Lyrics")
        layout.addWidget(self.lyrics, 1)

        self.tags = QLabel()
        self.tags.setObjectName("SongTags")
        self.tags.setWordWrap(True)
        self.tags.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.tags)

        self.stack.addWidget(page)
        self._page_song = page

        self._apply_styles()

    # -------------------------
    # External API
    # -------------------------
    def show_none(self, message: str):
        self._song_id = None
        self._embed_url = None
        self.msg.setText(message)
        self.stack.setCurrentWidget(self.msg)

    def current_song_id(self) -> str | None:
        return self._song_id

    def set_song(self, song: Song, audio: Classification):
        self._song_id = song.id
        self._embed_url = audio.embed_url

        self.title.setText(song.name)
        self.composer.setText(f"by {song.composer}" if song.composer else "")
        self.demo_label.setText(song.demo_text)
        self.lyrics.setPlainText(song.lyrics)
        self.tags.setText(" ".join(f"#{t}" for t in song.tags))

        self.btn_play.setVisible(False)
        self.btn_open.setVisible(False)

        if audio.variant is PlayerVariant.NONE:
            self.audio_status.setText("No audio available")
        elif audio.invalid:
            self.audio_status.setText(_INVALID_LINK_TEXT.get(audio.variant, "Invalid link"))
        elif audio.variant is PlayerVariant.DIRECT_FILE:
            self.audio_status.setText("Audio file")
            self.btn_play.setVisible(True)
        else:
            self.audio_status.setText(audio.label)
            self.btn_open.setVisible(bool(self._embed_url))

        self.stack.setCurrentWidget(self._page_song)

    # -------------------------
    # Internals
    # -------------------------
    def _emit_play(self):
        if self._song_id is not None:
            self.playRequested.emit(self._song_id)

    def _emit_open(self):
        if self._embed_url:
            self.openEmbedRequested.emit(self._embed_url)

    def _apply_styles(self):
        self.setStyleSheet("""
        QLabel#DetailMessage { color: #6b7280; }
        QLabel#SongTitle { font-weight: 650; font-size: 16px; }
        QLabel#SongComposer { color: #9ca3af; font-style: italic; }
        QFrame#AudioBox {
            border: 1px solid #1f2937;
            border-radius: 10px;
        }
        QLabel#DemoLabel { font-weight: 600; }
        QLabel#AudioStatus { color: #9ca3af; font-size: 11px; }
        QPlainTextEdit#Lyrics { border: none; font-size: 13px; }
        QLabel#SongTags { color: #9ca3af; font-size: 11px; }
        """)
