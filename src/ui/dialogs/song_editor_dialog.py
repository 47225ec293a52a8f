from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit, QPlainTextEdit,
    QPushButton, QFileDialog, QLabel, QMessageBox, QDialogButtonBox
)

from core.audio_links import classify
from core.models import Song, SongDraft, DEFAULT_DEMO_TEXT

AUDIO_FILE_FILTER = "Audio files (*.mp3 *.m4a *.aac *.ogg *.opus *.flac *.wav);;All files (*)"


@dataclass(frozen=True)
class SongEditorResult:
    draft: SongDraft
    audio_path: str | None   # local file picked by the user
    audio_url: str | None


class SongEditorDialog(QDialog):
    """
    Add a new song (song=None) or edit an existing one.
    Leaving both audio fields empty keeps the song's current audio.
    """
    def __init__(self, song: Song | None = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Song" if song else "Add Song")
        self.setModal(True)
        self.resize(560, 620)

        root = QVBoxLayout(self)

        form = QFormLayout()
        self.name_edit = QLineEdit()
        self.composer_edit = QLineEdit()
        self.tags_edit = QLineEdit()
        self.tags_edit.setPlaceholderText("hymn, worship, classic")
        self.demo_edit = QLineEdit()
        self.demo_edit.setPlaceholderText(DEFAULT_DEMO_TEXT)
        form.addRow("Name", self.name_edit)
        form.addRow("Composer", self.composer_edit)
        form.addRow("Tags", self.tags_edit)
        form.addRow("Demo label", self.demo_edit)

        # audio: a file or a link
        file_row = QHBoxLayout()
        self.file_edit = QLineEdit()
        self.file_edit.setReadOnly(True)
        self.file_edit.setPlaceholderText("No file selected")
        self.btn_browse = QPushButton("Browse…")
        self.btn_clear_file = QPushButton("Clear")
        file_row.addWidget(self.file_edit, 1)
        file_row.addWidget(self.btn_browse)
        file_row.addWidget(self.btn_clear_file)
        form.addRow("Audio file", file_row)

        self.url_edit = QLineEdit()
        self.url_edit.setPlaceholderText("YouTube, Google Drive, SoundCloud or direct audio link")
        form.addRow("Audio link", self.url_edit)

        self.current_audio = QLabel()
        self.current_audio.setStyleSheet("color: #9ca3af; font-size: 11px;")
        form.addRow("", self.current_audio)

        root.addLayout(form)

        root.addWidget(QLabel("Lyrics"))
        self.lyrics_edit = QPlainTextEdit()
        root.addWidget(self.lyrics_edit, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_save)
        buttons.rejected.connect(self.reject)
        root.addWidget(buttons)

        self.btn_browse.clicked.connect(self._browse)
        self.btn_clear_file.clicked.connect(self.file_edit.clear)

        if song:
            self._load(song)
        else:
            self.current_audio.setVisible(False)

    def _load(self, song: Song):
        self.name_edit.setText(song.name)
        self.composer_edit.setText(song.composer)
        self.tags_edit.setText(", ".join(song.tags))
        self.demo_edit.setText(song.demo_text if song.demo_text != DEFAULT_DEMO_TEXT else "")
        self.lyrics_edit.setPlainText(song.lyrics)

        label = classify(song.audio).label
        if label:
            self.current_audio.setText(f"Current audio: {label}. Leave both fields empty to keep it.")
        else:
            self.current_audio.setText("This song has no audio yet.")

    def _browse(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Audio File", "", AUDIO_FILE_FILTER)
        if path:
            self.file_edit.setText(path)

    def _on_save(self):
        if not self.name_edit.text().strip() or not self.composer_edit.text().strip():
            QMessageBox.warning(self, "Missing fields", "Please enter a name and a composer.")
            return
        self.accept()

    def result_data(self) -> SongEditorResult:
        draft = SongDraft(
            name=self.name_edit.text().strip(),
            composer=self.composer_edit.text().strip(),
            lyrics=self.lyrics_edit.toPlainText(),
            tags=self.tags_edit.text(),
            demo_text=self.demo_edit.text().strip() or None,
        )
        return SongEditorResult(
            draft=draft,
            audio_path=self.file_edit.text() or None,
            audio_url=self.url_edit.text().strip() or None,
        )
