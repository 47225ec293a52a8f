# db/repository.py
"""
SongRepository: the only owner of the song list and the audio map.

Both live in memory and are written back to the kv_store table as two JSON
values ("songs", "audioData") after every mutation, in one transaction.
Construct one per process, call initialize(), and hand it to the UI.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import time
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterable, Optional

from core.audio_links import make_audio_reference
from core.errors import StorageError
from core.models import (
    AudioReference, Song, SongDraft, SongPatch, merge_song, new_song,
)
from core.utils import any_contains_folded, collation_key, contains_folded
from db.database import get_value, set_values
from db.seed_data import SEED_SONGS

logger = logging.getLogger(__name__)

SONGS_KEY = "songs"
AUDIO_KEY = "audioData"

SORT_ASCENDING = "az"
SORT_DESCENDING = "za"


def _load_json(raw: Optional[str], key: str, expected: type):
    if raw is None:
        return expected()
    try:
        value = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored %r is not valid JSON, starting empty: %s", key, e)
        return expected()
    if not isinstance(value, expected):
        logger.warning("Stored %r has unexpected type %s, starting empty", key, type(value).__name__)
        return expected()
    return value


def _load_songs(raw: Optional[str]) -> list[Song]:
    songs: list[Song] = []
    for item in _load_json(raw, SONGS_KEY, list):
        song = Song.from_dict(item) if isinstance(item, dict) else None
        if song is None:
            logger.warning("Skipping malformed song record: %r", item)
            continue
        songs.append(song)
    return songs


def _load_audio(raw: Optional[str]) -> dict[str, AudioReference]:
    audio: dict[str, AudioReference] = {}
    for song_id, item in _load_json(raw, AUDIO_KEY, dict).items():
        ref = AudioReference.from_dict(item) if isinstance(item, dict) else None
        if ref is None:
            logger.warning("Skipping malformed audio record for song %s", song_id)
            continue
        audio[str(song_id)] = ref
    return audio


def _matches_query(song: Song, query: str) -> bool:
    return (
        contains_folded(song.name, query)
        or contains_folded(song.composer, query)
        or contains_folded(song.lyrics, query)
        or any_contains_folded(song.tags, query)
    )


def _matches_any_tag(song: Song, tags: Iterable[str]) -> bool:
    # loose: a filter tag matches when it is a substring of a song tag
    return any(any_contains_folded(song.tags, tag) for tag in tags)


class SongRepository:
    def __init__(self, db: sqlite3.Connection):
        self.db = db
        self._songs: list[Song] = []
        self._audio: dict[str, AudioReference] = {}
        self._last_id = 0

    # -------------------------------
    # LIFECYCLE / PERSISTENCE
    # -------------------------------
    def initialize(self) -> None:
        self._songs = _load_songs(get_value(self.db, SONGS_KEY))
        self._audio = _load_audio(get_value(self.db, AUDIO_KEY))
        logger.info("Loaded %d songs, %d audio references", len(self._songs), len(self._audio))

        if not self._songs:
            logger.info("Song store is empty, seeding %d sample songs", len(SEED_SONGS))
            with self._mutation():
                self._songs = [Song.from_dict(data) for data in SEED_SONGS]

    def _save(self) -> None:
        try:
            values = {
                SONGS_KEY: json.dumps([s.to_dict() for s in self._songs], ensure_ascii=False),
                AUDIO_KEY: json.dumps({k: v.to_dict() for k, v in self._audio.items()}, ensure_ascii=False),
            }
            set_values(self.db, values)
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("Failed to save songs: %s", e)
            raise StorageError(f"Failed to save songs: {e}") from e

    @contextmanager
    def _mutation(self):
        """
        Run a change against the in-memory state, then persist it.
        If persisting fails the in-memory state is put back.
        """
        songs, audio = list(self._songs), dict(self._audio)
        try:
            yield
            self._save()
        except StorageError:
            self._songs, self._audio = songs, audio
            raise

    def _next_id(self) -> str:
        existing = {s.id for s in self._songs}
        candidate = max(time.time_ns() // 1_000_000, self._last_id + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _index_of(self, song_id: str) -> Optional[int]:
        for i, song in enumerate(self._songs):
            if song.id == song_id:
                return i
        return None

    # -------------------------------
    # READ
    # -------------------------------
    def get_all(self) -> list[Song]:
        """Songs in storage order. The list is a copy; the songs are shared."""
        return list(self._songs)

    def song_count(self) -> int:
        return len(self._songs)

    def get_by_id(self, song_id: str) -> Optional[Song]:
        index = self._index_of(song_id)
        if index is None:
            return None
        song = self._songs[index]
        return replace(song, tags=list(song.tags), audio=self._audio.get(song.id))

    def get_audio_reference(self, song_id: str) -> Optional[AudioReference]:
        return self._audio.get(song_id)

    def list_tags(self) -> list[str]:
        return sorted({tag for song in self._songs for tag in song.tags})

    def search(self, query: str = "", sort_key: str = SORT_ASCENDING, tags: Optional[Iterable[str]] = None) -> list[Song]:
        results = list(self._songs)

        query = query or ""
        if query:
            results = [s for s in results if _matches_query(s, query)]

        # "" is a substring of every tag: it keeps songs that have any tag
        tags = [t for t in (tags or []) if t is not None]
        if tags:
            results = [s for s in results if _matches_any_tag(s, tags)]

        results.sort(key=lambda s: collation_key(s.name), reverse=(sort_key == SORT_DESCENDING))
        return results

    # -------------------------------
    # WRITE
    # -------------------------------
    def add(self, draft, file_data: Optional[str] = None, url: Optional[str] = None) -> Song:
        song = new_song(self._next_id(), SongDraft.coerce(draft))
        ref = make_audio_reference(file_data, url)

        with self._mutation():
            self._songs.append(song)
            if ref is not None:
                self._audio[song.id] = ref

        logger.info("Added song %s (%s)", song.id, song.name)
        return song

    def update(self, song_id: str, patch, file_data: Optional[str] = None, url: Optional[str] = None) -> bool:
        index = self._index_of(song_id)
        if index is None:
            return False

        merged = merge_song(self._songs[index], SongPatch.coerce(patch))
        ref = make_audio_reference(file_data, url)

        with self._mutation():
            self._songs[index] = merged
            if ref is not None:
                self._audio[song_id] = ref

        logger.info("Updated song %s", song_id)
        return True

    def update_audio_reference(self, song_id: str, file_data: Optional[str] = None, url: Optional[str] = None) -> bool:
        if self._index_of(song_id) is None:
            return False
        ref = make_audio_reference(file_data, url)
        if ref is None:
            return False

        with self._mutation():
            self._audio[song_id] = ref
        return True

    def delete(self, song_id: str) -> bool:
        index = self._index_of(song_id)
        if index is None:
            return False

        with self._mutation():
            del self._songs[index]
            self._audio.pop(song_id, None)

        logger.info("Deleted song %s", song_id)
        return True
