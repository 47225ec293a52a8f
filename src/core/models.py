# core/models.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from core.utils import parse_tags

logger = logging.getLogger(__name__)

DEFAULT_DEMO_TEXT = "Demo song"


class AudioKind(str, Enum):
    FILE = "file"        # payload is a base64 data URL
    URL = "url"          # generic link, classified when displayed
    YOUTUBE = "youtube"  # pre-classified at write time

    @staticmethod
    def parse(value) -> Optional["AudioKind"]:
        if isinstance(value, AudioKind):
            return value
        try:
            return AudioKind(str(value))
        except ValueError:
            return None


@dataclass(frozen=True)
class AudioReference:
    kind: Optional[AudioKind]
    payload: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value if self.kind else None, "payload": self.payload}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Optional["AudioReference"]:
        # older stores wrote {"type": ..., "data": ...}
        payload = data.get("payload", data.get("data"))
        if not isinstance(payload, str) or not payload:
            return None
        return AudioReference(kind=AudioKind.parse(data.get("kind", data.get("type"))), payload=payload)


@dataclass
class Song:
    id: str
    name: str
    composer: str
    lyrics: str
    tags: list[str] = field(default_factory=list)
    demo_text: str = DEFAULT_DEMO_TEXT
    # transient, attached by SongRepository.get_by_id; never persisted
    audio: Optional[AudioReference] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "composer": self.composer,
            "lyrics": self.lyrics,
            "tags": list(self.tags),
            "demoText": self.demo_text,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> Optional["Song"]:
        song_id = data.get("id")
        if song_id is None or str(song_id) == "":
            return None
        return Song(
            id=str(song_id),
            name=_text(data.get("name")),
            composer=_text(data.get("composer", data.get("author"))),
            lyrics=_text(data.get("lyrics")),
            tags=parse_tags(data.get("tags")),
            demo_text=_text(data.get("demoText")) or DEFAULT_DEMO_TEXT,
        )


# Keys accepted from mappings passed to add()/update(), mapped to dataclass fields.
_FIELD_ALIASES = {
    "name": "name",
    "composer": "composer",
    "author": "composer",
    "lyrics": "lyrics",
    "tags": "tags",
    "demoText": "demo_text",
    "demo_text": "demo_text",
}


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _fields_from_mapping(data: Mapping[str, Any], kind: str) -> dict:
    out: dict = {}
    for key, value in data.items():
        if key == "id":
            continue
        target = _FIELD_ALIASES.get(key)
        if target is None:
            logger.warning("Ignoring unknown %s field %r", kind, key)
            continue
        out[target] = value
    return out


@dataclass
class SongDraft:
    name: str = ""
    composer: str = ""
    lyrics: str = ""
    tags: Any = None            # list[str] or comma separated str
    demo_text: Optional[str] = None

    @staticmethod
    def coerce(value) -> "SongDraft":
        if isinstance(value, SongDraft):
            return value
        if isinstance(value, Mapping):
            return SongDraft(**_fields_from_mapping(value, "draft"))
        return SongDraft()


@dataclass
class SongPatch:
    """Fields left as None are kept from the existing song."""
    name: Optional[str] = None
    composer: Optional[str] = None
    lyrics: Optional[str] = None
    tags: Any = None
    demo_text: Optional[str] = None

    @staticmethod
    def coerce(value) -> "SongPatch":
        if isinstance(value, SongPatch):
            return value
        if isinstance(value, Mapping):
            return SongPatch(**_fields_from_mapping(value, "patch"))
        return SongPatch()


def new_song(song_id: str, draft: SongDraft) -> Song:
    return Song(
        id=song_id,
        name=_text(draft.name),
        composer=_text(draft.composer),
        lyrics=_text(draft.lyrics),
        tags=parse_tags(draft.tags),
        demo_text=_text(draft.demo_text) or DEFAULT_DEMO_TEXT,
    )


def merge_song(existing: Song, patch: SongPatch) -> Song:
    return Song(
        id=existing.id,
        name=existing.name if patch.name is None else _text(patch.name),
        composer=existing.composer if patch.composer is None else _text(patch.composer),
        lyrics=existing.lyrics if patch.lyrics is None else _text(patch.lyrics),
        tags=list(existing.tags) if patch.tags is None else parse_tags(patch.tags),
        demo_text=_text(patch.demo_text) or existing.demo_text or DEFAULT_DEMO_TEXT,
    )


def patch_from_draft(draft: SongDraft) -> SongPatch:
    """An editor draft as a full patch; a blank demo label resets to the default."""
    return SongPatch(
        name=draft.name,
        composer=draft.composer,
        lyrics=draft.lyrics,
        tags=draft.tags,
        demo_text=draft.demo_text or DEFAULT_DEMO_TEXT,
    )


def patch_changes(existing: Song, patch: SongPatch) -> bool:
    return merge_song(existing, patch) != existing


@dataclass(frozen=True)
class SongListRow:
    song_id: str
    name: str
    composer: str
    tags: tuple[str, ...]
    audio_label: str  # "" when the song has no audio
