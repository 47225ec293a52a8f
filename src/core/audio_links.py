# core/audio_links.py
"""
Classify a song's audio reference into the player that should present it.

Stored files play directly. Links are sorted into YouTube / Google Drive /
SoundCloud embeds by looking at the URL text only; nothing is fetched.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional
from urllib.parse import parse_qs, quote

from core.models import AudioKind, AudioReference

logger = logging.getLogger(__name__)

YOUTUBE_ID_LENGTH = 11

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
DRIVE_PREVIEW_URL = "https://drive.google.com/file/d/{file_id}/preview"
SOUNDCLOUD_PLAYER_URL = (
    "https://w.soundcloud.com/player/?url={url}"
    "&color=%23ff5500&auto_play=false&hide_related=true&show_comments=false"
    "&show_user=true&show_reposts=false&show_teaser=false"
)

_YOUTUBE_URL_RE = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$", re.IGNORECASE)


class PlayerVariant(str, Enum):
    YOUTUBE = "youtube"
    GOOGLE_DRIVE = "googleDrive"
    SOUNDCLOUD = "soundcloud"
    DIRECT_FILE = "directFile"
    NONE = "none"


VARIANT_LABELS = {
    PlayerVariant.YOUTUBE: "YouTube",
    PlayerVariant.GOOGLE_DRIVE: "Google Drive",
    PlayerVariant.SOUNDCLOUD: "SoundCloud",
    PlayerVariant.DIRECT_FILE: "Audio",
    PlayerVariant.NONE: "",
}


@dataclass(frozen=True, eq=False)
class Classification:
    variant: PlayerVariant
    source: str = ""
    embed_params: dict = field(default_factory=dict)
    invalid: bool = False   # a provider id was required but could not be extracted

    @property
    def embed_url(self) -> Optional[str]:
        return self.embed_params.get("embed_url")

    @property
    def label(self) -> str:
        return VARIANT_LABELS[self.variant]


# -------------------------------
# WRITE-TIME HELPERS
# -------------------------------
def is_youtube_url(url: str) -> bool:
    return bool(_YOUTUBE_URL_RE.match((url or "").strip()))


def make_audio_reference(file_data: Optional[str] = None, url: Optional[str] = None) -> Optional[AudioReference]:
    if file_data:
        return AudioReference(kind=AudioKind.FILE, payload=file_data)
    url = (url or "").strip()
    if url:
        kind = AudioKind.YOUTUBE if is_youtube_url(url) else AudioKind.URL
        return AudioReference(kind=kind, payload=url)
    return None


# -------------------------------
# CLASSIFY
# -------------------------------
def detect_variant(url: str) -> PlayerVariant:
    lower = url.lower()
    if "youtube.com" in lower or "youtu.be" in lower:
        return PlayerVariant.YOUTUBE
    if "drive.google.com" in lower:
        return PlayerVariant.GOOGLE_DRIVE
    if "soundcloud.com" in lower:
        return PlayerVariant.SOUNDCLOUD
    return PlayerVariant.DIRECT_FILE


def classify(reference: Optional[AudioReference]) -> Classification:
    if reference is None or not reference.payload:
        return Classification(PlayerVariant.NONE)

    if reference.kind is AudioKind.FILE:
        return Classification(
            PlayerVariant.DIRECT_FILE,
            source=reference.payload,
            embed_params={"source": reference.payload},
        )

    url = reference.payload.strip()
    if reference.kind is AudioKind.YOUTUBE:
        variant = PlayerVariant.YOUTUBE
    else:
        variant = detect_variant(url)

    if variant is PlayerVariant.YOUTUBE:
        video_id = extract_youtube_id(url)
        if not video_id:
            return Classification(variant, source=url, invalid=True)
        return Classification(variant, source=url, embed_params={
            "video_id": video_id,
            "embed_url": YOUTUBE_EMBED_URL.format(video_id=video_id),
        })

    if variant is PlayerVariant.GOOGLE_DRIVE:
        url = normalize_drive_url(url)
        file_id = extract_drive_file_id(url)
        if not file_id:
            return Classification(variant, source=url, invalid=True)
        return Classification(variant, source=url, embed_params={
            "file_id": file_id,
            "embed_url": DRIVE_PREVIEW_URL.format(file_id=file_id),
        })

    if variant is PlayerVariant.SOUNDCLOUD:
        return Classification(variant, source=url, embed_params={
            # same escaping as JS encodeURIComponent
            "embed_url": SOUNDCLOUD_PLAYER_URL.format(url=quote(url, safe="!~*'()")),
        })

    return Classification(PlayerVariant.DIRECT_FILE, source=url, embed_params={"source": url})


# -------------------------------
# ID EXTRACTION
# -------------------------------
def _cut(text: str, stop_chars: str) -> str:
    """Text up to the first of stop_chars."""
    return re.split(f"[{re.escape(stop_chars)}]", text, maxsplit=1)[0]


def _after(url: str, marker: str) -> Optional[str]:
    m = re.search(re.escape(marker), url, re.IGNORECASE)
    return url[m.end():] if m else None


def _youtube_candidates(url: str) -> Iterator[str]:
    rest = _after(url, "youtu.be/")
    if rest is not None:
        yield _cut(rest, "#?&")

    if re.search(r"youtube\.com/watch", url, re.IGNORECASE) and "?" in url:
        query = url.split("?", 1)[1].split("#", 1)[0]
        yield parse_qs(query).get("v", [""])[0]

    rest = _after(url, "embed/")
    if rest is not None:
        yield _cut(rest, "#?&")


def extract_youtube_id(url: str) -> Optional[str]:
    try:
        for candidate in _youtube_candidates(url):
            candidate = (candidate or "").strip()
            if candidate:
                return candidate if len(candidate) == YOUTUBE_ID_LENGTH else None
    except Exception as e:
        logger.warning("Error parsing YouTube URL %r: %s", url, e)
    return None


def normalize_drive_url(url: str) -> str:
    """
    Make sure the path ends with /view. The query string, if any, stays after it.
    """
    path, sep, query = url.partition("?")
    if path.lower().endswith("/view"):
        return url
    path += "view" if path.endswith("/") else "/view"
    return path + sep + query


def extract_drive_file_id(url: str) -> Optional[str]:
    try:
        for marker, stop_chars in (("/file/d/", "/?"), ("/d/", "/?"), ("id=", "&?")):
            rest = _after(url, marker)
            if rest is None:
                continue
            file_id = _cut(rest, stop_chars).strip()
            if file_id:
                return file_id
    except Exception as e:
        logger.warning("Error parsing Google Drive URL %r: %s", url, e)
    return None
