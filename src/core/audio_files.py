# core/audio_files.py
from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import mimetypes
import os
import re
from pathlib import Path
from typing import Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError

from core.errors import AudioFileError

logger = logging.getLogger(__name__)

DEFAULT_MIME = "audio/mpeg"
DEFAULT_MAX_AUDIO_MB = 25.0

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*?);base64,(?P<data>.*)$", re.DOTALL)

# mutagen reports some legacy names first; map them to what players expect
_MIME_FIXUPS = {
    "audio/mp3": "audio/mpeg",
    "audio/x-mp3": "audio/mpeg",
    "audio/x-flac": "audio/flac",
    "audio/vorbis": "audio/ogg",
    "audio/x-vorbis": "audio/ogg",
}

# mimetypes has no entry for some of these on every platform
_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/ogg": ".ogg",
    "audio/opus": ".opus",
    "audio/flac": ".flac",
    "audio/wav": ".wav",
    "audio/mp4": ".m4a",
}


def max_audio_mb_from_env() -> float:
    raw = os.getenv("SONGBOOK_MAX_AUDIO_MB", "").strip()
    if not raw:
        return DEFAULT_MAX_AUDIO_MB
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not value > 0:
        logger.warning("Ignoring invalid SONGBOOK_MAX_AUDIO_MB=%r, using %g", raw, DEFAULT_MAX_AUDIO_MB)
        return DEFAULT_MAX_AUDIO_MB
    return value


MAX_AUDIO_MB = max_audio_mb_from_env()


def guess_audio_mime(path: str) -> str:
    try:
        audio = MutagenFile(path)
    except (MutagenError, OSError) as e:
        logger.debug("mutagen could not read %s: %s", path, e)
        audio = None

    if audio is not None and getattr(audio, "mime", None):
        mime = audio.mime[0]
        return _MIME_FIXUPS.get(mime, mime)

    guessed, _ = mimetypes.guess_type(path)
    return guessed or DEFAULT_MIME


def read_audio_file_as_data_url(path: str, max_mb: float = MAX_AUDIO_MB) -> str:
    """
    Read a local audio file into a base64 data URL, the payload stored for
    "file" audio references.
    """
    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise AudioFileError(f"Cannot read audio file {path}: {e}") from e

    if size > max_mb * 1024 * 1024:
        raise AudioFileError(f"Audio file is too large ({size / 1024 / 1024:.1f} MB, limit {max_mb:g} MB)")

    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise AudioFileError(f"Cannot read audio file {path}: {e}") from e

    mime = guess_audio_mime(path)
    logger.info("Read %s (%d bytes, %s)", os.path.basename(path), len(raw), mime)
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


def is_data_url(payload: str) -> bool:
    return (payload or "").startswith("data:")


def materialize_data_url(payload: str, cache_dir: str) -> str:
    """
    Decode a data URL into cache_dir and return the file path.
    Files are named by content digest, so repeated plays reuse them.
    """
    m = _DATA_URL_RE.match(payload or "")
    if not m:
        raise AudioFileError("Stored audio is not a base64 data URL")

    try:
        raw = base64.b64decode(m.group("data"), validate=False)
    except (binascii.Error, ValueError) as e:
        raise AudioFileError(f"Stored audio is not valid base64: {e}") from e

    mime = m.group("mime") or DEFAULT_MIME
    mime = _MIME_FIXUPS.get(mime, mime)
    ext = _EXTENSIONS.get(mime) or mimetypes.guess_extension(mime) or ".bin"
    digest = hashlib.sha1(raw).hexdigest()

    os.makedirs(cache_dir, exist_ok=True)
    path = Path(cache_dir) / f"{digest}{ext}"
    if not path.exists():
        try:
            path.write_bytes(raw)
        except OSError as e:
            raise AudioFileError(f"Cannot write audio cache file {path}: {e}") from e
    return str(path)


def playable_source(payload: str, cache_dir: Optional[str]) -> str:
    if is_data_url(payload):
        if not cache_dir:
            raise AudioFileError("No cache directory for stored audio")
        return materialize_data_url(payload, cache_dir)
    return payload
