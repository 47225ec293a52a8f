"""Exceptions raised by the songbook core."""


class SongbookError(Exception):
    """Base exception for the songbook."""
    pass


class StorageError(SongbookError):
    """Writing the local song store failed."""
    pass


class AudioFileError(SongbookError):
    """Reading or decoding an audio file failed."""
    pass
