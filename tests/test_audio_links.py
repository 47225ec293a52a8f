import pytest

from core.audio_links import (
    PlayerVariant, classify, detect_variant, extract_drive_file_id,
    extract_youtube_id, is_youtube_url, make_audio_reference, normalize_drive_url,
)
from core.models import AudioKind, AudioReference


def url_ref(url, kind=AudioKind.URL):
    return AudioReference(kind=kind, payload=url)


class TestYouTube:
    @pytest.mark.parametrize("url", [
        "https://youtu.be/dQw4w9WgXcQ?t=5",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=XYZ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1",
        "HTTPS://YOUTU.BE/dQw4w9WgXcQ",
    ])
    def test_extracts_id(self, url):
        assert extract_youtube_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("url", [
        "https://youtu.be/abc",
        "https://www.youtube.com/watch?list=XYZ",
        "https://www.youtube.com/",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQextra",
    ])
    def test_extraction_fails(self, url):
        assert extract_youtube_id(url) is None

    def test_id_case_is_kept(self):
        assert extract_youtube_id("https://youtu.be/AbCdEfGhIjK") == "AbCdEfGhIjK"

    def test_classify_builds_embed(self):
        result = classify(url_ref("https://youtu.be/dQw4w9WgXcQ?t=5", AudioKind.YOUTUBE))
        assert result.variant is PlayerVariant.YOUTUBE
        assert result.embed_params["video_id"] == "dQw4w9WgXcQ"
        assert result.embed_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert not result.invalid

    def test_classify_invalid_link(self):
        result = classify(url_ref("https://youtu.be/abc"))
        assert result.variant is PlayerVariant.YOUTUBE
        assert result.invalid
        assert result.embed_url is None

    @pytest.mark.parametrize("url,expected", [
        ("https://www.youtube.com/watch?v=x", True),
        ("youtu.be/x", True),
        ("http://YouTube.com/x", True),
        ("https://music.youtube.com/watch?v=x", False),
        ("https://example.com/?ref=youtube.com", False),
    ])
    def test_is_youtube_url(self, url, expected):
        assert is_youtube_url(url) is expected


class TestGoogleDrive:
    def test_extracts_file_id(self):
        assert extract_drive_file_id("https://drive.google.com/file/d/1A2B3C/view?usp=sharing") == "1A2B3C"

    def test_open_id_form(self):
        assert extract_drive_file_id("https://drive.google.com/open?id=XYZ789&usp=sharing") == "XYZ789"

    @pytest.mark.parametrize("url,expected", [
        ("https://drive.google.com/file/d/1A2B3C", "https://drive.google.com/file/d/1A2B3C/view"),
        ("https://drive.google.com/file/d/1A2B3C/", "https://drive.google.com/file/d/1A2B3C/view"),
        ("https://drive.google.com/file/d/1A2B3C/view", "https://drive.google.com/file/d/1A2B3C/view"),
        ("https://drive.google.com/file/d/1A2B3C?usp=sharing", "https://drive.google.com/file/d/1A2B3C/view?usp=sharing"),
    ])
    def test_normalize(self, url, expected):
        assert normalize_drive_url(url) == expected

    def test_classify(self):
        result = classify(url_ref("https://drive.google.com/file/d/1A2B3C/view?usp=sharing"))
        assert result.variant is PlayerVariant.GOOGLE_DRIVE
        assert result.embed_params["file_id"] == "1A2B3C"
        assert result.embed_url == "https://drive.google.com/file/d/1A2B3C/preview"

    def test_classify_normalizes_before_use(self):
        result = classify(url_ref("https://drive.google.com/file/d/1A2B3C?usp=sharing"))
        assert result.source == "https://drive.google.com/file/d/1A2B3C/view?usp=sharing"
        assert result.embed_params["file_id"] == "1A2B3C"

    def test_classify_invalid(self):
        result = classify(url_ref("https://drive.google.com/drive/my-drive"))
        assert result.variant is PlayerVariant.GOOGLE_DRIVE
        assert result.invalid


class TestOtherVariants:
    def test_none(self):
        assert classify(None).variant is PlayerVariant.NONE
        assert classify(None).label == ""

    def test_stored_file_is_direct(self):
        payload = "data:audio/mpeg;base64,AAAA"
        result = classify(AudioReference(AudioKind.FILE, payload))
        assert result.variant is PlayerVariant.DIRECT_FILE
        assert result.source == payload

    def test_soundcloud_passes_encoded_url(self):
        result = classify(url_ref("https://soundcloud.com/artist/track"))
        assert result.variant is PlayerVariant.SOUNDCLOUD
        assert "url=https%3A%2F%2Fsoundcloud.com%2Fartist%2Ftrack" in result.embed_url

    def test_generic_url_is_direct(self):
        result = classify(url_ref("https://example.com/song.mp3"))
        assert result.variant is PlayerVariant.DIRECT_FILE
        assert result.source == "https://example.com/song.mp3"
        assert result.label == "Audio"

    def test_unknown_kind_falls_back_to_url_sniffing(self):
        result = classify(AudioReference(kind=None, payload="https://SoundCloud.com/a/b"))
        assert result.variant is PlayerVariant.SOUNDCLOUD

    @pytest.mark.parametrize("url,variant", [
        ("https://WWW.YOUTUBE.COM/watch?v=dQw4w9WgXcQ", PlayerVariant.YOUTUBE),
        ("https://drive.google.com/x", PlayerVariant.GOOGLE_DRIVE),
        ("https://soundcloud.com/x", PlayerVariant.SOUNDCLOUD),
        ("file:///music/a.flac", PlayerVariant.DIRECT_FILE),
    ])
    def test_detect_variant(self, url, variant):
        assert detect_variant(url) is variant


class TestMakeAudioReference:
    def test_nothing(self):
        assert make_audio_reference() is None
        assert make_audio_reference(None, "   ") is None

    def test_url_is_trimmed(self):
        assert make_audio_reference(url="  https://example.com/a.mp3 ").payload == "https://example.com/a.mp3"
