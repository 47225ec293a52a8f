import json
import sqlite3

import pytest

import db.repository as repository_module
from core.errors import StorageError
from core.models import (
    AudioKind, AudioReference, DEFAULT_DEMO_TEXT, SongDraft, SongPatch,
)
from db.database import get_value, open_database, set_values
from db.repository import AUDIO_KEY, SONGS_KEY, SongRepository


def _reopen(db_path):
    repo = SongRepository(open_database(db_path))
    repo.initialize()
    return repo


class TestSeed:
    def test_first_run_seeds_three_songs(self, repository):
        names = [s.name for s in repository.get_all()]
        assert names == ["Amazing Grace", "How Great Thou Art", "It Is Well"]

    def test_seed_songs_have_no_audio(self, repository):
        for song in repository.get_all():
            assert repository.get_audio_reference(song.id) is None

    def test_seed_is_persisted(self, repository, db):
        stored = json.loads(get_value(db, SONGS_KEY))
        assert [s["id"] for s in stored] == ["1", "2", "3"]

    def test_existing_songs_are_not_reseeded(self, repository, db_path):
        repository.add({"name": "Only One", "composer": "Me"})
        for song_id in ("1", "2", "3"):
            repository.delete(song_id)

        reopened = _reopen(db_path)
        assert [s.name for s in reopened.get_all()] == ["Only One"]


class TestAdd:
    def test_round_trip(self, empty_repository):
        draft = SongDraft(name="Be Thou My Vision", composer="Trad.", lyrics="Line 1\nLine 2", tags="hymn, irish")
        song = empty_repository.add(draft)

        fetched = empty_repository.get_by_id(song.id)
        assert fetched == song
        assert fetched.lyrics == "Line 1\nLine 2"
        assert fetched.tags == ["hymn", "irish"]
        assert fetched.demo_text == DEFAULT_DEMO_TEXT

    def test_accepts_mapping_and_keeps_tag_list(self, empty_repository):
        song = empty_repository.add({"name": "A", "composer": "B", "tags": ["x", "y"], "demoText": "Live take"})
        assert song.tags == ["x", "y"]
        assert song.demo_text == "Live take"

    def test_tag_text_is_trimmed_and_empties_dropped(self, empty_repository):
        song = empty_repository.add({"name": "A", "tags": " a , ,b,, c "})
        assert song.tags == ["a", "b", "c"]

    def test_missing_fields_degrade_to_defaults(self, empty_repository):
        song = empty_repository.add({})
        assert song.name == ""
        assert song.composer == ""
        assert song.tags == []
        assert song.demo_text == DEFAULT_DEMO_TEXT

    def test_unknown_fields_are_ignored(self, empty_repository):
        song = empty_repository.add({"name": "A", "rating": 5})
        assert song.name == "A"
        assert not hasattr(song, "rating")

    def test_ids_are_unique_under_rapid_creation(self, empty_repository):
        ids = [empty_repository.add({"name": f"Song {i}"}).id for i in range(50)]
        assert len(set(ids)) == 50

    def test_file_audio(self, empty_repository):
        song = empty_repository.add({"name": "A"}, file_data="data:audio/mpeg;base64,AAAA")
        ref = empty_repository.get_audio_reference(song.id)
        assert ref == AudioReference(AudioKind.FILE, "data:audio/mpeg;base64,AAAA")

    def test_file_wins_over_url(self, empty_repository):
        song = empty_repository.add({"name": "A"}, file_data="data:audio/mpeg;base64,AAAA", url="https://youtu.be/dQw4w9WgXcQ")
        assert empty_repository.get_audio_reference(song.id).kind is AudioKind.FILE

    def test_youtube_url_is_tagged(self, empty_repository):
        song = empty_repository.add({"name": "A"}, url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        assert empty_repository.get_audio_reference(song.id).kind is AudioKind.YOUTUBE

    def test_other_url_is_generic(self, empty_repository):
        song = empty_repository.add({"name": "A"}, url="https://soundcloud.com/artist/track")
        assert empty_repository.get_audio_reference(song.id).kind is AudioKind.URL

    def test_get_by_id_attaches_audio(self, empty_repository):
        song = empty_repository.add({"name": "A"}, url="https://example.com/a.mp3")
        assert empty_repository.get_by_id(song.id).audio.payload == "https://example.com/a.mp3"


class TestGet:
    def test_unknown_id(self, repository):
        assert repository.get_by_id("nope") is None
        assert repository.get_audio_reference("nope") is None

    def test_get_all_returns_a_copy(self, repository):
        songs = repository.get_all()
        songs.clear()
        assert repository.song_count() == 3

    def test_get_by_id_tags_are_a_copy(self, repository):
        repository.get_by_id("1").tags.append("mutated")
        assert "mutated" not in repository.get_by_id("1").tags


class TestUpdate:
    def test_id_is_pinned(self, repository):
        assert repository.update("1", {"id": "other", "name": "Renamed"}) is True
        assert repository.get_by_id("other") is None
        assert repository.get_by_id("1").name == "Renamed"

    def test_absent_fields_are_kept(self, repository):
        before = repository.get_by_id("2")
        repository.update("2", SongPatch(lyrics="New lyrics"))
        after = repository.get_by_id("2")
        assert after.name == before.name
        assert after.composer == before.composer
        assert after.tags == before.tags
        assert after.lyrics == "New lyrics"

    def test_tags_renormalized(self, repository):
        repository.update("1", {"tags": "x , y"})
        assert repository.get_by_id("1").tags == ["x", "y"]

    def test_unknown_id_is_not_found(self, repository):
        before = repository.get_all()
        assert repository.update("missing", {"name": "X"}) is False
        assert repository.get_all() == before

    def test_audio_kept_without_new_audio(self, repository):
        repository.update("1", {}, url="https://example.com/a.mp3")
        repository.update("1", {"name": "Renamed"})
        assert repository.get_audio_reference("1").payload == "https://example.com/a.mp3"

    def test_audio_replaced(self, repository):
        repository.update("1", {}, url="https://example.com/a.mp3")
        repository.update("1", {}, file_data="data:audio/ogg;base64,AAAA")
        assert repository.get_audio_reference("1").kind is AudioKind.FILE

    def test_update_audio_reference(self, repository):
        assert repository.update_audio_reference("3", url="https://drive.google.com/file/d/abc/view") is True
        assert repository.get_audio_reference("3").kind is AudioKind.URL
        assert repository.update_audio_reference("3") is False
        assert repository.update_audio_reference("missing", url="https://x.test/a.mp3") is False


class TestDelete:
    def test_delete_removes_song_and_audio(self, repository, db):
        repository.update("1", {}, url="https://example.com/a.mp3")
        assert repository.delete("1") is True
        assert repository.get_by_id("1") is None
        assert repository.get_audio_reference("1") is None
        assert "1" not in json.loads(get_value(db, AUDIO_KEY))

    def test_delete_nonexistent(self, repository):
        before = repository.get_all()
        assert repository.delete("missing") is False
        assert repository.get_all() == before


class TestSearch:
    def test_list_tags(self, empty_repository):
        empty_repository.add({"name": "one", "tags": ["a", "b"]})
        empty_repository.add({"name": "two", "tags": ["b", "c"]})
        assert empty_repository.list_tags() == ["a", "b", "c"]

    def test_list_tags_case_sensitive(self, empty_repository):
        empty_repository.add({"name": "one", "tags": ["b", "B", "a"]})
        assert empty_repository.list_tags() == ["B", "a", "b"]

    def test_query_matches_any_field(self, repository):
        assert [s.name for s in repository.search("newton")] == ["Amazing Grace"]
        assert [s.name for s in repository.search("ROLLING THUNDER")] == ["How Great Thou Art"]
        assert [s.name for s in repository.search("tradit")] == ["How Great Thou Art"]

    def test_empty_query_returns_all(self, repository):
        assert len(repository.search("")) == 3

    def test_tag_filter_is_loose(self, repository):
        assert [s.name for s in repository.search(tags=["TRAD"])] == ["How Great Thou Art"]
        assert {s.name for s in repository.search(tags=["classic", "peace"])} == {"Amazing Grace", "It Is Well"}

    def test_empty_tag_filter_keeps_only_tagged_songs(self, empty_repository):
        empty_repository.add({"name": "tagged", "tags": ["x"]})
        empty_repository.add({"name": "tagless"})
        assert [s.name for s in empty_repository.search(tags=[""])] == ["tagged"]
        assert [s.name for s in empty_repository.search(tags=[])] == ["tagged", "tagless"]

    def test_sort_orders(self, repository):
        assert [s.name for s in repository.search(sort_key="az")] == ["Amazing Grace", "How Great Thou Art", "It Is Well"]
        assert [s.name for s in repository.search(sort_key="za")] == ["It Is Well", "How Great Thou Art", "Amazing Grace"]
        assert [s.name for s in repository.search(sort_key="bogus")] == ["Amazing Grace", "How Great Thou Art", "It Is Well"]

    def test_sort_ignores_case_and_accents(self, empty_repository):
        for name in ("banana", "Apple", "Ébène", "cherry"):
            empty_repository.add({"name": name})
        assert [s.name for s in empty_repository.search()] == ["Apple", "banana", "cherry", "Ébène"]

    @pytest.mark.parametrize("query,tags,sort_key", [
        ("", None, "az"),
        ("a", None, "za"),
        ("", ["hymn"], "az"),
        ("grace", ["worship"], "za"),
        ("zzz", ["nothing"], "az"),
    ])
    def test_search_is_pure(self, repository, query, tags, sort_key):
        before = repository.get_all()
        results = repository.search(query, sort_key, tags)

        ids = [s.id for s in results]
        assert len(ids) == len(set(ids))
        assert set(ids) <= {s.id for s in before}
        assert repository.get_all() == before


class TestPersistence:
    def test_reopen_returns_same_data(self, repository, db_path):
        song = repository.add({"name": "Kept", "composer": "C", "tags": "t1,t2"}, url="https://youtu.be/dQw4w9WgXcQ")
        repository.update("2", {"name": "Renamed"})

        reopened = _reopen(db_path)
        assert reopened.get_all() == repository.get_all()
        assert reopened.get_audio_reference(song.id) == repository.get_audio_reference(song.id)

    def test_stored_shape(self, repository, db):
        repository.update("1", {}, url="https://example.com/a.mp3")
        song = json.loads(get_value(db, SONGS_KEY))[0]
        assert set(song) == {"id", "name", "composer", "lyrics", "tags", "demoText"}
        assert json.loads(get_value(db, AUDIO_KEY)) == {"1": {"kind": "url", "payload": "https://example.com/a.mp3"}}

    def test_legacy_audio_records_load(self, db):
        set_values(db, {
            SONGS_KEY: json.dumps([{"id": "7", "name": "Old", "author": "Someone", "tags": "a, b"}]),
            AUDIO_KEY: json.dumps({"7": {"type": "youtube", "data": "https://youtu.be/dQw4w9WgXcQ"}}),
        })
        repo = SongRepository(db)
        repo.initialize()

        song = repo.get_by_id("7")
        assert song.composer == "Someone"
        assert song.tags == ["a", "b"]
        assert song.demo_text == DEFAULT_DEMO_TEXT
        assert repo.get_audio_reference("7") == AudioReference(AudioKind.YOUTUBE, "https://youtu.be/dQw4w9WgXcQ")

    def test_malformed_json_starts_from_seed(self, db):
        set_values(db, {SONGS_KEY: "{not json", AUDIO_KEY: "[]"})
        repo = SongRepository(db)
        repo.initialize()
        assert repo.song_count() == 3

    def test_malformed_records_are_skipped(self, db):
        set_values(db, {SONGS_KEY: json.dumps([{"name": "no id"}, "junk", {"id": 5, "name": "ok"}])})
        repo = SongRepository(db)
        repo.initialize()
        assert [s.id for s in repo.get_all()] == ["5"]


class TestStorageFailure:
    @pytest.fixture
    def failing_store(self, repository, monkeypatch):
        def fail(_db, _values):
            raise sqlite3.OperationalError("disk is full")
        monkeypatch.setattr(repository_module, "set_values", fail)

    def test_add_failure_rolls_back(self, repository, failing_store):
        before = repository.get_all()
        with pytest.raises(StorageError):
            repository.add({"name": "Lost"}, url="https://example.com/a.mp3")
        assert repository.get_all() == before

    def test_update_failure_rolls_back(self, repository, failing_store):
        with pytest.raises(StorageError):
            repository.update("1", {"name": "Changed"}, url="https://example.com/a.mp3")
        assert repository.get_by_id("1").name == "Amazing Grace"
        assert repository.get_audio_reference("1") is None

    def test_delete_failure_rolls_back(self, repository, failing_store):
        with pytest.raises(StorageError):
            repository.delete("1")
        assert repository.get_by_id("1") is not None

    def test_failure_leaves_disk_untouched(self, repository, db, failing_store):
        with pytest.raises(StorageError):
            repository.delete("1")
        assert [s["id"] for s in json.loads(get_value(db, SONGS_KEY))] == ["1", "2", "3"]
