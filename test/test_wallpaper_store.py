"""
Wallpaper Store Tests

Directory scan, tag persistence, merging and pruning.
"""

import json
import os

import pytest

import wallpaper_store
from errors import TagStoreCorrupt
from wallpaper import Wallpaper, has_valid_extension
from wallpaper_store import WallpaperStore, ensure_wallpaper_dir
from weather import Weather
from weather_tags import WeatherTag


@pytest.fixture
def store(wallpaper_dir):
    return WallpaperStore(wallpaper_dir)


class TestWallpaper:
    def test_identity_is_the_path(self, image_factory):
        path = image_factory("a.png")
        first = Wallpaper(path, Weather({WeatherTag.Sun}, True))
        second = Wallpaper(str(path), Weather({WeatherTag.Rain}, False), favourited=True)
        assert first == second
        assert len({first, second}) == 1

    def test_new_wallpaper_defaults(self, image_factory):
        wallpaper = Wallpaper(image_factory("a.png"))
        assert wallpaper.weather == Weather.default()
        assert wallpaper.favourited is False
        assert wallpaper.filename == "a.png"

    def test_is_valid_follows_the_file(self, image_factory):
        path = image_factory("a.png")
        wallpaper = Wallpaper(path)
        assert wallpaper.is_valid()
        path.unlink()
        assert not wallpaper.is_valid()

    @pytest.mark.parametrize("name,expected", [
        ("a.png", True), ("b.JPG", True), ("c.Bmp", True),
        ("d.jpeg", False), ("e.gif", False), ("notes.txt", False), ("png", False),
    ])
    def test_valid_extensions(self, name, expected):
        assert has_valid_extension(name) is expected

    def test_from_dict_skips_unknown_tags(self, image_factory):
        wallpaper = Wallpaper.from_dict(image_factory("a.png"), {"tags": ["Sun", "Hot"], "is_day": None})
        assert wallpaper.weather == Weather({WeatherTag.Sun}, None)


class TestEnsureWallpaperDir:
    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "pictures" / "weather_wallpapers"
        assert ensure_wallpaper_dir(target) == target.resolve()
        assert target.is_dir()

    def test_existing_directory_is_returned(self, wallpaper_dir):
        assert ensure_wallpaper_dir(wallpaper_dir) == wallpaper_dir.resolve()


class TestWallpaperStore:
    def test_list_only_valid_extensions(self, store, image_factory, wallpaper_dir):
        image_factory("b.jpg")
        image_factory("a.PNG")
        (wallpaper_dir / "readme.txt").write_text("hi")
        (wallpaper_dir / "sub.png").mkdir()
        names = [path.name for path in store.list_wallpaper_files()]
        assert names == ["a.PNG", "b.jpg"]

    def test_missing_tag_file_is_empty(self, store):
        assert store.read_tag_store() == {}

    def test_corrupt_tag_file_raises(self, store):
        store.tags_path.write_text("{not json")
        with pytest.raises(TagStoreCorrupt):
            store.read_tag_store()

    def test_load_registers_new_files_and_saves(self, store, image_factory):
        image_factory("a.png")
        image_factory("b.bmp")
        wallpapers = store.load()
        assert {w.filename for w in wallpapers} == {"a.png", "b.bmp"}
        assert all(w.weather == Weather.default() for w in wallpapers)

        saved = json.loads(store.tags_path.read_text())
        assert len(saved) == 2
        assert all(entry == {"tags": [], "is_day": True, "favourited": False} for entry in saved.values())

    def test_saved_tags_take_precedence(self, store, image_factory):
        path = image_factory("a.png")
        store.save([Wallpaper(path, Weather({WeatherTag.Rain}, False), favourited=True)])

        (loaded,) = store.load()
        assert loaded.weather == Weather({WeatherTag.Rain}, False)
        assert loaded.favourited is True

    def test_missing_files_are_pruned(self, store, image_factory):
        keep = image_factory("keep.png")
        gone = image_factory("gone.png")
        store.save([
            Wallpaper(keep, Weather({WeatherTag.Sun}, True)),
            Wallpaper(gone, Weather({WeatherTag.Fog}, True)),
        ])
        gone.unlink()

        wallpapers = store.load()
        assert {w.filename for w in wallpapers} == {"keep.png"}
        assert list(json.loads(store.tags_path.read_text())) == [str(keep.resolve())]

    def test_load_twice_is_byte_identical(self, store, image_factory):
        image_factory("a.png")
        image_factory("b.jpg")
        store.save([Wallpaper(store.directory / "a.png", Weather({WeatherTag.Snow, WeatherTag.Sun}, None))])

        first = store.load()
        first_bytes = store.tags_path.read_bytes()
        store.save(first)
        second = store.load()
        assert store.tags_path.read_bytes() == first_bytes
        assert {(w, w.weather, w.favourited) for w in first} == {(w, w.weather, w.favourited) for w in second}

    def test_undecodable_filename_survives_load(self, store, image_factory, wallpaper_dir):
        image_factory("a.png")
        try:
            with open(os.path.join(os.fsencode(wallpaper_dir), b"caf\xe9.png"), "wb") as handle:
                handle.write(b"not really an image")
        except OSError:
            pytest.skip("filesystem rejects non UTF-8 filenames")

        first = store.load()
        first_bytes = store.tags_path.read_bytes()
        second = store.load()
        assert store.tags_path.read_bytes() == first_bytes
        assert first == second
        assert len(second) == 2
        assert sorted(os.listdir(wallpaper_dir)) == sorted(["a.png", os.fsdecode(b"caf\xe9.png"), "tags.json"])

    def test_failed_write_leaves_no_temp_file(self, store, image_factory, monkeypatch):
        store.save([Wallpaper(image_factory("a.png"))])
        before = store.tags_path.read_bytes()

        def broken_dump(*args, **kwargs):
            raise TypeError("not serialisable")

        monkeypatch.setattr(wallpaper_store.json, "dump", broken_dump)
        with pytest.raises(TypeError):
            store.save([Wallpaper(image_factory("b.png"))])
        assert store.tags_path.read_bytes() == before
        assert not store.tags_path.with_name("tags.json.tmp").exists()

    def test_round_trip_restricted_to_existing_files(self, store, image_factory, tmp_path):
        a = Wallpaper(image_factory("a.png"), Weather({WeatherTag.Cloud}, True), favourited=True)
        b = Wallpaper(image_factory("b.png"), Weather({WeatherTag.Storm}, None))
        outside = tmp_path / "elsewhere.png"
        ghost = Wallpaper(outside, Weather({WeatherTag.Sun}, True))
        store.save([a, b, ghost])

        loaded = {w.filename: w for w in store.load()}
        assert set(loaded) == {"a.png", "b.png"}
        assert loaded["a.png"].weather == a.weather and loaded["a.png"].favourited
        assert loaded["b.png"].weather == b.weather

    def test_legacy_schema_is_accepted(self, store, image_factory):
        image_factory("old.jpg")
        store.tags_path.write_text(json.dumps({"old.jpg": ["Rain", "Fog"]}))

        (wallpaper,) = store.load()
        assert wallpaper.weather == Weather({WeatherTag.Rain, WeatherTag.Fog}, True)
        saved = json.loads(store.tags_path.read_text())
        assert saved == {
            str(wallpaper.path): {"tags": ["Rain", "Fog"], "is_day": True, "favourited": False}
        }

    def test_reset_clears_tags(self, store, image_factory):
        path = image_factory("a.png")
        store.save([Wallpaper(path, Weather({WeatherTag.Sun}, False), favourited=True)])

        (wallpaper,) = store.reset()
        assert wallpaper.weather == Weather.default()
        assert wallpaper.favourited is False

    def test_save_is_pretty_printed_and_sorted(self, store, image_factory):
        store.save([Wallpaper(image_factory("b.png")), Wallpaper(image_factory("a.png"))])
        text = store.tags_path.read_text()
        assert text.startswith("{\n  ")
        keys = list(json.loads(text))
        assert keys == sorted(keys)
        assert not store.tags_path.with_name("tags.json.tmp").exists()
