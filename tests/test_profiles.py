"""Tests for the local profile store."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from daproj.models import Config
from daproj.profiles import ParseError, ProfileStore, parse_config, serialize_config

from conftest import make_config, make_profile


class TestSerialization:
    """Canonical JSON form of a Config."""

    def test_wire_shape(self):
        text = serialize_config(make_config("main"))
        data = json.loads(text)
        assert list(data) == ["profiles"]
        assert list(data["profiles"][0]) == ["name", "portfolioUrl", "apiKey"]

    def test_two_space_indent(self):
        text = serialize_config(make_config("main"))
        assert text.startswith('{\n  "profiles": [')

    def test_roundtrip_preserves_order(self):
        config = make_config("work", "main", "personal")
        assert parse_config(serialize_config(config)) == config

    def test_roundtrip_empty(self):
        assert parse_config(serialize_config(Config())) == Config()


class TestParse:
    """parse_config edge cases."""

    @pytest.mark.parametrize("text", ["{}", '{"profiles": []}', "", "  \n", '{"profiles": null}'])
    def test_empty_documents(self, text: str):
        assert parse_config(text).profiles == []

    @pytest.mark.parametrize("text", [
        "not json",
        '{"profiles": [{"name": "main"',
        "[]",
        '"profiles"',
        '{"profiles": {"name": "main"}}',
        '{"profiles": [{"name": "main"}]}',
        '{"profiles": [{"name": "", "portfolioUrl": "u", "apiKey": "k"}]}',
    ])
    def test_malformed_documents(self, text: str):
        with pytest.raises(ParseError):
            parse_config(text)


class TestProfileStore:
    """Loading, upserting, and atomic saving."""

    def test_load_missing_is_empty(self, store: ProfileStore):
        assert not store.exists()
        assert store.load() == Config()
        assert store.load_optional() is None

    def test_load_malformed_raises(self, store: ProfileStore):
        store.path.write_text("{broken")
        with pytest.raises(ParseError):
            store.load()

    def test_load_non_utf8_raises_parse_error(self, store: ProfileStore):
        store.path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(ParseError, match="UTF-8"):
            store.load()

    def test_load_empty_object(self, store: ProfileStore):
        store.path.write_text("{}")
        assert store.load() == Config()
        assert store.load_optional() == Config()

    def test_upsert_creates_document(self, store: ProfileStore):
        store.upsert(make_profile("main"))
        assert store.exists()
        assert store.load().names == ["main"]

    def test_upsert_appends_new_names(self, store: ProfileStore):
        store.upsert(make_profile("main"))
        store.upsert(make_profile("work"))
        assert store.load().names == ["main", "work"]

    def test_upsert_replaces_in_place(self, store: ProfileStore):
        store.upsert(make_profile("main"))
        store.upsert(make_profile("work"))
        store.upsert(make_profile("main", url="https://new.example.com"))

        config = store.load()
        assert config.names == ["main", "work"]
        assert config.get("main").portfolio_url == "https://new.example.com"

    def test_save_creates_parent_dirs(self, tmp_path: Path):
        store = ProfileStore(tmp_path / "nested" / "dir" / "config.json")
        store.save(make_config("main"))
        assert store.load().names == ["main"]

    def test_save_leaves_no_temp_file(self, store: ProfileStore):
        store.save(make_config("main"))
        leftovers = [p.name for p in store.path.parent.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_failed_write_keeps_previous_document(self, store: ProfileStore):
        store.save(make_config("main"))
        before = store.path.read_bytes()

        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.save(make_config("main", "work"))

        assert store.path.read_bytes() == before
        assert not (store.path.parent / f".{store.path.name}.tmp").exists()

    def test_write_text_is_verbatim(self, store: ProfileStore):
        raw = '{"profiles":[]}'
        store.write_text(raw)
        assert store.read_text() == raw

    def test_expands_user(self):
        store = ProfileStore(Path("~/config.json"))
        assert "~" not in str(store.path)
