"""Tests for da-proj data models: Profile, Config, masking, metadata."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from daproj.models import (
    Config,
    Profile,
    ProjectMetadata,
    ProjectType,
    generate_api_key,
    mask_api_key,
    split_csv,
)


class TestProfile:
    """Profile field aliases and validation."""

    def test_accepts_wire_aliases(self):
        profile = Profile.model_validate(
            {"name": "main", "portfolioUrl": "https://a.com", "apiKey": "k1"}
        )
        assert profile.portfolio_url == "https://a.com"
        assert profile.api_key == "k1"

    def test_accepts_python_names(self):
        profile = Profile(name="main", portfolio_url="https://a.com", api_key="k1")
        assert profile.name == "main"

    def test_dumps_wire_aliases_in_order(self):
        profile = Profile(name="main", portfolio_url="https://a.com", api_key="k1")
        assert list(profile.model_dump(by_alias=True)) == ["name", "portfolioUrl", "apiKey"]

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Profile(name="", portfolio_url="https://a.com", api_key="k1")

    def test_empty_url_rejected(self):
        with pytest.raises(ValidationError):
            Profile(name="main", portfolio_url="", api_key="k1")


class TestConfig:
    """Config ordering and name uniqueness."""

    def test_missing_profiles_is_empty(self):
        assert Config.model_validate({}).profiles == []

    def test_preserves_order(self):
        config = Config(profiles=[
            Profile(name=n, portfolio_url="u", api_key="k") for n in ("b", "a", "c")
        ])
        assert config.names == ["b", "a", "c"]

    def test_duplicate_names_last_wins_at_first_position(self):
        config = Config(profiles=[
            Profile(name="a", portfolio_url="u1", api_key="k1"),
            Profile(name="b", portfolio_url="u2", api_key="k2"),
            Profile(name="a", portfolio_url="u3", api_key="k3"),
        ])
        assert config.names == ["a", "b"]
        assert config.get("a").portfolio_url == "u3"

    def test_names_are_exact_match(self):
        config = Config(profiles=[
            Profile(name="main", portfolio_url="u", api_key="k"),
            Profile(name="Main", portfolio_url="u", api_key="k"),
            Profile(name="main ", portfolio_url="u", api_key="k"),
        ])
        assert len(config.profiles) == 3
        assert config.get("MAIN") is None


class TestMasking:
    """API keys are never shown in full."""

    def test_long_key_shows_head_and_tail(self):
        key = "0123456789abcdef" + "X" * 40 + "wxyz"
        assert mask_api_key(key) == "0123456789abcdef...wxyz"

    def test_short_key_shows_head_only(self):
        assert mask_api_key("secret-key") == "secr..."

    def test_empty_key(self):
        assert mask_api_key("") == "(empty)"

    @pytest.mark.parametrize("key", ["k1", "abcd", "12345678"])
    def test_tiny_keys_fully_hidden(self, key: str):
        masked = mask_api_key(key)
        assert masked == "********"
        assert key not in masked

    @pytest.mark.parametrize("key", ["k", "k1", "abcd", "abcdefghi", "a" * 20, "b" * 21])
    def test_raw_key_never_shown(self, key: str):
        assert mask_api_key(key) != key
        assert not mask_api_key(key).startswith(key)

    def test_mask_never_contains_full_key(self):
        key = generate_api_key()
        assert key not in mask_api_key(key)


class TestHelpers:

    def test_generate_api_key_is_64_hex(self):
        key = generate_api_key()
        assert len(key) == 64
        int(key, 16)

    def test_generated_keys_differ(self):
        assert generate_api_key() != generate_api_key()

    def test_split_csv(self):
        assert split_csv("React, TypeScript ,, Node.js ") == ["React", "TypeScript", "Node.js"]
        assert split_csv("") == []


class TestProjectMetadata:

    def test_featured_flag(self):
        meta = ProjectMetadata(title="T", category="C", type=ProjectType.FEATURED)
        assert meta.is_featured

    def test_defaults(self):
        meta = ProjectMetadata(title="T", category="C")
        assert meta.type == ProjectType.SMALL
        assert meta.images.cover == "/proj-images/cover.png"
        assert meta.images.gallery == []
