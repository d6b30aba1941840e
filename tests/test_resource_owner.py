"""Tests for SpotifyResourceOwner"""

import json

import pytest

from spotify_oauth2.providers.base import ResourceOwner
from spotify_oauth2.providers.spotify import SpotifyResourceOwner

TOP_LEVEL = ["id", "birthdate", "country", "display_name", "email", "product", "type", "uri"]


class TestSpotifyResourceOwner:
    """Tests for profile field mapping"""

    def test_is_resource_owner(self):
        """Test that the view implements the resource owner interface"""
        assert isinstance(SpotifyResourceOwner(), ResourceOwner)

    @pytest.mark.parametrize("name", TOP_LEVEL + ["spotify_url", "followers", "image"])
    def test_empty_profile(self, name):
        """Test that every accessor is None for an empty profile"""
        assert getattr(SpotifyResourceOwner(), name) is None

    def test_default_mapping(self):
        """Test that the default backing mapping is empty"""
        assert SpotifyResourceOwner().to_dict() == {}

    @pytest.mark.parametrize("name", TOP_LEVEL)
    def test_falsy_top_level_is_none(self, name):
        """Test that empty strings and zero collapse to None"""
        assert getattr(SpotifyResourceOwner({name: ""}), name) is None
        assert getattr(SpotifyResourceOwner({name: 0}), name) is None

    def test_literal_profile(self):
        """Test mapping of a minimal profile document"""
        data = json.loads(
            '{"id":"42","display_name":"Ann","followers":{"total":0},"external_urls":{"spotify":"u"}}'
        )
        owner = SpotifyResourceOwner(data)

        assert owner.id == "42"
        assert owner.display_name == "Ann"
        assert owner.followers == 0
        assert owner.spotify_url == "u"
        assert owner.country is None

    def test_followers_zero(self):
        """Test that zero followers is kept"""
        assert SpotifyResourceOwner({"followers": {"total": 0}}).followers == 0

    def test_followers_missing(self):
        """Test followers is None without followers.total"""
        assert SpotifyResourceOwner({"followers": {"href": None}}).followers is None
        assert SpotifyResourceOwner({"followers": {"total": None}}).followers is None

    def test_followers_coerced_to_int(self):
        """Test that the follower count is an integer"""
        followers = SpotifyResourceOwner({"followers": {"total": "17"}}).followers

        assert followers == 17
        assert isinstance(followers, int)

    def test_empty_nested_url_is_kept(self):
        """Test that nested values use a presence check"""
        assert SpotifyResourceOwner({"external_urls": {"spotify": ""}}).spotify_url == ""

    def test_image(self):
        """Test that the first image URL is used"""
        owner = SpotifyResourceOwner({"images": [{"url": "first"}, {"url": "second"}]})

        assert owner.image == "first"

    @pytest.mark.parametrize(
        "images",
        [[], None, "not-a-list", [{}], [{"url": None}], [None]],
    )
    def test_image_missing(self, images):
        """Test image is None for absent or malformed images"""
        assert SpotifyResourceOwner({"images": images}).image is None

    def test_unexpected_nested_shape(self):
        """Test that scalar values where mappings are expected give None"""
        owner = SpotifyResourceOwner({"external_urls": "x", "followers": 5})

        assert owner.spotify_url is None
        assert owner.followers is None

    def test_to_dict_returns_original(self):
        """Test that to_dict returns the construction mapping unmodified"""
        data = {"id": "1", "href": "https://api.spotify.com/v1/users/1", "explicit_content": {"filter_enabled": False}}
        owner = SpotifyResourceOwner(data)

        owner.id
        owner.followers
        owner.image

        assert owner.to_dict() is data
        assert data == {"id": "1", "href": "https://api.spotify.com/v1/users/1", "explicit_content": {"filter_enabled": False}}

    @pytest.mark.parametrize(
        "total,expected",
        [("17.5", 17), (12.9, 12), ("abc", None), ({"x": 1}, None), ([1], None), ("inf", None)],
    )
    def test_followers_unexpected_values(self, total, expected):
        """Test that odd follower counts never raise"""
        assert SpotifyResourceOwner({"followers": {"total": total}}).followers == expected

    @pytest.mark.parametrize("name", TOP_LEVEL)
    def test_zero_string_is_none(self, name):
        """Test that the string "0" collapses to None like 0"""
        assert getattr(SpotifyResourceOwner({name: "0"}), name) is None
