import pytest

from modules.identity.models import IdentityRecord
from modules.identity.normalizer import (
    FALLBACK_USERNAME,
    FALLBACK_USER_ID,
    is_absolute_url,
    resolve_picture_url,
    normalize_identity,
    merge_identity,
    fallback_user_record,
)

from tests.conftest import create_test_token


class TestNormalizeExamples:
    def test_name_and_relative_profile_pic(self):
        """name + relative profilePic should become username + absolute URL."""
        identity = normalize_identity(
            {"name": "ana", "profilePic": "uploads/x.png"},
            "https://api.example/",
        )
        assert identity.username == "ana"
        assert identity.profile_picture == "https://api.example/uploads/x.png"

    def test_absolute_avatar_unchanged(self, base_url):
        """An absolute avatar URL should be used as is."""
        identity = normalize_identity(
            {"username": "bo", "avatar": "http://cdn/y.png"},
            base_url,
        )
        assert identity.username == "bo"
        assert identity.profile_picture == "http://cdn/y.png"


class TestUsername:
    def test_username_preferred_over_name(self, base_url):
        """username should win over name."""
        identity = normalize_identity({"username": "bo", "name": "Robert"}, base_url)
        assert identity.username == "bo"

    def test_empty_username_falls_back_to_name(self, base_url):
        """An empty username should not count as a display name."""
        identity = normalize_identity({"username": "", "name": "Robert"}, base_url)
        assert identity.username == "Robert"

    def test_whitespace_username_kept(self, base_url):
        """Any non-empty string counts as a display name."""
        identity = normalize_identity({"username": "   ", "name": "Robert"}, base_url)
        assert identity.username == "   "

    def test_fallback_username(self, base_url):
        """Missing display names should fall back to 'User'."""
        assert normalize_identity({}, base_url).username == FALLBACK_USERNAME

    def test_non_string_username_ignored(self, base_url):
        """Non-string names should be ignored."""
        identity = normalize_identity({"username": 42, "name": None}, base_url)
        assert identity.username == FALLBACK_USERNAME


class TestPicture:
    def test_profile_picture_preferred(self, base_url):
        """profilePicture should be checked before profilePic and avatar."""
        identity = normalize_identity(
            {
                "profilePicture": "https://cdn/a.png",
                "profilePic": "uploads/b.png",
                "avatar": "uploads/c.png",
            },
            base_url,
        )
        assert identity.profile_picture == "https://cdn/a.png"

    def test_leading_slashes_stripped(self, base_url):
        """All leading slashes should be removed before joining."""
        identity = normalize_identity({"avatar": "///uploads/x.png"}, base_url)
        assert identity.profile_picture == "https://api.example/uploads/x.png"

    def test_base_url_without_trailing_slash(self):
        """A single slash should separate base URL and path."""
        identity = normalize_identity({"avatar": "x.png"}, "https://api.example")
        assert identity.profile_picture == "https://api.example/x.png"

    def test_none_picture_falls_through(self, base_url):
        """A None picture field should not hide the next one."""
        identity = normalize_identity(
            {"profilePicture": None, "profilePic": "uploads/x.png"},
            base_url,
        )
        assert identity.profile_picture == "https://api.example/uploads/x.png"

    def test_empty_picture(self, base_url):
        """An empty picture reference should normalize to ''."""
        assert normalize_identity({"profilePicture": ""}, base_url).profile_picture == ""

    def test_missing_picture(self, base_url):
        """No picture fields should normalize to ''."""
        assert normalize_identity({"username": "bo"}, base_url).profile_picture == ""

    def test_only_slashes(self, base_url):
        """A path that is empty after stripping should normalize to ''."""
        assert normalize_identity({"avatar": "///"}, base_url).profile_picture == ""

    def test_non_string_picture(self, base_url):
        """A non-string picture should normalize to ''."""
        assert normalize_identity({"avatar": {"url": "x"}}, base_url).profile_picture == ""


class TestPassthrough:
    def test_other_fields_preserved(self, raw_user, base_url):
        """Fields the normalizer does not interpret should be copied through."""
        identity = normalize_identity(raw_user, base_url)
        dumped = identity.to_storage()
        assert dumped["_id"] == "64f1c0ffee"
        assert dumped["createdAt"] == "2024-01-01T00:00:00.000Z"
        assert dumped["profilePic"] == "uploads/ana.png"
        assert identity.id == "user-123"
        assert identity.email == "ana@example.com"

    def test_input_not_mutated(self, raw_user, base_url):
        """The raw record should not be modified."""
        before = dict(raw_user)
        normalize_identity(raw_user, base_url)
        assert raw_user == before


class TestTotality:
    @pytest.mark.parametrize(
        "raw",
        [
            None,
            {},
            [],
            "ana",
            42,
            {"name": "ana"},
            {"profilePicture": None, "profilePic": None, "avatar": None},
            {1: "numeric key", "username": "bo"},
            {"id": ["odd"], "email": 7, "username": ""},
        ],
    )
    def test_always_returns_valid_record(self, raw, base_url):
        """Any input should produce a non-empty username and a valid picture."""
        identity = normalize_identity(raw, base_url)
        assert isinstance(identity, IdentityRecord)
        assert isinstance(identity.username, str) and identity.username
        assert identity.profile_picture == "" or is_absolute_url(identity.profile_picture)


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            {},
            {"name": "ana", "profilePic": "uploads/x.png"},
            {"username": "bo", "avatar": "http://cdn/y.png"},
            {"profilePicture": "", "avatar": "uploads/z.png"},
            {"profilePicture": None, "profilePic": "/a.png", "extra": {"nested": [1, 2]}},
            {"username": "  ", "name": "", "profilePicture": 5},
        ],
    )
    def test_normalize_twice_is_normalize_once(self, raw, base_url):
        """Normalizing a normalized record should not change it."""
        once = normalize_identity(raw, base_url)
        twice = normalize_identity(once, base_url)
        assert twice == once

    def test_normalizing_stored_dump_is_stable(self, raw_user, base_url):
        """Re-normalizing the persisted form should give the same record."""
        once = normalize_identity(raw_user, base_url)
        again = normalize_identity(once.to_storage(), base_url)
        assert again == once


class TestResolvePictureUrl:
    def test_absolute_schemes(self, base_url):
        """Any scheme:// prefix counts as absolute."""
        assert resolve_picture_url("https://x/y.png", base_url) == "https://x/y.png"
        assert resolve_picture_url("ftp://x/y.png", base_url) == "ftp://x/y.png"

    def test_is_absolute_url(self):
        """is_absolute_url should only accept scheme-prefixed strings."""
        assert is_absolute_url("http://cdn/y.png")
        assert not is_absolute_url("uploads/http.png")
        assert not is_absolute_url("/uploads/x.png")
        assert not is_absolute_url(None)


class TestMergeIdentity:
    @pytest.fixture
    def current(self, raw_user, base_url):
        return normalize_identity(raw_user, base_url)

    def test_changes_win(self, current, base_url):
        """Fields in the update should replace current ones."""
        merged = merge_identity(current, {"username": "ana2", "bio": "hi"}, base_url)
        assert merged.username == "ana2"
        assert merged.to_storage()["bio"] == "hi"
        assert merged.id == current.id

    def test_keeps_picture_when_update_has_none(self, current, base_url):
        """A response without a picture should keep the current one."""
        merged = merge_identity(current, {"username": "ana2"}, base_url)
        assert merged.profile_picture == current.profile_picture

    def test_new_relative_picture(self, current, base_url):
        """A new relative picture should be resolved and replace the old one."""
        merged = merge_identity(current, {"profilePic": "uploads/new.png"}, base_url)
        assert merged.profile_picture == "https://api.example/uploads/new.png"


class TestFallbackUserRecord:
    def test_username_from_email(self):
        """The username should be the email's local part."""
        record = fallback_user_record("ana@example.com", "not-a-jwt")
        assert record["username"] == "ana"
        assert record["email"] == "ana@example.com"

    def test_placeholder_id_for_opaque_token(self):
        """An opaque token should give the placeholder id."""
        assert fallback_user_record("ana@example.com", "opaque")["id"] == FALLBACK_USER_ID

    def test_id_from_jwt_subject(self):
        """A JWT token should provide the id from its sub claim."""
        token = create_test_token(user_id="user-456")
        assert fallback_user_record("ana@example.com", token)["id"] == "user-456"

    def test_expired_jwt_still_readable(self):
        """Claims are read without verification, so expiry does not matter."""
        token = create_test_token(user_id="user-456", expired=True)
        assert fallback_user_record("ana@example.com", token)["id"] == "user-456"

    def test_empty_email(self):
        """Without an email the username should be the fallback."""
        record = fallback_user_record("", "opaque")
        assert record["username"] == FALLBACK_USERNAME
        assert record["email"] is None
