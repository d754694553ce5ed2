"""
Tests for storage backends and storage failure handling.
"""

import pytest

from review_notice.notices.engine import NoticeEngine
from review_notice.notices.models import HiddenReason, Notice
from review_notice.storage.base import StorageError
from review_notice.storage.memory import (
    MemorySiteOptions,
    MemoryUserMeta,
    StaticCapabilities,
)
from review_notice.storage.sqlite import SqliteSiteOptions, SqliteUserMeta


class BrokenSiteOptions:
    """Site options whose backend is down."""

    def get(self, key):
        raise StorageError("backend unavailable")

    def set(self, key, value):
        raise StorageError("backend unavailable")


class TestMemoryStores:
    """Test in-memory backends."""

    def test_site_options(self):
        options = MemorySiteOptions({"a": 1})
        assert options.get("a") == 1
        assert options.get("b") is None

        options.set("b", 2)
        assert options.get("b") == 2
        assert "b" in options

    def test_user_meta_is_per_viewer(self):
        meta = MemoryUserMeta()
        meta.set("v1", "flag", True)

        assert meta.get("v1", "flag") is True
        assert meta.get("v2", "flag") is None

    def test_capability_roles(self):
        caps = StaticCapabilities(roles={"administrator": ["manage_options", "edit_plugins"]})
        caps.assign_role("admin", "administrator")
        caps.assign_role("ghost", "no-such-role")
        caps.grant("editor", "edit_posts")

        assert caps.has_capability("admin", "manage_options") is True
        assert caps.has_capability("editor", "edit_posts") is True
        assert caps.has_capability("editor", "manage_options") is False
        assert caps.has_capability("ghost", "manage_options") is False


class TestSqliteStores:
    """Test SQLite backends."""

    def test_site_options_roundtrip(self, tmp_path):
        options = SqliteSiteOptions(str(tmp_path / "notices.db"))

        assert options.get("demo_reviews_time") is None
        options.set("demo_reviews_time", 1700000000)
        options.set("demo_reviews_time", 1700000100)

        assert options.get("demo_reviews_time") == 1700000100

    def test_values_survive_reopen(self, tmp_path):
        db_path = str(tmp_path / "notices.db")
        SqliteUserMeta(db_path).set("v1", "demo_reviews_dismissed", True)

        meta = SqliteUserMeta(db_path)
        assert meta.get("v1", "demo_reviews_dismissed") is True
        assert meta.get("v2", "demo_reviews_dismissed") is None

    def test_shared_database_file(self, tmp_path):
        db_path = str(tmp_path / "nested" / "notices.db")
        options = SqliteSiteOptions(db_path)
        meta = SqliteUserMeta(db_path)

        options.set("key", "site")
        meta.set("v1", "key", "user")

        assert options.get("key") == "site"
        assert meta.get("v1", "key") == "user"

    def test_unopenable_database_raises_storage_error(self, tmp_path):
        with pytest.raises(StorageError):
            SqliteSiteOptions(str(tmp_path))


class TestStorageFailures:
    """Storage failures hide notices instead of breaking the host."""

    def test_evaluate_degrades_to_hidden(self):
        engine = NoticeEngine(
            BrokenSiteOptions(),
            MemoryUserMeta(),
            StaticCapabilities(grants={"v1": ["manage_options"]}),
        )
        notice = Notice(slug="demo", name="Demo")

        decision = engine.evaluate(notice, "v1")

        assert decision.visible is False
        assert decision.reason == HiddenReason.STORAGE_ERROR

    def test_action_failure_is_logged_not_raised(self, caplog):
        engine = NoticeEngine(
            BrokenSiteOptions(),
            MemoryUserMeta(),
            StaticCapabilities(grants={"v1": ["manage_options"]}),
        )
        notice = Notice(slug="demo", name="Demo")

        engine.dispatch_action(notice, "v1", "later")

        assert "Storage failure" in caplog.text


class TestCapabilityFile:
    """Test loading roles and viewer grants from YAML."""

    def test_roles_and_direct_grants(self, tmp_path):
        caps_file = tmp_path / "capabilities.yaml"
        caps_file.write_text(
            """
roles:
  administrator: [manage_options, activate_plugins]
viewers:
  1:
    roles: [administrator, no-such-role]
  "42":
    capabilities: [manage_options]
  "7": not-a-mapping
""",
            encoding="utf-8",
        )

        caps = StaticCapabilities.load_from_file(caps_file)

        assert caps.has_capability("1", "activate_plugins") is True
        assert caps.has_capability("42", "manage_options") is True
        assert caps.has_capability("42", "activate_plugins") is False
        assert caps.has_capability("7", "manage_options") is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StaticCapabilities.load_from_file(tmp_path / "missing.yaml")

    def test_malformed_viewers(self, tmp_path):
        caps_file = tmp_path / "capabilities.yaml"
        caps_file.write_text("viewers: [1, 2]\n", encoding="utf-8")

        with pytest.raises(ValueError):
            StaticCapabilities.load_from_file(caps_file)
