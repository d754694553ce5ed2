"""
Tests for the notice HTTP API and service wiring.
"""

import pytest
from fastapi.testclient import TestClient

from review_notice.core.config import AppConfig, ServerConfig, StorageConfig
from review_notice.notices.engine import NoticeEngine
from review_notice.notices.registry import NoticeRegistry
from review_notice.storage.memory import (
    MemorySiteOptions,
    MemoryUserMeta,
    StaticCapabilities,
)
from review_notice.storage.sqlite import SqliteSiteOptions
from review_notice.ui.http_server import build_services, create_app

DAY = 24 * 60 * 60


class FakeClock:
    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(clock):
    registry = NoticeRegistry()
    registry.register("demo-plugin", "Demo Plugin", {"screens": ["plugins"]})
    engine = NoticeEngine(
        MemorySiteOptions(),
        MemoryUserMeta(),
        StaticCapabilities(grants={"v1": ["manage_options"], "v2": ["manage_options"]}),
        clock=clock,
    )
    return TestClient(create_app(registry, engine))


def _get(client, viewer="v1", screen="plugins", **params):
    return client.get(
        "/notices/demo-plugin",
        params={"screen": screen, **params},
        headers={"X-Viewer-Id": viewer},
    )


class TestNoticeAPI:
    """Test notice endpoints."""

    def test_root_and_health(self, client):
        assert client.get("/").json()["name"] == "Review Notice API"
        assert client.get("/health").json() == {"status": "healthy", "notices": 1}

    def test_list_notices(self, client):
        assert client.get("/notices").json() == ["demo-plugin"]

    def test_first_view_is_hidden(self, client):
        response = _get(client)

        assert response.status_code == 200
        body = response.json()
        assert body["visible"] is False
        assert body["reason"] == "not_yet"

    def test_visible_after_waiting_period(self, client, clock):
        _get(client)
        clock.now += 8 * DAY

        body = _get(client, viewer_name="jane").json()

        assert body["visible"] is True
        assert body["classes"] == "notice notice-info"
        assert "<strong>Demo Plugin</strong>" in body["message"]
        assert body["message"].startswith("Hey Jane,")
        assert body["action_param"] == "demo_plugin_reviews_action"
        assert [a["action"] for a in body["actions"]] == ["review", "later", "dismiss"]

    def test_dismiss_action(self, client, clock):
        _get(client)
        clock.now += 8 * DAY

        response = client.post(
            "/notices/demo-plugin/actions/dismiss",
            params={"screen": "plugins"},
            headers={"X-Viewer-Id": "v1"},
        )

        assert response.json() == {"status": "accepted"}
        assert _get(client).json()["reason"] == "dismissed"
        assert _get(client, viewer="v2").json()["visible"] is True

    def test_later_action(self, client, clock):
        _get(client)
        clock.now += 8 * DAY

        client.post(
            "/notices/demo-plugin/actions/later",
            params={"screen": "plugins"},
            headers={"X-Viewer-Id": "v1"},
        )

        assert _get(client).json()["reason"] == "not_yet"

    def test_unknown_action_is_accepted_and_ignored(self, client, clock):
        _get(client)
        clock.now += 8 * DAY

        response = client.post(
            "/notices/demo-plugin/actions/explode",
            params={"screen": "plugins"},
            headers={"X-Viewer-Id": "v1"},
        )

        assert response.status_code == 200
        assert _get(client).json()["visible"] is True

    def test_wrong_screen(self, client):
        assert _get(client, screen="dashboard").json()["reason"] == "out_of_scope"

    def test_unknown_viewer(self, client):
        assert _get(client, viewer="guest").json()["reason"] == "unauthorized"

    def test_unknown_notice(self, client):
        response = client.get("/notices/missing", headers={"X-Viewer-Id": "v1"})
        assert response.status_code == 404

    def test_viewer_header_required(self, client):
        response = client.get("/notices/demo-plugin")
        assert response.status_code == 422


class TestBuildServices:
    """Test wiring services from configuration."""

    def test_sqlite_backend_with_notices_file(self, tmp_path):
        notices_file = tmp_path / "notices.yaml"
        notices_file.write_text(
            "notices:\n  - slug: demo-plugin\n    name: Demo Plugin\n",
            encoding="utf-8",
        )
        config = AppConfig(
            storage=StorageConfig(backend="sqlite", db_path=str(tmp_path / "n.db")),
            server=ServerConfig(notices_file=str(notices_file)),
        )

        registry, engine = build_services(config)

        assert registry.slugs() == ["demo-plugin"]
        assert isinstance(engine.clock_gate.options, SqliteSiteOptions)
        assert registry.get("demo-plugin").cap == config.notices.cap

    def test_memory_backend(self):
        config = AppConfig(storage=StorageConfig(backend="memory"))

        registry, engine = build_services(config)

        assert len(registry) == 0
        assert isinstance(engine.clock_gate.options, MemorySiteOptions)

    def test_configured_server_shows_due_notice(self, tmp_path):
        notices_file = tmp_path / "notices.yaml"
        notices_file.write_text(
            """
notices:
  - slug: demo-plugin
    name: Demo Plugin
    screens: [plugins]
roles:
  administrator: [manage_options]
viewers:
  1:
    roles: [administrator]
""",
            encoding="utf-8",
        )
        config = AppConfig(
            storage=StorageConfig(backend="memory"),
            server=ServerConfig(notices_file=str(notices_file)),
        )
        registry, engine = build_services(config)
        client = TestClient(create_app(registry, engine))
        headers = {"X-Viewer-Id": "1"}

        first = client.get("/notices/demo-plugin", params={"screen": "plugins"}, headers=headers)
        assert first.json()["reason"] == "not_yet"

        notice = registry.get("demo-plugin")
        engine.clock_gate.options.set(notice.key("time"), 1)

        due = client.get("/notices/demo-plugin", params={"screen": "plugins"}, headers=headers)
        assert due.json()["visible"] is True

        stranger = client.get(
            "/notices/demo-plugin", params={"screen": "plugins"}, headers={"X-Viewer-Id": "2"}
        )
        assert stranger.json()["reason"] == "unauthorized"

    def test_separate_capabilities_file(self, tmp_path):
        caps_file = tmp_path / "capabilities.yaml"
        caps_file.write_text(
            "viewers:\n  admin:\n    capabilities: [manage_options]\n",
            encoding="utf-8",
        )
        config = AppConfig(server=ServerConfig(capabilities_file=str(caps_file)))

        registry, engine = build_services(config)
        notice = registry.register("demo-plugin", "Demo Plugin")

        assert engine.auth.is_authorized("admin", notice) is True
        assert engine.auth.is_authorized("guest", notice) is False
