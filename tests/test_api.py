"""HTTP API 测试 (FastAPI TestClient)。"""

import pytest
from fastapi.testclient import TestClient

from stably_skills.api import create_app
from stably_skills.skills import SkillLoader, load_builtin_registry

from .conftest import write_skill


@pytest.fixture
def client():
    return TestClient(create_app())


class TestSkillRoutes:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["skills"] == 3

    def test_list(self, client):
        resp = client.get("/api/skills")
        assert resp.status_code == 200
        names = [s["name"] for s in resp.json()["skills"]]
        assert names == ["stably-cli", "stably-sdk-rules", "stably-sdk-setup"]

    def test_get_skill(self, client):
        resp = client.get("/api/skills/stably-sdk-rules")
        assert resp.status_code == 200
        data = resp.json()
        assert data["body"] == load_builtin_registry().get_body("stably-sdk-rules")
        assert data["references"] == ["ai-assertions.md", "email-inbox.md"]
        assert data["related"] == ["stably-sdk-setup", "stably-cli"]

    def test_get_unknown_skill_is_404(self, client):
        resp = client.get("/api/skills/nope")
        assert resp.status_code == 404
        assert resp.json()["error_type"] == "not_found"

    def test_reference(self, client):
        resp = client.get("/api/skills/stably-sdk-rules/references/ai-assertions.md")
        assert resp.status_code == 200
        assert resp.json()["content"].startswith("# Writing AI assertion prompts")

        assert client.get("/api/skills/stably-sdk-rules/references/absent.md").status_code == 404

    def test_catalog(self, client):
        resp = client.get("/api/catalog")
        assert resp.status_code == 200
        assert "- **stably-cli**" in resp.json()["catalog"]


class TestMatchRoute:
    def test_match(self, client):
        resp = client.post("/api/skills/match", json={"task": "create a test with stably"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["matched"] is True
        assert data["name"] == "stably-cli"
        assert data["body"] == load_builtin_registry().get_body("stably-cli")
        assert data["ranking"] is None

    def test_miss_is_not_an_error(self, client):
        resp = client.post("/api/skills/match", json={"task": "unrelated text about weather"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["matched"] is False
        assert data["body"] is None
        assert data["name"] is None

    def test_ranking(self, client):
        resp = client.post("/api/skills/match", json={"task": "sdk playwright setup", "all": True})
        data = resp.json()
        assert data["name"] == "stably-sdk-rules"
        assert [r["name"] for r in data["ranking"]] == ["stably-sdk-rules", "stably-sdk-setup"]

    def test_task_is_required(self, client):
        assert client.post("/api/skills/match", json={}).status_code == 422

    def test_custom_loader(self, tmp_path):
        write_skill(tmp_path, "only-skill", triggers=["hello"], body="HELLO")
        loader = SkillLoader()
        loader.load_from_directory(tmp_path)
        loader.registry.freeze()

        client = TestClient(create_app(loader))
        data = client.post("/api/skills/match", json={"task": "Hello there"}).json()
        assert data["name"] == "only-skill"
        assert data["body"] == "HELLO"

    def test_catalog_built_once_per_app(self):
        """清单在 create_app 时生成一次，后续请求复用缓存"""
        app = create_app()
        client = TestClient(app)
        catalog = app.state.catalog

        first = client.get("/api/catalog").json()["catalog"]
        cached = catalog._cached_catalog
        second = client.get("/api/catalog").json()["catalog"]

        assert app.state.catalog is catalog
        assert cached is not None
        assert catalog._cached_catalog is cached
        assert first == second
