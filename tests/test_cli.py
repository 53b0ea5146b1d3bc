"""CLI 测试 (typer CliRunner)。"""

import json
import logging

import pytest
from typer.testing import CliRunner

from stably_skills.main import app
from stably_skills.skills import load_builtin_registry

from .conftest import write_skill

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI 回调会重新配置根日志记录器，测试后恢复"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def invoke(*args):
    return runner.invoke(app, ["--no-project", *args])


class TestMatchCommand:
    def test_match_prints_body(self):
        result = invoke("match", "create a test with stably")
        assert result.exit_code == 0
        assert result.stdout.strip() == load_builtin_registry().get_body("stably-cli").strip()

    def test_match_json(self):
        result = invoke("match", "create a test with stably", "--json")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["matched"] is True
        assert payload["name"] == "stably-cli"
        assert payload["score"] >= 2
        assert payload["body"] == load_builtin_registry().get_body("stably-cli")

    def test_no_match_exits_1(self):
        result = invoke("match", "unrelated text about weather")
        assert result.exit_code == 1
        assert "No skill matched" in result.output

    def test_no_match_json(self):
        result = invoke("match", "unrelated text about weather", "--json")
        assert result.exit_code == 1
        assert json.loads(result.stdout) == {
            "matched": False,
            "name": None,
            "score": 0,
            "hits": [],
            "body": None,
        }

    def test_no_match_json_all_has_empty_ranking(self):
        """未命中时 JSON 的键与命中时一致"""
        result = invoke("match", "unrelated text about weather", "--json", "--all")
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["ranking"] == []
        assert set(payload) == {"matched", "name", "score", "hits", "body", "ranking"}

    def test_match_all_json_has_ranking(self):
        result = invoke("match", "install and set up the sdk", "--json", "--all")
        payload = json.loads(result.stdout)
        assert payload["name"] == "stably-sdk-setup"
        assert [r["name"] for r in payload["ranking"]] == ["stably-sdk-setup", "stably-sdk-rules"]


class TestShowCommand:
    def test_show_body(self):
        result = invoke("show", "stably-sdk-setup")
        assert result.exit_code == 0
        assert "# Stably SDK setup" in result.stdout

    def test_show_reference(self):
        result = invoke("show", "stably-sdk-rules", "--reference", "email-inbox.md")
        assert result.exit_code == 0
        assert "# Email inbox flows" in result.stdout

    def test_show_unknown(self):
        result = invoke("show", "nope")
        assert result.exit_code == 1
        assert "Skill not found: nope" in result.output


class TestOtherCommands:
    def test_list(self):
        result = invoke("list")
        assert result.exit_code == 0
        for name in ("stably-cli", "stably-sdk-rules", "stably-sdk-setup"):
            assert name in result.stdout

    def test_catalog_compact(self):
        result = invoke("catalog", "--compact")
        assert result.stdout.strip() == "Available skills: stably-cli, stably-sdk-rules, stably-sdk-setup"

    def test_catalog(self):
        result = invoke("catalog")
        assert "## Available Skills" in result.stdout
        assert "- **stably-cli**" in result.stdout

    def test_validate_builtin(self):
        result = invoke("validate")
        assert result.exit_code == 0

    def test_validate_reports_errors(self, tmp_path):
        write_skill(tmp_path, "good-skill", triggers=["x"], body="ok")
        bad = tmp_path / "bad-skill"
        bad.mkdir()
        (bad / "SKILL.md").write_text("not a skill", encoding="utf-8")

        result = invoke("validate", str(tmp_path))
        assert result.exit_code == 1
        assert "bad-skill" in result.stdout

    def test_extra_skills_dir(self, tmp_path):
        write_skill(tmp_path, "weather-skill", triggers=["weather"], body="WEATHER BODY")
        result = invoke("--skills-dir", str(tmp_path), "match", "unrelated text about weather")
        assert result.exit_code == 0
        assert result.stdout.strip() == "WEATHER BODY"
