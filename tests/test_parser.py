"""SKILL.md 解析器测试。"""

import logging
from pathlib import Path

import pytest

from stably_skills.skills import SkillParseError, SkillParser, parse_skill_directory

from .conftest import write_skill


@pytest.fixture
def parser():
    return SkillParser()


class TestParseContent:
    def test_full_frontmatter(self, parser, tmp_path):
        content = """---
name: demo-skill
description: |
  Demo description.
triggers: [Stably, create]
related: other-skill
allowed-tools: Bash Read
disable-model-invocation: true
license: MIT
metadata:
  version: 2.1
---

# Demo

Body text.
"""
        skill = parser.parse_content(content, tmp_path / "demo-skill" / "SKILL.md")

        assert skill.metadata.name == "demo-skill"
        assert skill.metadata.description == "Demo description."
        assert skill.metadata.triggers == ["Stably", "create"]
        assert skill.metadata.related == ["other-skill"]
        assert skill.metadata.allowed_tools == ["Bash", "Read"]
        assert skill.metadata.disable_model_invocation is True
        assert skill.metadata.license == "MIT"
        assert skill.metadata.version == "2.1"
        assert skill.body == "# Demo\n\nBody text."

    def test_top_level_version(self, parser, tmp_path):
        content = "---\nname: v\ndescription: d\nversion: 3.0.0\n---\nbody\n"
        skill = parser.parse_content(content, tmp_path / "v" / "SKILL.md")
        assert skill.metadata.version == "3.0.0"

    def test_missing_frontmatter(self, parser, tmp_path):
        with pytest.raises(SkillParseError, match="missing YAML frontmatter"):
            parser.parse_content("# Just markdown\n", tmp_path / "SKILL.md")

    def test_invalid_yaml(self, parser, tmp_path):
        with pytest.raises(SkillParseError, match="Invalid YAML"):
            parser.parse_content("---\nname: [unclosed\n---\nbody\n", tmp_path / "SKILL.md")

    def test_missing_description(self, parser, tmp_path):
        with pytest.raises(SkillParseError, match="description"):
            parser.parse_content("---\nname: x\n---\nbody\n", tmp_path / "x" / "SKILL.md")

    @pytest.mark.parametrize("name", ["Upper", "-lead", "trail-", "dou--ble", "a" * 65, "sp ace"])
    def test_invalid_names(self, parser, tmp_path, name):
        content = f"---\nname: '{name}'\ndescription: d\n---\nbody\n"
        with pytest.raises(SkillParseError):
            parser.parse_content(content, tmp_path / "SKILL.md")

    def test_parse_error_is_value_error(self, parser, tmp_path):
        with pytest.raises(ValueError):
            parser.parse_content("no frontmatter", tmp_path / "SKILL.md")

    @pytest.mark.parametrize("value", ["'false'", "'true'", "1", "no-bool"])
    def test_disable_model_invocation_must_be_bool(self, parser, tmp_path, value):
        content = f"---\nname: x\ndescription: d\ndisable-model-invocation: {value}\n---\nbody\n"
        with pytest.raises(SkillParseError, match="disable-model-invocation"):
            parser.parse_content(content, tmp_path / "x" / "SKILL.md")

    def test_disable_model_invocation_defaults_false(self, parser, tmp_path):
        skill = parser.parse_content("---\nname: x\ndescription: d\n---\nbody\n", tmp_path / "x" / "SKILL.md")
        assert skill.metadata.disable_model_invocation is False

    def test_triggers_must_be_list_or_string(self, parser, tmp_path):
        content = "---\nname: x\ndescription: d\ntriggers: {a: 1}\n---\nbody\n"
        with pytest.raises(SkillParseError, match="triggers"):
            parser.parse_content(content, tmp_path / "x" / "SKILL.md")


class TestParseDirectory:
    def test_references_dir_detected(self, tmp_path):
        skill_dir = write_skill(
            tmp_path, "with-refs", triggers=["x"], body="b", references={"b.md": "B", "a.md": "A"}
        )
        (skill_dir / "references" / "skip.txt").write_text("no")

        skill = parse_skill_directory(skill_dir)
        assert skill.references_dir == skill_dir / "references"
        assert [p.name for p in skill.get_references()] == ["a.md", "b.md"]

    def test_no_references_dir(self, tmp_path):
        skill = parse_skill_directory(write_skill(tmp_path, "plain", triggers=["x"]))
        assert skill.references_dir is None
        assert skill.get_references() == []

    def test_missing_file(self, parser, tmp_path):
        with pytest.raises(FileNotFoundError):
            parser.parse_directory(tmp_path / "nothing")


class TestValidate:
    def test_clean_skill(self, parser, tmp_path):
        skill = parser.parse_directory(write_skill(tmp_path, "clean", triggers=["x"], body="b"))
        assert parser.validate(skill) == []

    def test_warnings(self, parser, tmp_path):
        skill_dir = write_skill(
            tmp_path,
            "real-name",
            dir_name="other-dir",
            triggers=[],
            related=["Bad Name"],
            body="line\n" * 600,
        )
        warnings = parser.validate(parser.parse_directory(skill_dir))

        assert len(warnings) == 4
        assert any("must match" in w for w in warnings)
        assert any("600 lines" in w for w in warnings)
        assert any("no triggers" in w for w in warnings)
        assert any("Bad Name" in w for w in warnings)

    def test_name_mismatch_not_logged_while_parsing(self, parser, tmp_path, caplog):
        """目录名不匹配只由 validate 报告，解析本身不记日志"""
        skill_dir = write_skill(tmp_path, "real-name", dir_name="other-dir", triggers=["x"])
        with caplog.at_level(logging.DEBUG):
            skill = parser.parse_directory(skill_dir)

        assert not caplog.records
        assert any("must match" in w for w in parser.validate(skill))

    def test_path_is_kept(self, parser, tmp_path):
        skill_dir = write_skill(tmp_path, "p", triggers=["x"])
        skill = parser.parse_directory(skill_dir)
        assert skill.path == skill_dir / "SKILL.md"
        assert skill.skill_dir == Path(skill_dir)
