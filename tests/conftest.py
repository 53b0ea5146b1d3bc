"""共享 fixtures: 在 tmp_path 下生成 SKILL.md 目录树。"""

from pathlib import Path

import pytest
import yaml


def write_skill(
    root: Path,
    name: str,
    *,
    description: str | None = None,
    triggers: list[str] | None = None,
    body: str = "",
    related: list[str] | None = None,
    version: str | None = None,
    references: dict[str, str] | None = None,
    dir_name: str | None = None,
) -> Path:
    """在 root/<dir_name or name>/ 下写一个 SKILL.md，返回技能目录"""
    skill_dir = root / (dir_name or name)
    skill_dir.mkdir(parents=True, exist_ok=True)

    frontmatter: dict = {
        "name": name,
        "description": description or f"{name} skill",
    }
    if triggers is not None:
        frontmatter["triggers"] = triggers
    if related:
        frontmatter["related"] = related
    if version:
        frontmatter["metadata"] = {"version": version}

    content = "---\n" + yaml.safe_dump(frontmatter, sort_keys=False) + "---\n\n" + body
    (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")

    if references:
        ref_dir = skill_dir / "references"
        ref_dir.mkdir(exist_ok=True)
        for ref_name, ref_content in references.items():
            (ref_dir / ref_name).write_text(ref_content, encoding="utf-8")

    return skill_dir


@pytest.fixture
def skills_dir(tmp_path):
    """三个互相关联的技能，目录名顺序即注册顺序"""
    root = tmp_path / "skills"
    write_skill(
        root,
        "alpha-cli",
        triggers=["stably", "create", "cli"],
        body="# Alpha\n\nRun `stably test`.",
        related=["beta-rules"],
        version="1.0.0",
    )
    write_skill(
        root,
        "beta-rules",
        triggers=["sdk", "assertion", "stably"],
        body="# Beta\n\nUse AI assertions sparingly.",
        related=["gamma-setup", "missing-skill"],
        references={"notes.md": "# Notes\n"},
    )
    write_skill(
        root,
        "gamma-setup",
        triggers=["install", "setup"],
        body="# Gamma\n\nInstall the SDK.",
    )
    return root
