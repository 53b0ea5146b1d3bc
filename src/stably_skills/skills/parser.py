"""
SKILL.md 解析器

解析 SKILL.md 文件的 YAML frontmatter 和 Markdown body。

frontmatter 示例:

    ---
    name: stably-cli
    description: Use the Stably CLI to create, run and fix browser tests.
    triggers: [stably, create, cli]
    related: [stably-sdk-rules]
    metadata:
      version: "1.2.0"
    ---
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import SkillParseError

NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

# body 建议行数上限 (约 5000 tokens)
MAX_BODY_LINES = 500


@dataclass
class SkillMetadata:
    """
    技能元数据 (来自 YAML frontmatter)

    必需字段:
    - name: 技能名称 (1-64字符, 小写字母/数字/连字符)
    - description: 技能描述 (1-1024字符)

    可选字段:
    - triggers: 触发关键词
    - related: 相关技能名称 (仅用于导航)
    - license: 许可证
    - compatibility: 环境要求
    - metadata: 额外元数据 (version 等)
    - allowed_tools: 预授权工具列表
    - disable_model_invocation: 是否禁用自动匹配
    """

    name: str
    description: str
    triggers: list[str] = field(default_factory=list)
    related: list[str] = field(default_factory=list)
    license: str | None = None
    compatibility: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    allowed_tools: list[str] = field(default_factory=list)
    disable_model_invocation: bool = False

    def __post_init__(self):
        self._validate_name()
        self._validate_description()

    def _validate_name(self):
        if not self.name:
            raise SkillParseError("name field is required")

        if len(self.name) > 64:
            raise SkillParseError(f"name must be <= 64 characters, got {len(self.name)}")

        if not NAME_PATTERN.match(self.name):
            raise SkillParseError(
                f"name must contain only lowercase letters, numbers, and hyphens. "
                f"Cannot start/end with hyphen or have consecutive hyphens. Got: {self.name}"
            )

    def _validate_description(self):
        if not self.description:
            raise SkillParseError("description field is required")

        if len(self.description) > 1024:
            raise SkillParseError(
                f"description must be <= 1024 characters, got {len(self.description)}"
            )

    @property
    def version(self) -> str:
        """版本号 (自由文本，不影响匹配)"""
        return str(self.metadata.get("version", ""))


@dataclass
class ParsedSkill:
    """
    解析后的技能

    包含元数据和完整的 SKILL.md 内容
    """

    metadata: SkillMetadata
    body: str  # Markdown body
    path: Path  # SKILL.md 文件路径
    references_dir: Path | None = None

    @property
    def skill_dir(self) -> Path:
        """技能根目录"""
        return self.path.parent

    def get_references(self) -> list[Path]:
        """获取 references/ 目录下的所有文档"""
        if self.references_dir and self.references_dir.exists():
            return sorted(f for f in self.references_dir.iterdir() if f.suffix == ".md")
        return []


def _as_list(value, field_name: str, path: Path) -> list[str]:
    """frontmatter 中的列表字段既可以写成 YAML 列表，也可以写成空格分隔的字符串"""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    raise SkillParseError(f"'{field_name}' must be a list or a string in {path}")


def _as_bool(value, field_name: str, path: Path) -> bool:
    """只接受 YAML 布尔值，"false" 之类的字符串视为错误"""
    if isinstance(value, bool):
        return value
    raise SkillParseError(f"'{field_name}' must be true or false in {path}")


class SkillParser:
    """
    SKILL.md 解析器
    """

    FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)$", re.DOTALL)

    def parse_file(self, path: Path) -> ParsedSkill:
        """
        解析 SKILL.md 文件

        Raises:
            SkillParseError: 解析失败
            FileNotFoundError: 文件不存在
        """
        if not path.exists():
            raise FileNotFoundError(f"SKILL.md not found: {path}")

        content = path.read_text(encoding="utf-8")
        return self.parse_content(content, path)

    def parse_content(self, content: str, path: Path) -> ParsedSkill:
        """
        解析 SKILL.md 内容

        Args:
            content: 文件内容
            path: 文件路径 (用于定位 references/ 目录)
        """
        match = self.FRONTMATTER_PATTERN.match(content)
        if not match:
            raise SkillParseError(f"Invalid SKILL.md format: missing YAML frontmatter in {path}")

        yaml_content = match.group(1)
        body = match.group(2).strip()

        try:
            data = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise SkillParseError(f"Invalid YAML frontmatter in {path}: {e}") from e

        if not isinstance(data, dict):
            raise SkillParseError(f"YAML frontmatter must be a mapping in {path}")

        metadata = self._build_metadata(data, path)

        references_dir = path.parent / "references"

        return ParsedSkill(
            metadata=metadata,
            body=body,
            path=path,
            references_dir=references_dir if references_dir.is_dir() else None,
        )

    def _build_metadata(self, data: dict, path: Path) -> SkillMetadata:
        """从 YAML 数据构建元数据"""
        name = data.get("name")
        description = data.get("description")

        if not name:
            raise SkillParseError(f"Missing required 'name' field in {path}")
        if not description:
            raise SkillParseError(f"Missing required 'description' field in {path}")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise SkillParseError(f"'metadata' must be a mapping in {path}")
        # 顶层 version 也接受，统一放进 metadata
        if "version" in data and "version" not in metadata:
            metadata["version"] = data["version"]

        return SkillMetadata(
            name=str(name),
            description=str(description).strip(),
            triggers=_as_list(data.get("triggers"), "triggers", path),
            related=_as_list(data.get("related"), "related", path),
            license=data.get("license"),
            compatibility=data.get("compatibility"),
            metadata={str(k): str(v) for k, v in metadata.items()},
            allowed_tools=_as_list(data.get("allowed-tools"), "allowed-tools", path),
            disable_model_invocation=_as_bool(
                data.get("disable-model-invocation", False), "disable-model-invocation", path
            ),
        )

    def parse_directory(self, skill_dir: Path) -> ParsedSkill:
        """解析技能目录 (读取其中的 SKILL.md)"""
        return self.parse_file(skill_dir / "SKILL.md")

    def validate(self, skill: ParsedSkill) -> list[str]:
        """
        验证技能

        Returns:
            警告列表 (空列表表示验证通过)
        """
        errors = []

        if skill.skill_dir.name != skill.metadata.name:
            errors.append(
                f"Directory name '{skill.skill_dir.name}' must match "
                f"skill name '{skill.metadata.name}'"
            )

        body_lines = skill.body.count("\n") + 1
        if body_lines > MAX_BODY_LINES:
            errors.append(
                f"SKILL.md body has {body_lines} lines. "
                f"Recommended: keep under {MAX_BODY_LINES} lines for efficient context usage."
            )

        if not [t for t in skill.metadata.triggers if t.strip()]:
            errors.append(
                f"Skill '{skill.metadata.name}' has no triggers and can only be fetched by name"
            )

        for related in skill.metadata.related:
            if not NAME_PATTERN.match(related):
                errors.append(f"Related skill name '{related}' is not a valid skill name")

        return errors


# 全局解析器实例
skill_parser = SkillParser()


def parse_skill(path: Path) -> ParsedSkill:
    """便捷函数：解析技能"""
    return skill_parser.parse_file(path)


def parse_skill_directory(skill_dir: Path) -> ParsedSkill:
    """便捷函数：解析技能目录"""
    return skill_parser.parse_directory(skill_dir)
