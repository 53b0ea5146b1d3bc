"""
技能加载器

从标准目录结构加载 SKILL.md 定义的技能:

    <skills-dir>/
      <skill-name>/
        SKILL.md
        references/
          *.md
"""

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from .errors import DuplicateNameError, SkillNotFoundError
from .parser import ParsedSkill, SkillParser
from .registry import SkillRegistry

logger = logging.getLogger(__name__)


def builtin_skills_root() -> Path:
    """
    返回内置技能目录（随 wheel 分发）。

    stably_skills/
      builtin_skills/<skill-name>/SKILL.md
    """
    return Path(__file__).resolve().parents[1] / "builtin_skills"


# 标准技能目录 (按优先级排序)
SKILL_DIRECTORIES = [
    # 内置技能（随包分发，优先级最高）
    "__builtin__",
    # 项目级别
    ".claude/skills",
    ".cursor/skills",
    "skills",
]


class SkillLoader:
    """
    技能加载器

    支持:
    - 从标准目录自动发现技能
    - 解析 SKILL.md 文件并注册
    - 按需读取参考文档
    """

    def __init__(
        self,
        registry: SkillRegistry | None = None,
        parser: SkillParser | None = None,
    ):
        self.registry = registry if registry is not None else SkillRegistry()
        self.parser = parser or SkillParser()
        self._loaded_skills: dict[str, ParsedSkill] = {}

    def discover_skill_directories(
        self,
        base_path: Path | None = None,
        include_project: bool = True,
        extra_dirs: Iterable[str | Path] = (),
    ) -> list[Path]:
        """
        发现所有技能目录

        Args:
            base_path: 基础路径 (项目根目录)
            include_project: 是否包含项目级目录
            extra_dirs: 额外的技能目录

        Returns:
            存在的技能目录列表 (去重，保持优先级顺序)
        """
        base_path = base_path or Path.cwd()
        candidates: list[Path] = []

        for skill_dir in SKILL_DIRECTORIES:
            if skill_dir == "__builtin__":
                candidates.append(builtin_skills_root())
            elif include_project:
                candidates.append(base_path / skill_dir)

        for extra in extra_dirs:
            path = Path(extra).expanduser()
            candidates.append(path if path.is_absolute() else base_path / path)

        directories: list[Path] = []
        seen: set[Path] = set()
        for path in candidates:
            if not path.is_dir():
                continue
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            directories.append(path)
            logger.debug(f"Found skill directory: {path}")

        return directories

    def load_all(
        self,
        base_path: Path | None = None,
        include_project: bool = True,
        extra_dirs: Iterable[str | Path] = (),
    ) -> int:
        """
        从所有标准目录加载技能

        Returns:
            加载的技能数量
        """
        directories = self.discover_skill_directories(base_path, include_project, extra_dirs)
        loaded = 0

        for skill_dir in directories:
            loaded += self.load_from_directory(skill_dir)

        return loaded

    def load_from_directory(self, directory: Path) -> int:
        """
        从目录加载所有技能

        每个包含 SKILL.md 的子目录被视为一个技能，按目录名顺序注册。

        Returns:
            加载的技能数量
        """
        if not directory.is_dir():
            logger.warning(f"Skill directory not found: {directory}")
            return 0

        loaded = 0

        for item in sorted(directory.iterdir()):
            if not item.is_dir() or not (item / "SKILL.md").exists():
                continue
            if self.load_skill(item) is not None:
                loaded += 1

        logger.info(f"Loaded {loaded} skills from {directory}")
        return loaded

    def load_skill(self, skill_dir: Path) -> ParsedSkill | None:
        """
        加载单个技能

        解析失败或重名时记录日志并返回 None，不影响其他技能加载。
        """
        try:
            skill = self.parser.parse_directory(skill_dir)
        except (ValueError, OSError) as e:
            logger.error(f"Failed to load skill from {skill_dir}: {e}")
            return None

        for warning in self.parser.validate(skill):
            logger.warning(f"Skill validation warning: {warning}")

        try:
            self.registry.register(skill)
        except DuplicateNameError:
            logger.warning(
                f"Skill '{skill.metadata.name}' from {skill_dir} shadowed by an earlier "
                f"skill with the same name, skipping"
            )
            return None

        self._loaded_skills[skill.metadata.name] = skill
        logger.debug(f"Loaded skill: {skill.metadata.name}")
        return skill

    def get_skill(self, name: str) -> ParsedSkill | None:
        """获取已加载的技能"""
        return self._loaded_skills.get(name)

    def list_references(self, name: str) -> list[str]:
        """
        列出技能的参考文档名称

        Raises:
            SkillNotFoundError: 技能不存在
        """
        references_dir = self.registry.get(name).references_path
        if references_dir is None or not references_dir.is_dir():
            return []
        return sorted(p.name for p in references_dir.iterdir() if p.suffix == ".md")

    def get_reference(self, name: str, ref_name: str) -> str:
        """
        获取技能参考文档 (Level 3)

        Args:
            name: 技能名称
            ref_name: 参考文档文件名 (如 ai-assertions.md)

        Raises:
            SkillNotFoundError: 技能或文档不存在
        """
        skill = self.registry.get(name)

        # 只允许纯文件名，拒绝路径穿越
        if not ref_name or "/" in ref_name or "\\" in ref_name or ref_name.startswith("."):
            raise SkillNotFoundError(name, reference=ref_name)

        references_dir = skill.references_path
        if references_dir is None:
            raise SkillNotFoundError(name, reference=ref_name)

        ref_path = references_dir / ref_name
        if not ref_path.is_file():
            raise SkillNotFoundError(name, reference=ref_name)

        return ref_path.read_text(encoding="utf-8")

    @property
    def loaded_count(self) -> int:
        """已加载技能数量"""
        return len(self._loaded_skills)

    @property
    def loaded_skills(self) -> list[ParsedSkill]:
        """所有已加载的技能"""
        return list(self._loaded_skills.values())


def load_registry(
    base_path: Path | None = None,
    include_project: bool = True,
    extra_dirs: Iterable[str | Path] = (),
) -> SkillLoader:
    """加载所有目录中的技能并冻结注册中心，返回 loader (loader.registry 即注册中心)"""
    loader = SkillLoader()
    loader.load_all(base_path, include_project=include_project, extra_dirs=extra_dirs)
    loader.registry.freeze()
    return loader


@lru_cache(maxsize=1)
def builtin_loader() -> SkillLoader:
    """只包含内置技能的 loader，每个进程只构建一次"""
    loader = SkillLoader()
    loader.load_from_directory(builtin_skills_root())
    loader.registry.freeze()
    return loader


def load_builtin_registry() -> SkillRegistry:
    """内置技能的只读注册中心"""
    return builtin_loader().registry
