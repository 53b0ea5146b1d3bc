"""
技能系统

支持渐进式披露:
- Level 1: 技能清单 (name + description) - 系统提示
- Level 2: 完整指令 (SKILL.md body) - 匹配时原样返回
- Level 3: 参考文档 (references/*.md) - 按需加载
"""

from .catalog import (
    SkillCatalog,
    generate_skill_catalog,
)
from .errors import (
    DuplicateNameError,
    ErrorType,
    NoMatchError,
    NotFoundError,
    RegistryFrozenError,
    SkillError,
    SkillNotFoundError,
    SkillParseError,
)
from .loader import (
    SKILL_DIRECTORIES,
    SkillLoader,
    builtin_loader,
    builtin_skills_root,
    load_builtin_registry,
    load_registry,
)
from .parser import (
    ParsedSkill,
    SkillMetadata,
    SkillParser,
    parse_skill,
    parse_skill_directory,
)
from .registry import (
    NO_MATCH,
    NoMatch,
    SkillDescriptor,
    SkillMatch,
    SkillRegistry,
)

__all__ = [
    # Parser
    "SkillParser",
    "SkillMetadata",
    "ParsedSkill",
    "parse_skill",
    "parse_skill_directory",
    # Registry
    "SkillRegistry",
    "SkillDescriptor",
    "SkillMatch",
    "NoMatch",
    "NO_MATCH",
    # Loader
    "SkillLoader",
    "SKILL_DIRECTORIES",
    "builtin_skills_root",
    "builtin_loader",
    "load_builtin_registry",
    "load_registry",
    # Catalog
    "SkillCatalog",
    "generate_skill_catalog",
    # Errors
    "ErrorType",
    "SkillError",
    "DuplicateNameError",
    "NotFoundError",
    "SkillNotFoundError",
    "NoMatchError",
    "RegistryFrozenError",
    "SkillParseError",
]
