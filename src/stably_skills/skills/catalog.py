"""
技能目录 (Skill Catalog)

渐进式披露的第一级: 技能清单 (name + description)，
注入到 Agent 的系统提示中，让大模型知道有哪些技能可用。
完整指令 (Level 2) 通过 match / show 获取。
"""

import logging

from .registry import SkillRegistry

logger = logging.getLogger(__name__)


class SkillCatalog:
    """
    技能目录

    管理技能清单的生成和格式化，用于系统提示注入。
    """

    CATALOG_TEMPLATE = """
## Available Skills

The following skills describe how to use the Stably CLI and SDK.
When a task matches a skill's description, load that skill's full instructions before acting.

{skill_list}

### How to Use Skills

1. **Identify the relevant skill** from the list above based on the task
2. **Load its instructions**: `stably-skills match "<task>"` or `stably-skills show <name>`
3. **Open reference documents** only when the instructions point to them
"""

    SKILL_ENTRY_TEMPLATE = "- **{name}**: {description}"
    RELATED_TEMPLATE = "  Related: {related}"

    def __init__(self, registry: SkillRegistry):
        self.registry = registry
        self._cached_catalog: str | None = None

    def generate_catalog(self) -> str:
        """
        生成技能清单

        Returns:
            格式化的技能清单字符串
        """
        skills = self.registry.list_all()

        if not skills:
            return "\n## Available Skills\n\nNo skills installed.\n"

        skill_entries = []
        for skill in skills:
            # 只取描述第一行，过长截断
            first_line = skill.description.split("\n")[0].strip()
            if len(first_line) > 120:
                first_line = first_line[:117] + "..."

            skill_entries.append(
                self.SKILL_ENTRY_TEMPLATE.format(name=skill.name, description=first_line)
            )

            related = [r.name for r in self.registry.related(skill.name)]
            if related:
                skill_entries.append(
                    self.RELATED_TEMPLATE.format(related=", ".join(f"`{r}`" for r in related))
                )

        catalog = self.CATALOG_TEMPLATE.format(skill_list="\n".join(skill_entries))
        self._cached_catalog = catalog

        logger.info(f"Generated skill catalog with {len(skills)} skills")
        return catalog

    def get_catalog(self, refresh: bool = False) -> str:
        """获取技能清单 (默认使用缓存)"""
        if refresh or self._cached_catalog is None:
            return self.generate_catalog()
        return self._cached_catalog

    def get_compact_catalog(self) -> str:
        """
        获取紧凑版技能清单 (仅名称列表)

        用于 token 受限的场景
        """
        skills = self.registry.list_all()
        if not skills:
            return "No skills installed."

        return f"Available skills: {', '.join(s.name for s in skills)}"

    def get_skill_summary(self, skill_name: str) -> str | None:
        """单个技能的摘要 (name + description)，不存在时返回 None"""
        if skill_name not in self.registry:
            return None

        skill = self.registry.get(skill_name)
        return f"**{skill.name}**: {skill.description}"

    def invalidate_cache(self) -> None:
        self._cached_catalog = None

    @property
    def skill_count(self) -> int:
        return self.registry.count


def generate_skill_catalog(registry: SkillRegistry) -> str:
    """便捷函数：生成技能清单"""
    return SkillCatalog(registry).generate_catalog()
