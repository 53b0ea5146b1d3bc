"""
技能注册中心

存储技能描述符，并根据任务描述选出最匹配的技能:
- Level 1: 元数据 (name, description) - 总是可用
- Level 2: body (完整指令) - 匹配/激活时原样返回
- Level 3: references - 由 SkillLoader 按需读取

注册中心在初始加载后冻结 (freeze)，之后只读，可以在多个调用方之间共享而无需加锁。
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import DuplicateNameError, NoMatchError, RegistryFrozenError, SkillNotFoundError

if TYPE_CHECKING:
    from .parser import ParsedSkill

logger = logging.getLogger(__name__)


def normalize_triggers(triggers: Iterable[str]) -> frozenset[str]:
    """触发关键词统一为小写、去除首尾空白，丢弃空串"""
    return frozenset(t.strip().lower() for t in triggers if t and t.strip())


@dataclass(frozen=True)
class SkillDescriptor:
    """
    技能描述符

    name 在注册中心内唯一，body 加载后不再修改。
    related 只是按名称的导航链接，不持有对方。
    """

    name: str
    triggers: frozenset[str]
    body: str
    description: str = ""
    version: str = ""
    related: tuple[str, ...] = ()
    disable_model_invocation: bool = False
    source_path: str | None = None
    references_dir: str | None = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "triggers", normalize_triggers(self.triggers))
        object.__setattr__(self, "related", tuple(self.related))

    @classmethod
    def from_parsed_skill(cls, skill: "ParsedSkill") -> "SkillDescriptor":
        """从 ParsedSkill 创建描述符"""
        meta = skill.metadata
        return cls(
            name=meta.name,
            triggers=frozenset(meta.triggers),
            body=skill.body,
            description=meta.description,
            version=meta.version,
            related=tuple(meta.related),
            disable_model_invocation=meta.disable_model_invocation,
            source_path=str(skill.path),
            references_dir=str(skill.references_dir) if skill.references_dir else None,
        )

    @property
    def references_path(self) -> Path | None:
        return Path(self.references_dir) if self.references_dir else None

    def hits(self, task_text: str) -> list[str]:
        """返回出现在 task_text 中的触发关键词 (按字母序，保证输出稳定)"""
        text = task_text.lower()
        return sorted(t for t in self.triggers if t in text)

    def to_metadata(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "triggers": sorted(self.triggers),
            "related": list(self.related),
            "auto_invoke": not self.disable_model_invocation,
        }


@dataclass(frozen=True)
class SkillMatch:
    """匹配结果"""

    skill: SkillDescriptor
    score: int
    hits: tuple[str, ...] = ()

    matched = True

    @property
    def name(self) -> str:
        return self.skill.name

    @property
    def body(self) -> str:
        """匹配技能的完整 body，原样返回"""
        return self.skill.body

    def __bool__(self) -> bool:
        return True


class NoMatch:
    """没有技能匹配 (单例 NO_MATCH)"""

    matched = False
    skill = None
    score = 0
    hits: tuple[str, ...] = ()
    body = None
    name = None

    _instance: "NoMatch | None" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()


class SkillRegistry:
    """
    技能注册中心

    提供:
    - 注册/注销 (仅在冻结前)
    - 按名称查找
    - 按任务描述匹配
    """

    def __init__(self, skills: Iterable[SkillDescriptor] = ()):
        # dict 保持插入顺序，即注册顺序
        self._skills: dict[str, SkillDescriptor] = {}
        self._frozen = False
        for skill in skills:
            self.register(skill)

    def register(self, skill: "SkillDescriptor | ParsedSkill") -> SkillDescriptor:
        """
        注册技能

        Args:
            skill: 技能描述符，或解析后的技能对象

        Raises:
            DuplicateNameError: 名称已存在
            RegistryFrozenError: 注册中心已冻结
        """
        if self._frozen:
            raise RegistryFrozenError("register")

        entry = skill if isinstance(skill, SkillDescriptor) else SkillDescriptor.from_parsed_skill(skill)

        if entry.name in self._skills:
            raise DuplicateNameError(entry.name)

        self._skills[entry.name] = entry
        logger.info(f"Registered skill: {entry.name}")
        return entry

    def unregister(self, name: str) -> bool:
        """
        注销技能

        Returns:
            是否成功
        """
        if self._frozen:
            raise RegistryFrozenError("unregister")

        if name in self._skills:
            del self._skills[name]
            logger.info(f"Unregistered skill: {name}")
            return True
        return False

    def freeze(self) -> "SkillRegistry":
        """冻结注册中心，之后只读"""
        if not self._frozen:
            self._frozen = True
            logger.debug(f"Skill registry frozen with {len(self._skills)} skills")
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> SkillDescriptor:
        """
        按名称精确查找

        Raises:
            SkillNotFoundError: 技能不存在
        """
        try:
            return self._skills[name]
        except KeyError:
            raise SkillNotFoundError(name) from None

    def get_body(self, name: str) -> str:
        """获取技能 body (Level 2)"""
        return self.get(name).body

    def has(self, name: str) -> bool:
        return name in self._skills

    def list_all(self) -> list[SkillDescriptor]:
        """列出所有技能 (注册顺序)"""
        return list(self._skills.values())

    def list_metadata(self) -> list[dict]:
        """
        列出所有技能元数据 (Level 1)
        """
        return [skill.to_metadata() for skill in self._skills.values()]

    def rank(self, task_text: str) -> list[SkillMatch]:
        """
        对所有技能打分

        每个出现在 task_text 中的触发关键词 (不区分大小写的子串匹配) 记 1 分。
        只返回得分大于 0 的技能，分数高的在前，同分按注册顺序。
        """
        if not task_text or not task_text.strip():
            return []

        scored = []
        for order, skill in enumerate(self._skills.values()):
            if skill.disable_model_invocation:
                continue
            hits = skill.hits(task_text)
            if hits:
                scored.append((len(hits), order, SkillMatch(skill, len(hits), tuple(hits))))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [m for _, _, m in scored]

    def match(self, task_text: str) -> "SkillMatch | NoMatch":
        """
        根据任务描述选择最匹配的技能

        Returns:
            SkillMatch，或者没有任何技能得分时返回 NO_MATCH
        """
        ranking = self.rank(task_text)
        if not ranking:
            logger.debug(f"No skill matched: {task_text!r}")
            return NO_MATCH

        best = ranking[0]
        logger.debug(f"Matched skill '{best.name}' (score={best.score}, hits={list(best.hits)})")
        return best

    def require_match(self, task_text: str) -> SkillMatch:
        """
        同 match，但没有匹配时抛出异常

        Raises:
            NoMatchError: 没有技能匹配
        """
        result = self.match(task_text)
        if not result:
            raise NoMatchError(task_text)
        return result

    def search(self, query: str, include_disabled: bool = False) -> list[SkillDescriptor]:
        """
        搜索技能 (匹配名称或描述)
        """
        results = []
        query_lower = query.lower()

        for skill in self._skills.values():
            if not include_disabled and skill.disable_model_invocation:
                continue

            if query_lower in skill.name.lower() or query_lower in skill.description.lower():
                results.append(skill)

        return results

    def related(self, name: str) -> list[SkillDescriptor]:
        """
        获取相关技能

        未注册的相关名称会被跳过 (related 只是导航用的弱引用)。

        Raises:
            SkillNotFoundError: name 本身不存在
        """
        skill = self.get(name)
        return [self._skills[r] for r in skill.related if r in self._skills]

    @property
    def count(self) -> int:
        return len(self._skills)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[SkillDescriptor]:
        return iter(self._skills.values())

    def __bool__(self) -> bool:
        """确保空 registry 不被误判为 falsy"""
        return True
