"""
技能系统错误

提供 SkillError 异常类和 ErrorType 枚举，
调用方 (CLI / HTTP API) 可以根据错误类型决定退出码或状态码。

Usage:
    from stably_skills.skills.errors import SkillNotFoundError

    try:
        skill = registry.get(name)
    except SkillNotFoundError as e:
        print(e.to_dict())
"""

from enum import Enum
from typing import Any


class ErrorType(Enum):
    """技能错误类型"""

    DUPLICATE = "duplicate"  # 注册时名称冲突
    NOT_FOUND = "not_found"  # 按名称查找失败
    NO_MATCH = "no_match"  # 任务描述没有匹配到任何技能
    FROZEN = "frozen"  # 注册中心已冻结，不允许修改
    INVALID = "invalid"  # SKILL.md 格式错误


_ERROR_TYPE_HINTS: dict[ErrorType, str] = {
    ErrorType.DUPLICATE: "技能名称必须唯一，请重命名后再注册",
    ErrorType.NOT_FOUND: "技能不存在，请用 list 查看可用技能",
    ErrorType.NO_MATCH: "没有技能匹配该任务描述，请换用更具体的关键词",
    ErrorType.FROZEN: "注册中心在加载完成后只读",
    ErrorType.INVALID: "请检查 SKILL.md 的 YAML frontmatter",
}


class SkillError(Exception):
    """技能系统错误基类"""

    error_type: ErrorType = ErrorType.INVALID

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """序列化为字典"""
        result: dict[str, Any] = {
            "error": True,
            "error_type": self.error_type.value,
            "message": self.message,
            "hint": _ERROR_TYPE_HINTS.get(self.error_type, ""),
        }
        if self.details:
            result["details"] = self.details
        return result


class DuplicateNameError(SkillError):
    """同名技能已注册"""

    error_type = ErrorType.DUPLICATE

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Skill '{name}' is already registered", details={"name": name})


class NotFoundError(SkillError):
    """查找失败"""

    error_type = ErrorType.NOT_FOUND


class SkillNotFoundError(NotFoundError):
    """按名称找不到技能 (或技能的参考文档)"""

    def __init__(self, name: str, *, reference: str | None = None) -> None:
        self.name = name
        self.reference = reference
        details: dict[str, Any] = {"name": name}
        if reference is None:
            message = f"Skill not found: {name}"
        else:
            message = f"Reference '{reference}' not found for skill: {name}"
            details["reference"] = reference
        super().__init__(message, details=details)


class NoMatchError(NotFoundError):
    """没有技能匹配任务描述"""

    error_type = ErrorType.NO_MATCH

    def __init__(self, task_text: str) -> None:
        self.task_text = task_text
        super().__init__("No skill matched", details={"task": task_text})


class RegistryFrozenError(SkillError):
    """注册中心已冻结"""

    error_type = ErrorType.FROZEN

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"Cannot {operation}: skill registry is frozen",
            details={"operation": operation},
        )


class SkillParseError(SkillError, ValueError):
    """SKILL.md 解析或校验失败"""

    error_type = ErrorType.INVALID
