"""
stably-skills - Stably CLI/SDK 技能包

为 AI 编码助手提供使用 Stably 浏览器测试工具的说明文档，
并根据任务描述选出最合适的一份。
"""


def _resolve_version() -> str:
    """已安装包的元数据版本，源码直接运行时为 0.0.0-dev"""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("stably-skills")
    except PackageNotFoundError:
        return "0.0.0-dev"


__version__ = _resolve_version()
__author__ = "stably-skills"
