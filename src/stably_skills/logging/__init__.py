"""
stably-skills 日志系统

- 控制台彩色输出（stderr）
- 日志文件输出（按大小轮转）
- 分离 error.log（只记录 ERROR/CRITICAL）
"""

from .config import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
]
