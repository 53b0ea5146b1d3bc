"""
日志初始化

CLI 的 stdout 留给技能正文和 JSON，所以控制台日志一律走 stderr。
文件日志默认关闭，由 STABLY_SKILLS_LOG_TO_FILE 打开。
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .handlers import ColoredConsoleHandler, ErrorOnlyHandler

# 只在出问题时才需要看到的库
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def _file_handlers(
    log_dir: Path, prefix: str, max_size_mb: int, backup_count: int
) -> list[logging.Handler]:
    """<prefix>.log 记录全部日志，error.log 只收 ERROR 以上"""
    log_dir.mkdir(parents=True, exist_ok=True)

    main_handler = RotatingFileHandler(
        log_dir / f"{prefix}.log",
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )
    main_handler.setLevel(logging.DEBUG)

    error_handler = ErrorOnlyHandler(
        log_dir / "error.log",
        when="midnight",
        interval=1,
        backupCount=backup_count,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)

    return [main_handler, error_handler]


def setup_logging(
    log_dir: Path | None = None,
    log_level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file_prefix: str = "stably-skills",
    log_max_size_mb: int = 10,
    log_backup_count: int = 30,
    log_to_console: bool = True,
    log_to_file: bool = False,
) -> logging.Logger:
    """
    (重新) 配置根日志记录器

    每次调用都会替换根记录器上已有的处理器，CLI 回调可以放心多次调用。
    log_level 不认识时退回 INFO。
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = []
    if log_to_console:
        console_handler = ColoredConsoleHandler()
        console_handler.setLevel(logging.DEBUG)
        handlers.append(console_handler)
    if log_to_file and log_dir:
        handlers.extend(
            _file_handlers(Path(log_dir), log_file_prefix, log_max_size_mb, log_backup_count)
        )

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
