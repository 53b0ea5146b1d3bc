"""
stably-skills 配置模块
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用配置 (环境变量前缀 STABLY_SKILLS_)"""

    # 路径配置
    project_root: Path = Field(
        default_factory=lambda: Path.cwd(),
        description="项目根目录 (默认为当前工作目录)",
    )
    include_project_skills: bool = Field(
        default=True, description="是否加载项目级技能目录 (.claude/skills, skills 等)"
    )
    extra_skill_dirs: list[str] = Field(
        default_factory=list, description="额外的技能目录 (相对路径基于 project_root)"
    )

    # 日志
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: str = Field(default="logs", description="日志目录")
    log_file_prefix: str = Field(default="stably-skills", description="日志文件前缀")
    log_max_size_mb: int = Field(default=10, description="单个日志文件最大大小（MB）")
    log_backup_count: int = Field(default=30, description="保留的日志文件数量")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="日志格式",
    )
    log_to_console: bool = Field(default=True, description="是否输出到控制台")
    log_to_file: bool = Field(default=False, description="是否输出到文件")

    # HTTP API
    api_host: str = Field(default="127.0.0.1", description="API 监听地址")
    api_port: int = Field(default=18960, description="API 端口")

    model_config = {
        "env_prefix": "STABLY_SKILLS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def log_dir_path(self) -> Path:
        """日志目录完整路径"""
        return self.project_root / self.log_dir

    @property
    def log_file_path(self) -> Path:
        """主日志文件路径"""
        return self.log_dir_path / f"{self.log_file_prefix}.log"

    @property
    def builtin_skills_path(self) -> Path:
        """内置技能目录"""
        from .skills.loader import builtin_skills_root

        return builtin_skills_root()


# 全局配置实例
settings = Settings()
