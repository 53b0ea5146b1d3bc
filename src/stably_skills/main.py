"""
stably-skills CLI 入口

使用 Typer 和 Rich 提供命令行界面:
- list: 列出技能
- show: 输出技能正文 / 参考文档
- match: 根据任务描述选出技能
- catalog: 输出技能清单
- validate: 校验技能目录
- serve: 启动 HTTP API
"""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import settings
from .logging import setup_logging
from .skills import (
    NoMatchError,
    SkillCatalog,
    SkillError,
    SkillLoader,
    SkillParser,
    load_registry,
)

logger = logging.getLogger(__name__)

# Typer 应用
app = typer.Typer(
    name="stably-skills",
    help="stably-skills - Stably CLI/SDK skill documents for AI coding agents",
    add_completion=False,
)

# Rich 控制台
console = Console()
err_console = Console(stderr=True)

# 全局组件
_loader: SkillLoader | None = None
_options: dict = {"include_project": True, "extra_dirs": []}


def get_loader() -> SkillLoader:
    """获取或创建 loader (注册中心加载后冻结)"""
    global _loader
    if _loader is None:
        _loader = load_registry(
            settings.project_root,
            include_project=_options["include_project"],
            extra_dirs=_options["extra_dirs"],
        )
    return _loader


def _fail(error: SkillError) -> None:
    """输出错误并以退出码 1 结束"""
    err_console.print(f"[red]{error.message}[/red]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出 INFO/DEBUG 日志"),
    no_project: bool = typer.Option(False, "--no-project", help="只加载内置技能"),
    skills_dir: list[Path] | None = typer.Option(
        None, "--skills-dir", "-d", help="额外的技能目录 (可重复)"
    ),
):
    """配置日志和技能来源"""
    global _loader
    setup_logging(
        log_dir=settings.log_dir_path,
        log_level=settings.log_level if verbose else "WARNING",
        log_format=settings.log_format,
        log_file_prefix=settings.log_file_prefix,
        log_max_size_mb=settings.log_max_size_mb,
        log_backup_count=settings.log_backup_count,
        log_to_console=settings.log_to_console,
        log_to_file=settings.log_to_file,
    )
    _loader = None
    _options["include_project"] = settings.include_project_skills and not no_project
    _options["extra_dirs"] = [*settings.extra_skill_dirs, *(skills_dir or [])]


@app.command(name="list")
def list_skills():
    """列出所有技能"""
    registry = get_loader().registry

    table = Table(title=f"Skills ({registry.count})")
    table.add_column("名称", style="cyan", no_wrap=True)
    table.add_column("版本", style="magenta", no_wrap=True)
    table.add_column("触发词", style="yellow")
    table.add_column("描述", style="green")

    for skill in registry:
        table.add_row(
            skill.name,
            skill.version or "-",
            ", ".join(sorted(skill.triggers)),
            skill.description,
        )

    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(..., help="技能名称"),
    reference: str | None = typer.Option(None, "--reference", "-r", help="参考文档文件名"),
):
    """原样输出技能正文 (或参考文档)"""
    loader = get_loader()
    try:
        if reference:
            typer.echo(loader.get_reference(name, reference))
        else:
            typer.echo(loader.registry.get_body(name))
    except SkillError as e:
        _fail(e)


@app.command()
def match(
    task: str = typer.Argument(..., help="任务描述"),
    as_json: bool = typer.Option(False, "--json", help="以 JSON 输出"),
    show_all: bool = typer.Option(False, "--all", "-a", help="显示所有得分技能的排名"),
):
    """根据任务描述选出技能并输出其正文"""
    registry = get_loader().registry

    if show_all and not as_json:
        ranking = registry.rank(task)
        table = Table(title="Ranking")
        table.add_column("#", style="dim")
        table.add_column("名称", style="cyan", no_wrap=True)
        table.add_column("得分", style="magenta")
        table.add_column("命中", style="yellow")
        for i, m in enumerate(ranking, 1):
            table.add_row(str(i), m.name, str(m.score), ", ".join(m.hits))
        console.print(table)

    try:
        result = registry.require_match(task)
    except NoMatchError:
        if as_json:
            # 键与命中时相同
            payload = {"matched": False, "name": None, "score": 0, "hits": [], "body": None}
            if show_all:
                payload["ranking"] = []
            typer.echo(json.dumps(payload, ensure_ascii=False))
            raise typer.Exit(code=1)
        err_console.print("[yellow]No skill matched[/yellow]")
        raise typer.Exit(code=1)

    if as_json:
        payload = {
            "matched": True,
            "name": result.name,
            "score": result.score,
            "hits": list(result.hits),
            "body": result.body,
        }
        if show_all:
            payload["ranking"] = [
                {"name": m.name, "score": m.score, "hits": list(m.hits)}
                for m in registry.rank(task)
            ]
        typer.echo(json.dumps(payload, ensure_ascii=False))
        return

    if show_all:
        console.print(f"[green]✓[/green] {result.name}\n")
    typer.echo(result.body)


@app.command()
def catalog(
    compact: bool = typer.Option(False, "--compact", help="仅输出名称列表"),
):
    """输出技能清单 (用于系统提示)"""
    skill_catalog = SkillCatalog(get_loader().registry)
    typer.echo(skill_catalog.get_compact_catalog() if compact else skill_catalog.get_catalog())


@app.command()
def validate(
    directory: Path | None = typer.Argument(None, help="技能目录（默认内置技能）"),
):
    """校验目录下的所有 SKILL.md"""
    directory = directory or settings.builtin_skills_path
    if not directory.is_dir():
        err_console.print(f"[red]Not a directory: {directory}[/red]")
        raise typer.Exit(code=1)

    parser = SkillParser()
    table = Table(title=f"Validate {directory}")
    table.add_column("技能", style="cyan", no_wrap=True)
    table.add_column("状态")
    table.add_column("说明")

    failed = 0
    seen: set[str] = set()
    for item in sorted(directory.iterdir()):
        if not (item / "SKILL.md").is_file():
            continue
        try:
            skill = parser.parse_directory(item)
        except (ValueError, OSError) as e:
            failed += 1
            table.add_row(item.name, "[red]error[/red]", str(e))
            continue

        warnings = parser.validate(skill)
        if skill.metadata.name in seen:
            failed += 1
            table.add_row(item.name, "[red]error[/red]", f"duplicate name '{skill.metadata.name}'")
            continue
        seen.add(skill.metadata.name)

        if warnings:
            table.add_row(item.name, "[yellow]warning[/yellow]", "\n".join(warnings))
        else:
            table.add_row(item.name, "[green]ok[/green]", "")

    console.print(table)
    if failed:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="监听地址"),
    port: int | None = typer.Option(None, "--port", help="端口"),
):
    """启动 HTTP API 服务"""
    import uvicorn

    from .api import create_app

    loader = get_loader()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(
        f"[green]✓[/green] Serving {loader.registry.count} skills on http://{host}:{port}"
    )
    uvicorn.run(create_app(loader), host=host, port=port, log_level="warning")


if __name__ == "__main__":
    app()
