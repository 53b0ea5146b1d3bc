"""HTTP API: 向 Agent 宿主按任务描述下发技能正文。"""

from .server import create_app

__all__ = ["create_app"]
