"""
stably-skills 包入口点 - 支持 `python -m stably_skills` 调用
"""

from stably_skills.main import app

if __name__ == "__main__":
    app()
