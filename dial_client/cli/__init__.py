"""交互式聊天命令行。"""

from dial_client.cli.app import Application, main
from dial_client.cli.question import Question

__all__ = ["Application", "Question", "main"]
