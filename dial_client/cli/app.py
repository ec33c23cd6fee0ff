"""交互式聊天应用。

从配置（环境变量 / .env / config.yaml）构造传输层与 DialChatCompletions，
然后在终端里循环读取问题并输出回答。输入 exit 退出。
"""

import argparse
import sys
from typing import List, Optional, TextIO

from dial_client.cli.question import Question
from dial_client.config.settings import DialSettings, load_settings
from dial_client.domain.conversation import Conversation
from dial_client.domain.exceptions import DialClientError, TransportError
from dial_client.domain.models import Message, Role
from dial_client.infrastructure.logging.logger import logger, setup_logger
from dial_client.providers.chat_completions import DialChatCompletions
from dial_client.transport.httpx_client import HttpxTransport


class Application:
    def __init__(
        self,
        chat: DialChatCompletions,
        system_prompt: str,
        question: Optional[Question] = None,
        out: TextIO = sys.stdout,
    ):
        self._chat = chat
        self._question = question or Question()
        self._out = out
        self.conversation = Conversation(messages=[Message(Role.SYSTEM, system_prompt)])

    @classmethod
    def from_settings(
        cls,
        cfg: DialSettings,
        system_prompt: Optional[str] = None,
        question: Optional[Question] = None,
        out: TextIO = sys.stdout,
    ) -> "Application":
        """校验配置并构造应用；未提供系统提示词时在终端询问。"""

        cfg.require_connection()
        question = question or Question()
        prompt = (system_prompt or "").strip()
        if not prompt:
            prompt = question.ask("System prompt", cfg.system_prompt)
        chat = DialChatCompletions(
            transport=HttpxTransport.from_settings(cfg),
            deployment_name=cfg.deployment,
            api_key=cfg.api_key,
        )
        return cls(chat, prompt, question=question, out=out)

    def run(self, stream: bool = False) -> int:
        self._out.write("Type your question and press Enter. Type 'exit' to quit.\n\n")
        try:
            while True:
                user_question = self._question.ask("You")
                if user_question == "":
                    continue
                if user_question.lower() == "exit":
                    break
                self.conversation.add_message(Message(Role.USER, user_question))
                payload = {"messages": self.conversation.to_payload()}
                if stream:
                    reply = self._stream_reply(payload)
                else:
                    reply = self._chat.create(payload)
                    self._out.write(f"Assistant: {reply.content}\n\n")
                self.conversation.add_message(reply)
        except TransportError as e:
            logger.error("cli.request_failed", extra={"extra": {"code": e.code}})
            self._out.write(f"HTTP request failed: {e.message}\n")
            return 1
        return 0

    def _stream_reply(self, payload) -> Message:
        self._out.write("Assistant: ")
        parts: List[str] = []
        with self._chat.stream_text(payload) as deltas:
            for delta in deltas:
                parts.append(delta)
                self._out.write(delta)
                self._out.flush()
        self._out.write("\n\n")
        return Message(Role.ASSISTANT, "".join(parts))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dial-chat",
        description="Chat with a DIAL deployment. If system_prompt is omitted, "
        "you'll be prompted to enter it (or press Enter to use the default).",
    )
    parser.add_argument("system_prompt", nargs="?", default=None, help="system prompt for the session")
    parser.add_argument("--stream", action="store_true", help="print the answer incrementally")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_settings()
        setup_logger(cfg.log_dir, cfg.log_redact_content)
        app = Application.from_settings(cfg, system_prompt=args.system_prompt)
        return app.run(stream=args.stream)
    except DialClientError as e:
        sys.stderr.write(f"{e.message}\n")
        return 2
