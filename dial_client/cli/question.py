from typing import Callable, Optional

from dial_client.domain.exceptions import ConsoleInputError


class Question:
    """在终端提问并返回用户输入。

    - 输入为空且提供了 default 时返回 default。
    - STDIN 已关闭时：有 default 则返回 default，否则抛出 ConsoleInputError。
    """

    def __init__(self, reader: Callable[[str], str] = input):
        self._reader = reader

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        full_prompt = prompt
        if default:
            full_prompt += " (Enter for default)"
        full_prompt += ": "

        try:
            line = self._reader(full_prompt)
        except EOFError:
            if default is not None:
                return default
            raise ConsoleInputError(code="STDIN_CLOSED", message="No input received (STDIN closed).")

        value = line.strip()
        if value == "" and default is not None:
            return default
        return value
