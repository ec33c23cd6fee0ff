from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from .models import Message


class Conversation:
    """一次聊天会话的有序消息记录。

    - id: 构造时生成一次（128 位随机数的十六进制），之后不再变化。
    - messages: 按对话轮次排列，只能追加。

    会话归驱动聊天的调用方所有，DialChatCompletions 不会修改它。
    """

    def __init__(self, id: Optional[str] = None, messages: Iterable[Message] = ()):
        self._id = id or uuid4().hex
        items = list(messages)
        for message in items:
            if not isinstance(message, Message):
                raise TypeError(f"All messages must be instances of Message, got {type(message).__name__}")
        self._messages: List[Message] = items

    @property
    def id(self) -> str:
        return self._id

    def add_message(self, message: Message) -> None:
        self._messages.append(message)

    def get_messages(self) -> Tuple[Message, ...]:
        """返回当前消息的只读快照。"""

        return tuple(self._messages)

    def to_payload(self) -> List[Dict[str, Any]]:
        """渲染为请求体的 messages 字段。"""

        return [m.to_payload() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)
