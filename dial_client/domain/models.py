"""对话消息模型。

- Role: 消息角色（system/user/assistant），仅作为判别字段使用。
- Message: 一条不可变的对话消息，按值比较相等。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Role(str, Enum):
    """消息角色，取值与 chat/completions 接口的 role 字段一致。"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """一条对话消息，既可用于请求，也可用于响应。"""

    role: Role
    content: str

    def to_payload(self) -> Dict[str, Any]:
        """转换为请求体中 messages 数组的单个元素。"""

        return {"role": self.role.value, "content": self.content}
