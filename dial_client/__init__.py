"""DIAL chat/completions 客户端顶层包。

提供同步、异步与 SSE 流式三种调用方式，
以及消息/会话模型、httpx 传输层与一个交互式命令行。
"""

from dial_client.domain.conversation import Conversation
from dial_client.domain.exceptions import (
    CapabilityError,
    ConfigurationError,
    DecodingError,
    DialClientError,
    ProtocolError,
    TransportError,
)
from dial_client.domain.models import Message, Role
from dial_client.providers.chat_completions import DialChatCompletions
from dial_client.transport.httpx_client import HttpxTransport

__all__ = [
    "CapabilityError",
    "ConfigurationError",
    "Conversation",
    "DecodingError",
    "DialChatCompletions",
    "DialClientError",
    "HttpxTransport",
    "Message",
    "ProtocolError",
    "Role",
    "TransportError",
]
