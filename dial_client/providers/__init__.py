"""chat/completions 资源层。"""

from dial_client.providers.chat_completions import DEFAULT_ENDPOINT, DialChatCompletions

__all__ = ["DEFAULT_ENDPOINT", "DialChatCompletions"]
