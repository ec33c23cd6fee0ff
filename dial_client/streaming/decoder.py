"""流式 chunk 解码。

把一个 SSE 事件的文本解释为三种结果之一：
结束标记 `[DONE]`、可跳过的空事件、或一个 JSON 对象。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dial_client.domain.json_value import JsonObject, decode_json_object

DONE_SENTINEL = "[DONE]"


class EventKind(str, Enum):
    CHUNK = "chunk"
    SKIP = "skip"
    DONE = "done"


@dataclass(frozen=True)
class DecodedEvent:
    kind: EventKind
    chunk: Optional[JsonObject] = None


class ChunkDecoder:
    """无状态解码器，可在多个流之间共享。"""

    def decode(self, body: str) -> DecodedEvent:
        if body == DONE_SENTINEL:
            return DecodedEvent(EventKind.DONE)
        if body == "":
            return DecodedEvent(EventKind.SKIP)
        # 非法 JSON 对当前请求是致命的，不做跳过
        return DecodedEvent(EventKind.CHUNK, decode_json_object(body))
