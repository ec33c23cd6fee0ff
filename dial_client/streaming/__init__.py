"""SSE 流式响应处理：帧读取 (sse)、chunk 解码 (decoder) 与迭代视图 (streams)。"""

from dial_client.streaming.decoder import ChunkDecoder, DecodedEvent, EventKind
from dial_client.streaming.sse import SseEventReader
from dial_client.streaming.streams import ChunkStream, StreamState, TextStream

__all__ = [
    "ChunkDecoder",
    "ChunkStream",
    "DecodedEvent",
    "EventKind",
    "SseEventReader",
    "StreamState",
    "TextStream",
]
