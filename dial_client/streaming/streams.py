"""流式结果的三种迭代视图中的两种：原始 chunk 与文本增量。

ChunkStream / TextStream 是显式的迭代器类型：
- next() 尝试前进一步，返回下一个值或以 StopIteration 结束；
- close() 或退出 with 块即可随时放弃迭代，底层响应会被释放；
- 迭代过程中出现异常时同样释放响应，流进入 FAILED 状态，之后不再产出任何值。

连接在第一次 next() 时才真正打开，生产方不会超前于消费方读取数据。
"""

from contextlib import ExitStack
from enum import Enum
from typing import Callable, ContextManager, Iterator, Optional

from dial_client.domain.exceptions import ProtocolError
from dial_client.domain.json_value import JsonObject, get_path
from dial_client.infrastructure.logging.logger import logger
from dial_client.streaming.decoder import ChunkDecoder, EventKind
from dial_client.streaming.sse import SseEventReader
from dial_client.transport.base import StreamResponse


class StreamState(str, Enum):
    OPENING = "opening"
    STREAMING = "streaming"
    TERMINATED = "terminated"
    FAILED = "failed"


StreamOpener = Callable[[], ContextManager[StreamResponse]]


class ChunkStream(Iterator[JsonObject]):
    """逐个产出解码后的 chunk，遇到 `[DONE]` 或流结束时终止。"""

    def __init__(self, opener: StreamOpener, endpoint: str = "", decoder: Optional[ChunkDecoder] = None):
        self._opener = opener
        self._endpoint = endpoint
        self._decoder = decoder or ChunkDecoder()
        self._stack = ExitStack()
        self._events: Optional[SseEventReader] = None
        self._state = StreamState.OPENING
        self._count = 0

    @property
    def state(self) -> StreamState:
        return self._state

    def __iter__(self) -> "ChunkStream":
        return self

    def __next__(self) -> JsonObject:
        if self._state in (StreamState.TERMINATED, StreamState.FAILED):
            raise StopIteration
        try:
            chunk = self._advance()
        except BaseException as e:
            self._finish(StreamState.FAILED)
            logger.warning(
                "chat_completions.stream.failed",
                extra={"extra": {"endpoint": self._endpoint, "error": type(e).__name__}},
            )
            raise
        if chunk is None:
            self._finish(StreamState.TERMINATED)
            logger.info(
                "chat_completions.stream.done",
                extra={"extra": {"endpoint": self._endpoint, "chunks": self._count}},
            )
            raise StopIteration
        self._count += 1
        return chunk

    def close(self) -> None:
        """放弃剩余的流并释放底层响应；可重复调用。"""

        if self._state is not StreamState.FAILED:
            self._finish(StreamState.TERMINATED)

    def __enter__(self) -> "ChunkStream":
        return self

    def __exit__(self, *exc) -> bool:
        self.close()
        return False

    def _advance(self) -> Optional[JsonObject]:
        if self._events is None:
            self._events = self._open()
        for body in self._events:
            event = self._decoder.decode(body)
            if event.kind is EventKind.DONE:
                return None
            if event.kind is EventKind.CHUNK:
                return event.chunk
        return None

    def _open(self) -> SseEventReader:
        response = self._stack.enter_context(self._opener())
        if response.status_code != 200:
            logger.warning(
                "chat_completions.unexpected_status",
                extra={"extra": {"endpoint": self._endpoint, "status": response.status_code}},
            )
            raise ProtocolError(
                code="UNEXPECTED_STATUS",
                message=f"Unexpected HTTP status code: {response.status_code}",
                http_status=response.status_code,
                endpoint=self._endpoint,
            )
        self._state = StreamState.STREAMING
        logger.info("chat_completions.stream.open", extra={"extra": {"endpoint": self._endpoint}})
        return SseEventReader(response.iter_bytes())

    def _finish(self, state: StreamState) -> None:
        self._state = state
        self._events = None
        self._stack.close()


def delta_content(chunk: JsonObject) -> Optional[str]:
    """取出 choices[0].delta.content；缺失、非字符串或为空时返回 None。"""

    content = get_path(chunk, "choices", 0, "delta", "content")
    if isinstance(content, str) and content:
        return content
    return None


class TextStream(Iterator[str]):
    """只产出 choices[0].delta.content 的文本增量，不做任何缓冲或重新分块。"""

    def __init__(self, chunks: ChunkStream):
        self._chunks = chunks

    @property
    def state(self) -> StreamState:
        return self._chunks.state

    def __iter__(self) -> "TextStream":
        return self

    def __next__(self) -> str:
        for chunk in self._chunks:
            content = delta_content(chunk)
            if content is not None:
                return content
        raise StopIteration

    def close(self) -> None:
        self._chunks.close()

    def __enter__(self) -> "TextStream":
        return self

    def __exit__(self, *exc) -> bool:
        self.close()
        return False
