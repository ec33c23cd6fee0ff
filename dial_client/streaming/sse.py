"""SSE 事件帧读取器。

把可增量读取的字节流切分为一个个 SSE 事件，每个事件产出一段文本：
该事件内所有 `data:` 行的内容用单个换行拼接而成。

传输层每次读到多少字节对结果没有影响：事件可能跨越任意多次读取，
UTF-8 多字节字符也可能被截断在两次读取之间。
"""

import codecs
from collections import deque
from typing import Deque, Iterable, Iterator, List, Union

from dial_client.domain.exceptions import DecodingError

EVENT_SEPARATOR = "\n\n"


def extract_data_lines(raw_event: str) -> List[str]:
    """从单个原始事件中提取所有 `data:` 行的内容。

    空行与 `:` 开头的注释行被忽略；`data:` 之后最多去掉一个前导空格。
    """

    data_lines: List[str] = []
    for line in raw_event.split("\n"):
        line = line.strip()
        if not line or line.startswith(":"):
            continue
        if line.startswith("data:"):
            value = line[5:]
            if value.startswith(" "):
                value = value[1:]
            data_lines.append(value)
    return data_lines


class SseEventReader(Iterator[str]):
    """按需拉取的 SSE 事件迭代器。

    只有当消费方请求下一个事件、且缓冲区里没有完整事件时才会读取下一块数据；
    读到空块不会结束迭代，只有底层流真正结束才会。
    每个实例持有自己的缓冲区，不跨调用共享状态。
    """

    def __init__(self, blocks: Iterable[Union[bytes, str]], encoding: str = "utf-8"):
        self._blocks = iter(blocks)
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self._buffer = ""
        self._events: Deque[str] = deque()
        self._exhausted = False

    def __iter__(self) -> "SseEventReader":
        return self

    def __next__(self) -> str:
        while not self._events:
            if self._exhausted:
                raise StopIteration
            self._read_block()
        return self._events.popleft()

    def _read_block(self) -> None:
        try:
            block = next(self._blocks)
        except StopIteration:
            self._exhausted = True
            self._buffer += self._decode(b"", final=True)
            self._flush_tail()
            return

        if not block:
            return

        self._buffer += block if isinstance(block, str) else self._decode(block)
        if "\r\n" in self._buffer:
            self._buffer = self._buffer.replace("\r\n", "\n")
        self._split_events()

    def _decode(self, block: bytes, final: bool = False) -> str:
        try:
            return self._decoder.decode(block, final)
        except UnicodeDecodeError as e:
            raise DecodingError(code="SSE_DECODE_ERROR", message=f"Invalid bytes in event stream: {e}")

    def _split_events(self) -> None:
        while True:
            pos = self._buffer.find(EVENT_SEPARATOR)
            if pos == -1:
                break
            raw_event = self._buffer[:pos].strip()
            self._buffer = self._buffer[pos + len(EVENT_SEPARATOR):]
            if raw_event:
                self._emit(raw_event)

    def _flush_tail(self) -> None:
        # 流结束时最后一个事件可能没有结尾的空行
        tail = self._buffer.replace("\r\n", "\n").strip()
        self._buffer = ""
        if tail:
            self._emit(tail)

    def _emit(self, raw_event: str) -> None:
        data_lines = extract_data_lines(raw_event)
        if data_lines:
            self._events.append("\n".join(data_lines))
