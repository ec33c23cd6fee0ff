"""传输层抽象接口。

DialChatCompletions 不直接依赖具体的 HTTP 库，而是依赖以下协议：

- HttpTransport: 同步请求，返回完整响应；或打开一个可逐块读取的流式响应。
- AsyncHttpTransport: 在 HttpTransport 之上额外支持异步 JSON 请求。

是否支持异步由 isinstance(transport, AsyncHttpTransport) 判断，
在客户端构造时确定一次。连接管理、TLS、超时都是传输层的职责。
"""

from typing import Any, Awaitable, ContextManager, Dict, Iterator, Protocol, runtime_checkable


class HttpResponse(Protocol):
    """完整读取的响应。"""

    status_code: int

    @property
    def content(self) -> bytes:
        ...


class StreamResponse(Protocol):
    """流式响应：iter_bytes() 逐块产出原始字节，迭代结束即流结束。"""

    status_code: int

    def iter_bytes(self) -> Iterator[bytes]:
        ...


@runtime_checkable
class HttpTransport(Protocol):
    def request(self, method: str, url: str, **options: Any) -> HttpResponse:
        ...

    def request_stream(self, method: str, url: str, **options: Any) -> ContextManager[StreamResponse]:
        """打开流式请求；退出上下文时释放连接（包括提前退出与异常路径）。"""

        ...


@runtime_checkable
class AsyncHttpTransport(HttpTransport, Protocol):
    def request_json_async(self, method: str, url: str, **options: Any) -> Awaitable[Dict[str, Any]]:
        ...
