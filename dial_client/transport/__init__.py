"""HTTP 传输层。

- base: HttpTransport / AsyncHttpTransport 协议。
- httpx_client: 基于 httpx 的默认实现。
"""

from dial_client.transport.base import AsyncHttpTransport, HttpTransport
from dial_client.transport.httpx_client import HttpxTransport

__all__ = ["AsyncHttpTransport", "HttpTransport", "HttpxTransport"]
