"""基于 httpx 的传输层实现。

本模块负责：

1. 持有 base_uri、默认请求头、TLS（CA bundle）与超时等连接配置。
2. 执行同步请求、流式请求与异步 JSON 请求。
3. 把 httpx 的网络异常统一包装为 TransportError。

请求体、接口路径与业务请求头由 DialChatCompletions 负责，这里不做任何解释。
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import httpx

from dial_client.domain.exceptions import TransportError
from dial_client.domain.json_value import decode_json_object
from dial_client.infrastructure.logging.logger import logger


class _StreamingResponse:
    """httpx.Response 的薄包装，读取过程中的网络错误同样转为 TransportError。"""

    def __init__(self, response: httpx.Response):
        self._response = response
        self.status_code = response.status_code

    def iter_bytes(self) -> Iterator[bytes]:
        try:
            for block in self._response.iter_bytes():
                yield block
        except httpx.RequestError as e:
            raise _network_error(e)


def _network_error(e: httpx.RequestError) -> TransportError:
    logger.error("transport.network_error", extra={"extra": {"error": type(e).__name__}})
    return TransportError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)


class HttpxTransport:
    """同步 + 流式 + 异步的 httpx 传输实现。

    - default_headers 中已有的同名头优先于自动添加的 Accept / Authorization。
    - 单次请求传入的 headers 覆盖默认头。
    - 未注入 async_client 时，每次异步请求使用一个临时的 httpx.AsyncClient。
    """

    def __init__(
        self,
        base_uri: str,
        api_key: Optional[str] = None,
        default_headers: Optional[Mapping[str, str]] = None,
        verify: Union[bool, str] = True,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
    ):
        headers = httpx.Headers(default_headers or {})
        headers.setdefault("Accept", "application/json")
        if api_key:
            headers.setdefault("Authorization", f"Bearer {api_key}")
        self._client_kwargs: Dict[str, Any] = {
            "base_url": base_uri,
            "headers": headers,
            "verify": verify,
            "timeout": timeout,
            "trust_env": False,
        }
        self._client = client or httpx.Client(**self._client_kwargs)
        self._async_client = async_client

    @classmethod
    def from_settings(cls, cfg) -> "HttpxTransport":
        """根据已解析的配置构造传输层；api-key 由 DialChatCompletions 以请求头方式注入。"""

        return cls(
            base_uri=cfg.base_uri,
            verify=cfg.ca_bundle or True,
            timeout=cfg.http_timeout,
        )

    def request(self, method: str, url: str, **options: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **options)
        except httpx.RequestError as e:
            raise _network_error(e)

    @contextmanager
    def request_stream(self, method: str, url: str, **options: Any) -> Iterator[_StreamingResponse]:
        try:
            with self._client.stream(method, url, **options) as response:
                yield _StreamingResponse(response)
        except httpx.RequestError as e:
            raise _network_error(e)

    async def request_json_async(self, method: str, url: str, **options: Any) -> Dict[str, Any]:
        try:
            if self._async_client is not None:
                response = await self._async_client.request(method, url, **options)
            else:
                async with httpx.AsyncClient(**self._client_kwargs) as client:
                    response = await client.request(method, url, **options)
        except httpx.RequestError as e:
            raise _network_error(e)
        return decode_json_object(response.content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc) -> bool:
        self.close()
        return False
