"""DIAL chat/completions 客户端。

本模块负责：

1. 解析接口路径中的 {deployment_name}（构造参数优先，其次 payload 中的
   deployment_name / deployment）。
2. 注入 Content-Type 与 api-key 请求头，但从不覆盖调用方已提供的同名头。
3. 选择同步、异步或流式模式发起请求。
4. 把流式响应组合为三种视图：原始 chunk、文本增量、聚合后的完整消息。

客户端本身除了不可变配置之外没有任何状态，可在多个独立调用之间复用。
"""

from typing import Any, Awaitable, Dict, List, Mapping, MutableMapping, Optional, Tuple
from urllib.parse import quote

from dial_client.domain.exceptions import CapabilityError, ConfigurationError, ProtocolError
from dial_client.domain.json_value import decode_json, get_path, get_str
from dial_client.domain.models import Message, Role
from dial_client.infrastructure.logging.logger import logger
from dial_client.streaming.streams import ChunkStream, TextStream
from dial_client.transport.base import AsyncHttpTransport, HttpTransport

DEFAULT_ENDPOINT = "/openai/deployments/{deployment_name}/chat/completions"
DEPLOYMENT_PLACEHOLDER = "{deployment_name}"
# payload 中可携带 deployment 的键，按优先级排列
DEPLOYMENT_KEYS = ("deployment_name", "deployment")


class DialChatCompletions:
    """chat/completions 资源。

    - create: 非流式调用，返回 assistant Message。
    - create_async: 异步非流式调用，需要传输层支持异步。
    - stream / stream_chunks / stream_text: 流式调用的三种视图。
    """

    method = "POST"

    def __init__(
        self,
        transport: HttpTransport,
        deployment_name: Optional[str] = None,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        self._transport = transport
        self._deployment_name = deployment_name or None
        self._api_key = api_key or None
        self._endpoint = endpoint or DEFAULT_ENDPOINT
        self._supports_async = isinstance(transport, AsyncHttpTransport)

    @property
    def supports_async(self) -> bool:
        return self._supports_async

    # ---- 非流式 ----

    def create(self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> Message:
        """发送同步请求，返回 choices[0].message.content 组成的 assistant 消息。"""

        endpoint, request_options = self._prepare(payload, options)
        logger.info("chat_completions.request", extra={"extra": {"endpoint": endpoint, "stream": False}})
        response = self._transport.request(self.method, endpoint, **request_options)

        if response.status_code == 200:
            data = decode_json(response.content)
            choices = get_path(data, "choices")
            if isinstance(choices, list) and choices:
                return Message(Role.ASSISTANT, get_str(choices, 0, "message", "content", default=""))
            raise ProtocolError(
                code="NO_CHOICES",
                message="Response contains no choices",
                http_status=response.status_code,
                endpoint=endpoint,
            )

        logger.warning(
            "chat_completions.unexpected_status",
            extra={"extra": {"endpoint": endpoint, "status": response.status_code}},
        )
        raise ProtocolError(
            code="UNEXPECTED_STATUS",
            message=f"Unexpected HTTP status code: {response.status_code}",
            http_status=response.status_code,
            endpoint=endpoint,
        )

    def create_async(
        self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> Awaitable[Dict[str, Any]]:
        """返回一个解析为响应 JSON 的 awaitable。

        传输层不支持异步时立即抛出 CapabilityError，不会发起任何请求。
        """

        if not self._supports_async:
            raise CapabilityError(
                code="ASYNC_NOT_SUPPORTED",
                message=f"Async requests require a transport implementing {AsyncHttpTransport.__name__}",
            )
        endpoint, request_options = self._prepare(payload, options)
        logger.info("chat_completions.request", extra={"extra": {"endpoint": endpoint, "async": True}})
        return self._transport.request_json_async(self.method, endpoint, **request_options)

    # ---- 流式 ----

    def stream(self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> Message:
        """消费整个流式响应并返回拼接后的 assistant 消息。

        需要增量输出时请直接迭代 stream_text()（或 stream_chunks()）。
        """

        with self.stream_text(payload, options) as deltas:
            content = "".join(deltas)
        return Message(Role.ASSISTANT, content)

    def stream_chunks(self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> ChunkStream:
        """迭代解码后的 SSE JSON chunk。

        很多服务会先发送一个 finish_reason 非空的 chunk，再单独发送 `data: [DONE]`；
        这里会产出前者，并在收到 [DONE] 时结束。
        请求构造（包括 deployment 解析）在调用时完成，连接在第一次迭代时打开。
        """

        endpoint, request_options = self._prepare(payload, options, stream=True)
        logger.info("chat_completions.request", extra={"extra": {"endpoint": endpoint, "stream": True}})

        def opener():
            return self._transport.request_stream(self.method, endpoint, **request_options)

        return ChunkStream(opener, endpoint=endpoint)

    def stream_text(self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> TextStream:
        """只迭代文本增量 choices[0].delta.content。"""

        return TextStream(self.stream_chunks(payload, options))

    # ---- 请求构造 ----

    def _prepare(
        self, payload: Mapping[str, Any], options: Optional[Mapping[str, Any]], stream: bool = False
    ) -> Tuple[str, Dict[str, Any]]:
        body = dict(payload)
        endpoint = self._resolve_endpoint(body)
        if stream:
            # None 视同未设置
            if body.get("stream") is None:
                body["stream"] = True
            elif not body["stream"]:
                raise ConfigurationError(
                    code="INVALID_STREAM_FLAG",
                    message="Streaming requests cannot be sent with stream=false; use create() instead",
                )
        if "messages" in body:
            body["messages"] = self._serialize_messages(body["messages"])

        request_options = dict(options or {})
        headers = dict(request_options.get("headers") or {})
        self._with_header(headers, "Content-Type", "application/json")
        if self._api_key:
            self._with_header(headers, "api-key", self._api_key)
        request_options["headers"] = headers
        request_options["json"] = body
        return endpoint, request_options

    def _resolve_endpoint(self, body: MutableMapping[str, Any]) -> str:
        if DEPLOYMENT_PLACEHOLDER not in self._endpoint:
            return self._endpoint

        deployment = self._deployment_name
        if deployment is None:
            for key in DEPLOYMENT_KEYS:
                value = body.get(key)
                if isinstance(value, str) and value:
                    deployment = body.pop(key)
                    break

        if deployment is None:
            raise ConfigurationError(
                code="MISSING_DEPLOYMENT",
                message="Missing deployment name. Provide it via constructor (deployment_name) "
                "or payload key deployment_name/deployment.",
            )
        return self._endpoint.replace(DEPLOYMENT_PLACEHOLDER, quote(deployment, safe=""))

    @staticmethod
    def _with_header(headers: Dict[str, Any], name: str, value: str) -> None:
        """调用方已提供同名头（不区分大小写）时保持原样。"""

        lower = {str(k).lower() for k in headers}
        if name.lower() not in lower:
            headers[name] = value

    @staticmethod
    def _serialize_messages(messages: Any) -> Any:
        if not isinstance(messages, (list, tuple)):
            return messages
        items: List[Any] = []
        for m in messages:
            items.append(m.to_payload() if isinstance(m, Message) else m)
        return items
