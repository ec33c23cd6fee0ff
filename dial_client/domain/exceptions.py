"""统一异常模型。

客户端对外抛出的所有错误都继承自 DialClientError，
调用方可以在 CLI 或上层应用中统一捕获与提示。
所有错误对当前请求都是致命的，本层不做任何重试。
"""

from typing import Optional


class DialClientError(Exception):
    """客户端异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_DEPLOYMENT"）。
        message: 用户可读错误信息。
        http_status: 相关的 HTTP 状态码（若有）。
        extra: 其他补充字段（例如 endpoint、deployment 等）。
    """

    def __init__(self, code: str, message: str, http_status: Optional[int] = None, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigurationError(DialClientError):
    """配置缺失或非法，例如客户端与 payload 都没有提供 deployment 名称。"""


class ProtocolError(DialClientError):
    """服务端返回非 200 状态码，或响应体中没有可用的 choices。"""

    @property
    def status_code(self) -> Optional[int]:
        return self.http_status


class DecodingError(DialClientError):
    """期望 JSON（或 UTF-8 文本）却无法解码时抛出。"""


class CapabilityError(DialClientError):
    """传输层不支持所请求的能力（例如异步请求）。"""


class TransportError(DialClientError):
    """网络层错误，例如连接失败、超时等；由传输层抛出，上层原样透传。"""


class ConsoleInputError(DialClientError):
    """交互式命令行读取输入失败（STDIN 已关闭）。"""
