"""未知结构 JSON 的类型与访问函数。

接口返回的 JSON 结构只是“约定”，并不保证。这里的访问函数在字段缺失
或类型不符时返回 None（或给定默认值），不会抛出异常，
对应“可选字段取默认值/跳过”的处理方式。
"""

import json
from typing import Any, Dict, List, Optional, Union

from .exceptions import DecodingError

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]
JsonObject = Dict[str, JsonValue]


def get_path(value: Any, *keys: Union[str, int]) -> Optional[JsonValue]:
    """按 key（对象）或下标（数组）逐级取值，任一级缺失时返回 None。

    >>> get_path({"choices": [{"delta": {"content": "hi"}}]}, "choices", 0, "delta", "content")
    'hi'
    """

    current = value
    for key in keys:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
    return current


def get_str(value: Any, *keys: Union[str, int], default: Optional[str] = None) -> Optional[str]:
    """与 get_path 相同，但只接受字符串结果。"""

    found = get_path(value, *keys)
    if isinstance(found, str):
        return found
    return default


def decode_json(body: Union[str, bytes]) -> JsonValue:
    """把文本解码为任意 JSON 值。

    空文本视为空对象；只有非法 JSON（或非 UTF-8 字节）才抛出 DecodingError。
    """

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(code="JSON_DECODE_ERROR", message=f"Response body is not UTF-8: {e}")
    if body == "":
        return {}
    try:
        decoded = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodingError(code="JSON_DECODE_ERROR", message=f"Failed to decode JSON: {e}")
    return decoded


def decode_json_object(body: Union[str, bytes]) -> JsonObject:
    """与 decode_json 相同，但顶层不是对象时同样抛出 DecodingError。"""

    decoded = decode_json(body)
    if not isinstance(decoded, dict):
        raise DecodingError(
            code="JSON_DECODE_ERROR",
            message=f"Expected a JSON object, got {type(decoded).__name__}",
        )
    return decoded
