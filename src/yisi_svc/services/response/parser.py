"""响应解析模块。

将提取后的文本解码为 JSON，并按统一的键顺序取出结果文本。
所有模式共用同一个候选键顺序。
"""

import re
from typing import Any, Optional

import orjson

from ...exceptions import MalformedResponseError
from ...logger import get_logger, json_str
from ...models import ParsedResult

logger = get_logger(__name__)

RESULT_KEYS = (
    "translation_result",
    "result",
    "answer",
    "content",
    "output",
    "text",
)

PRIORITY_NESTED_KEYS = ("author", "title", "name", "answer")

# JSON 解码失败时用于宽松提取的键
LENIENT_KEYS = ("translation_result", "result", "answer")

_VALUE_END_PATTERN = re.compile(r'"\s*\}')

_ESCAPES = (
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
    ('\\"', '"'),
    ("\\\\", "\\"),
)


def parse_result(text: str) -> ParsedResult:
    """解析结果文本。

    :param text: :func:`~yisi_svc.services.response.extractor.extract_json` 的输出
    :return: 解析结果
    :raises MalformedResponseError: JSON 有效但没有可用的结果键，或文本无法解析

    **处理顺序:**

    1. 解码成功：按 :data:`RESULT_KEYS` 顺序查找第一个非空字符串；
       值为对象时展开为 ``key: value`` 行
    2. 解码失败且形如 ``{...}``：尝试宽松的正则提取（处理未转义的内部引号）
    3. 解码失败且不以 ``{`` 开头：视为供应商忽略了 JSON 指令，原样返回
    """
    try:
        decoded = orjson.loads(text)
    except orjson.JSONDecodeError:
        decoded = None
    else:
        if isinstance(decoded, dict):
            return _resolve_keys(decoded)

    trimmed = text.strip()

    if trimmed.startswith("{"):
        extracted = extract_value_leniently(trimmed)
        if extracted is not None:
            logger.debug("Used lenient extraction for malformed JSON result")
            return ParsedResult(text=extracted)
    elif trimmed:
        if isinstance(decoded, str) and decoded:
            return ParsedResult(text=decoded)
        return ParsedResult(text=trimmed)

    raise MalformedResponseError(f"Invalid JSON format: {trimmed[:100]}")


def _resolve_keys(obj: dict[str, Any]) -> ParsedResult:
    detected_type = obj.get("detected_type") if isinstance(obj.get("detected_type"), str) else None
    reasoning = obj.get("thinking_process") if isinstance(obj.get("thinking_process"), str) else None

    for key in RESULT_KEYS:
        value = obj.get(key)
        if isinstance(value, str) and value:
            return ParsedResult(text=value, detected_type=detected_type, reasoning_trace=reasoning)
        if isinstance(value, dict) and value:
            return ParsedResult(
                text=format_nested_result(value),
                detected_type=detected_type,
                reasoning_trace=reasoning,
            )

    available = list(obj.keys())
    logger.warning("No valid result key found: available_keys={}", json_str(available))
    raise MalformedResponseError(
        f"No valid result key found. Available keys: {', '.join(available)}",
        available,
    )


def format_nested_result(obj: dict[str, Any]) -> str:
    """将嵌套对象展开为可读文本。

    优先输出 ``author``/``title``/``name``/``answer``，其余键按字母顺序。

    .. code-block:: python

       format_nested_result({"title": "T", "note": "N"})
       # 'title: T\\nnote: N'
    """
    lines = [f"{key}: {_format_value(obj[key])}" for key in PRIORITY_NESTED_KEYS if key in obj]
    lines.extend(
        f"{key}: {_format_value(obj[key])}"
        for key in sorted(obj)
        if key not in PRIORITY_NESTED_KEYS
    )
    return "\n".join(lines)


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return orjson.dumps(value).decode("utf-8")


def extract_value_leniently(text: str) -> Optional[str]:
    """从形似 JSON 的文本中直接截取结果键的值。

    当结果值中包含未转义的引号（例如值里嵌了 markdown 代码块）时，
    标准解码会失败；这里找到 ``"key": "`` 之后，截取到 ``"}`` 结束模式为止。
    """
    for key in LENIENT_KEYS:
        match = re.search(rf'"{key}"\s*:\s*"', text)
        if match is None:
            continue

        remainder = text[match.end():]
        end = _VALUE_END_PATTERN.search(remainder)
        if end is not None:
            value = remainder[:end.start()]
        else:
            value = remainder.rstrip('}]\n"')
        if not value:
            continue
        for escaped, plain in _ESCAPES:
            value = value.replace(escaped, plain)
        return value
    return None
