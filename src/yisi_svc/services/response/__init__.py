"""响应处理：提取 → 解析 → 校验。"""

from .extractor import extract_json, strip_special_tokens
from .parser import RESULT_KEYS, format_nested_result, parse_result
from .validator import validate_result

__all__ = [
    "RESULT_KEYS",
    "extract_json",
    "format_nested_result",
    "parse_result",
    "strip_special_tokens",
    "validate_result",
]
