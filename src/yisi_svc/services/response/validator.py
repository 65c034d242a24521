"""响应校验模块。

拒绝语法有效但语义上不可接受的结果。
"""

from typing import Optional

from ...exceptions import ValidationFailedError

SCHEMA_MARKER = "detected_type"

MAX_LENGTH_RATIO = 10


def validate_result(text: str, original_text: Optional[str] = None) -> None:
    """校验解析后的结果文本。

    :param text: 解析得到的结果
    :param original_text: 原始输入文本；图片识别没有原文，传 None 时跳过长度检查
    :raises ValidationFailedError: 结果为空、复述了 JSON 骨架，或长度超过原文 10 倍
    """
    trimmed = text.strip()
    if not trimmed:
        raise ValidationFailedError("Empty translation result")

    # 模型把提示词里的 JSON 骨架原样吐回
    if trimmed.startswith("{") and trimmed.endswith("}") and SCHEMA_MARKER in trimmed:
        raise ValidationFailedError("Invalid translation: AI returned schema instead of text")

    if original_text is not None and len(text) > len(original_text) * MAX_LENGTH_RATIO:
        raise ValidationFailedError(
            f"Translation abnormally long: {len(text)} chars for {len(original_text)} chars of input"
        )
