"""响应提取模块。

负责从供应商的原始回复中分离出 JSON 对象。回复可能是：

- 干净的 JSON
- 包裹在代码块中的 JSON（带或不带语言标签）
- 前面带有自然语言开场白的 JSON（如 ``Here is the translation:``）
- 纯文本（后续按非 JSON 处理）
"""

import re

PREAMBLES = (
    "Here is the translation:",
    "Here is the result:",
    "Translation:",
    "Result:",
    "Output:",
    "Response:",
)

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)

SPECIAL_TOKENS = (
    "<|begin_of_box|>",
    "<|end_of_box|>",
    "<|im_start|>",
    "<|im_end|>",
    "<|endoftext|>",
)


def extract_json(text: str) -> str:
    """从原始回复中分离 JSON 对象文本。

    1. 去除首尾空白
    2. 如以固定开场白开头，去掉开场白
    3. 去掉任意位置的代码块标记（```json 与 ```），再次去空白
    4. 已经以 ``{`` 开头、``}`` 结尾则原样返回
    5. 否则截取第一个 ``{`` 到最后一个 ``}``（含）
    6. 都没有时返回去空白后的文本

    对自身输出再次调用是无操作。

    .. code-block:: python

       extract_json('```json\\n{"translation_result":"X"}\\n```')
       # '{"translation_result":"X"}'
    """
    cleaned = _strip_preambles(text.strip())
    cleaned = _strip_preambles(_FENCE_PATTERN.sub("", cleaned).strip())

    if cleaned.startswith("{") and cleaned.endswith("}"):
        return cleaned

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        return cleaned[start:end + 1]

    return cleaned


def _strip_preambles(text: str) -> str:
    stripped = True
    while stripped:
        stripped = False
        for preamble in PREAMBLES:
            if text.startswith(preamble):
                text = text[len(preamble):].strip()
                stripped = True
    return text


def strip_special_tokens(text: str) -> str:
    """清理视觉模型输出中的特殊 token（如 ``<|begin_of_box|>``）。"""
    for token in SPECIAL_TOKENS:
        text = text.replace(token, "")
    return text.strip()
