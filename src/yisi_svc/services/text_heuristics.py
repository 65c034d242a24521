"""输入预处理与请求参数启发式。

- :func:`preprocess_input`：合并被 PDF 复制打断的句子，保留诗歌/列表的换行
- :func:`temperature_for`：按文本特征选择采样温度
- :func:`max_tokens_for`：按输入长度估算输出 token 预算
"""

SENTENCE_TERMINATORS = (".", "!", "?", "。", "！", "？")

MARKDOWN_MARKERS = ("`", "**", "#", "[", "]")

LEGAL_MARKERS = ("Force Majeure", "pursuant to", "不可抗力", "根据")

# 超过该长度且不以标点结尾的行视为散文中的断行
PROSE_LINE_LENGTH = 50

MIN_MAX_TOKENS = 1024


def preprocess_input(text: str) -> str:
    """按行合并输入文本。

    对每个非空行，决定与下一行之间的连接方式：

    1. 下一行为空（段落分隔）或当前行以句末标点结尾：换行
    2. 下一行以小写字母开头：空格（句子被打断）
    3. 当前行超过 50 个字符：空格（散文断行）
    4. 否则：换行（短行，视为诗歌或列表）

    .. code-block:: python

       preprocess_input("This is a long sentence that was\\nbroken by a PDF copy.")
       # 'This is a long sentence that was broken by a PDF copy.'
    """
    lines = text.splitlines()
    merged = []

    for i, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            continue

        merged.append(line)
        if i == len(lines) - 1:
            break

        next_line = lines[i + 1].strip()
        if not next_line or line.endswith(SENTENCE_TERMINATORS):
            merged.append("\n")
        elif next_line[0].islower():
            merged.append(" ")
        elif len(line) > PROSE_LINE_LENGTH:
            merged.append(" ")
        else:
            merged.append("\n")

    return "".join(merged).strip()


def contains_markdown(text: str) -> bool:
    return any(marker in text for marker in MARKDOWN_MARKERS)


def temperature_for(text: str) -> float:
    """按文本特征选择采样温度。

    - 含 markdown 或少于 50 个字符（技术/短文本）：0.1
    - 法律文本：0.0
    - 超过 200 个字符且含句号（文学长文本）：0.7
    - 其他：0.3
    """
    if contains_markdown(text) or len(text) < 50:
        return 0.1
    if any(marker in text for marker in LEGAL_MARKERS):
        return 0.0
    if ("。" in text or "." in text) and len(text) > 200:
        return 0.7
    return 0.3


def max_tokens_for(text: str) -> int:
    """输出 token 预算：译文通常为原文的 1.5-3 倍，外加约 500 的 JSON 开销，最低 1024。"""
    return max(MIN_MAX_TOKENS, len(text) * 3 + 500)
