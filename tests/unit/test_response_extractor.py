"""响应提取单元测试。"""

import pytest

from yisi_svc.services.response.extractor import extract_json, strip_special_tokens


@pytest.mark.unit
class TestExtractJson:
    """extract_json 函数测试。"""

    def test_clean_json_unchanged(self):
        """干净的 JSON 原样返回。"""
        text = '{"translation_result": "你好"}'
        assert extract_json(text) == text

    def test_fenced_json_with_tag(self):
        """去掉 ```json 代码块。"""
        raw = '```json\n{"translation_result":"X"}\n```'
        assert extract_json(raw) == '{"translation_result":"X"}'

    def test_fenced_json_uppercase_tag(self):
        """语言标签大小写不敏感。"""
        raw = '```JSON\n{"result":"X"}\n```'
        assert extract_json(raw) == '{"result":"X"}'

    def test_fence_without_tag(self):
        """不带语言标签的代码块。"""
        raw = '```\n{"result": "ok"}\n```'
        assert extract_json(raw) == '{"result": "ok"}'

    def test_preamble_removed(self):
        """去掉自然语言开场白。"""
        raw = 'Here is the translation: {"translation_result":"X"}'
        assert extract_json(raw) == '{"translation_result":"X"}'

    def test_preamble_then_fence(self):
        """开场白后跟代码块。"""
        raw = 'Result:\n```json\n{"result": "X"}\n```'
        assert extract_json(raw) == '{"result": "X"}'

    def test_surrounding_prose_sliced(self):
        """截取第一个 { 到最后一个 }。"""
        raw = 'Sure! {"result": {"title": "T"}} Hope this helps.'
        assert extract_json(raw) == '{"result": {"title": "T"}}'

    def test_plain_text_returned_trimmed(self):
        """没有大括号时返回去空白后的文本。"""
        assert extract_json("  Bonjour le monde  \n") == "Bonjour le monde"

    def test_closing_brace_before_opening(self):
        """} 在 { 之前时不截取。"""
        assert extract_json("} and {") == "} and {"

    @pytest.mark.parametrize(
        "raw",
        [
            '```json\n{"translation_result":"X"}\n```',
            'Here is the translation: {"a": 1} trailing',
            "Translation: Translation: plain words",
            "  just text  ",
            'Output: ```json {"result": "x"} ```',
        ],
    )
    def test_idempotent(self, raw):
        """对自身输出再次调用不再改变结果。"""
        once = extract_json(raw)
        assert extract_json(once) == once


@pytest.mark.unit
class TestStripSpecialTokens:
    """strip_special_tokens 函数测试。"""

    def test_box_tokens_removed(self):
        """去掉视觉模型的 box token。"""
        raw = '<|begin_of_box|>{"result": "猫"}<|end_of_box|>'
        assert strip_special_tokens(raw) == '{"result": "猫"}'

    def test_text_without_tokens_unchanged(self):
        assert strip_special_tokens(" plain ") == "plain"
