"""输入启发式单元测试。"""

import pytest

from yisi_svc.services.text_heuristics import max_tokens_for, preprocess_input, temperature_for


@pytest.mark.unit
class TestPreprocessInput:
    """preprocess_input 函数测试。"""

    def test_lowercase_continuation_merged(self):
        """下一行小写开头时合并为一句。"""
        assert preprocess_input("The quick brown fox\njumps over the dog.") == "The quick brown fox jumps over the dog."

    def test_terminated_line_keeps_newline(self):
        assert preprocess_input("First sentence.\nSecond sentence.") == "First sentence.\nSecond sentence."

    def test_short_lines_preserved(self):
        """短行（诗歌/列表）保留换行。"""
        assert preprocess_input("床前明月光\n疑是地上霜") == "床前明月光\n疑是地上霜"

    def test_long_unterminated_line_merged(self):
        """长行且不以标点结尾时视为散文断行。"""
        line = "A" * 60
        assert preprocess_input(f"{line}\nBravo") == f"{line} Bravo"

    def test_blank_lines_collapse_to_single_newline(self):
        assert preprocess_input("Para one\n\n\nPara two") == "Para one\nPara two"

    def test_whitespace_trimmed(self):
        assert preprocess_input("   hello   \n") == "hello"


@pytest.mark.unit
class TestTemperatureFor:
    """temperature_for 函数测试。"""

    def test_short_text(self):
        assert temperature_for("Hello") == 0.1

    def test_markdown(self):
        assert temperature_for("Use `display: flex` in the container element to lay out the children.") == 0.1

    def test_legal_text(self):
        text = "In the event of Force Majeure, neither party shall be liable for delay in performance."
        assert temperature_for(text) == 0.0

    def test_literary_long_text(self):
        text = "The evening light fell slowly across the hills. " * 5
        assert temperature_for(text) == 0.7

    def test_default(self):
        assert temperature_for("a plain sentence without any terminal punctuation at all here") == 0.3


@pytest.mark.unit
class TestMaxTokensFor:
    """max_tokens_for 函数测试。"""

    def test_minimum(self):
        assert max_tokens_for("hi") == 1024

    def test_scales_with_length(self):
        assert max_tokens_for("x" * 1000) == 3500
