"""默认提示词单元测试。"""

import pytest

from yisi_svc.prompts import DefaultPromptBuilder


@pytest.mark.unit
class TestDefaultPromptBuilder:
    """DefaultPromptBuilder 测试。"""

    def test_learned_rules_included(self):
        builder = DefaultPromptBuilder(learned_rules=["Translate 'resizable' as 支持调整大小"])
        assert "1. Translate 'resizable' as 支持调整大小" in builder.translation_prompt()

    def test_learned_rules_capped(self):
        builder = DefaultPromptBuilder(learned_rules=[f"rule {i}" for i in range(15)])
        prompt = builder.translation_prompt()
        assert "10. rule 9" in prompt
        assert "rule 10" not in prompt

    def test_no_rules_section_without_rules(self):
        assert "Personal Learning Rules" not in DefaultPromptBuilder().translation_prompt()

    def test_custom_defaults(self):
        prompt = DefaultPromptBuilder().custom_prompt(None, None)
        assert "Analyze the following text." in prompt
        assert '"result"' in prompt

    def test_user_prompt_with_source(self):
        prompt = DefaultPromptBuilder().user_prompt("Hola", "Español", "English")
        assert prompt == "Translate the following text from Español to English.\n\nInput Text:\nHola"
