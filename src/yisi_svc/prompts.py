"""提示词构建模块。

编排器通过 :class:`PromptBuilder` 协议获取提示词，不关心提示词的具体内容。
:class:`DefaultPromptBuilder` 是一个精简的默认实现，三条路径的输出格式均为 JSON：

- 默认翻译：``{"detected_type", ["thinking_process"], "translation_result"}``
- 用户预设 / 临时自定义：``{"task_type", "thinking_process", "result"}``
"""

from typing import Optional, Protocol, Sequence

from .models import PromptPreset

AUTO_DETECT = "Auto Detect"

_SEPARATOR = "═" * 59


class PromptBuilder(Protocol):
    """提示词协作方。"""

    def translation_prompt(self, enable_cot: bool = False) -> str: ...

    def preset_prompt(self, preset: PromptPreset) -> str: ...

    def custom_prompt(self, perception: Optional[str], instruction: Optional[str]) -> str: ...

    def user_prompt(self, text: str, source_language: str, target_language: str) -> str: ...


class DefaultPromptBuilder:
    """默认提示词实现。

    :param learned_rules: 用户纠正后沉淀的规则，仅注入默认翻译模式，最多 10 条
    """

    MAX_LEARNED_RULES = 10

    def __init__(self, learned_rules: Sequence[str] = ()):
        self.learned_rules = list(learned_rules)

    def translation_prompt(self, enable_cot: bool = False) -> str:
        """翻译系统提示词。

        :param enable_cot: 是否要求模型在 JSON 中输出 ``thinking_process``
        """
        sections = [
            "[Role: The Language Alchemist]\n"
            "You are a High-Robustness, Multi-Genre Translation Engine.\n"
            "Your goal is to provide translations that are faithful, expressive, and elegant (信达雅).\n\n"
            "You must strictly follow these rules:\n"
            "1. **Analyze the input domain** (Cultural, Legal, Medical, Metaphor, Technical, or General).\n"
            "2. **Adapt your style** based on the domain.\n"
            "3. **Preserve Markdown** formatting and links exactly.\n"
            "4. **Output strictly in JSON format**.\n",
        ]

        rules = self.learned_rules[:self.MAX_LEARNED_RULES]
        if rules:
            lines = ["### Personal Learning Rules (From Your Corrections)\n"]
            lines.extend(f"{i}. {rule}" for i, rule in enumerate(rules, start=1))
            sections.append("\n".join(lines) + "\n")

        keys = ['  "detected_type": "literary | legal | medical | technical | general",']
        if enable_cot:
            keys.append('  "thinking_process": "Your brief analysis in English",')
        keys.append('  "translation_result": "The ONLY field containing translated text"')
        sections.append(
            f"{_SEPARATOR}\n\n"
            "### CRITICAL OUTPUT FORMAT\n\n"
            "**THIS IS NOT TEXT TO TRANSLATE. THIS IS YOUR OUTPUT STRUCTURE.**\n\n"
            "You MUST return your response as a JSON object with EXACTLY these English keys:\n\n"
            "```json\n{\n" + "\n".join(keys) + "\n}\n```"
        )
        return "\n".join(sections)

    def preset_prompt(self, preset: PromptPreset) -> str:
        return self._task_prompt(
            "[Role: Specialized Text Processor]",
            preset.input_perception,
            preset.output_instruction,
        )

    def custom_prompt(self, perception: Optional[str], instruction: Optional[str]) -> str:
        return self._task_prompt(
            "[Role: Versatile Text Processing Engine]",
            perception or "Analyze the following text.",
            instruction or "Provide a detailed response.",
        )

    def user_prompt(self, text: str, source_language: str, target_language: str) -> str:
        """用户提示词：语言对 + 待处理文本。源语言为 ``Auto Detect`` 时省略。"""
        if source_language != AUTO_DETECT:
            prompt = f"Translate the following text from {source_language} to {target_language}."
        else:
            prompt = f"Translate the following text to {target_language}."
        return f"{prompt}\n\nInput Text:\n{text}"

    def _task_prompt(self, role: str, perception: str, instruction: str) -> str:
        return (
            f"{role}\n\n"
            f"**Input Context**: {perception}\n\n"
            f"**Output Requirement**: {instruction}\n\n"
            f"{_SEPARATOR}\n\n"
            "If the output requirement names a language, answer in it. "
            "Otherwise answer in the language of the input.\n\n"
            "Your result MUST be plain text without HTML or links, returned as a JSON object:\n\n"
            "```json\n"
            "{\n"
            '  "task_type": "Brief description of what you did",\n'
            '  "thinking_process": "Your brief analysis",\n'
            '  "result": "PLAIN TEXT answer only"\n'
            "}\n"
            "```"
        )
