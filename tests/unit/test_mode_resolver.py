"""模式解析单元测试。"""

import pytest

from yisi_svc.models import DefaultTranslation, PromptPreset, TemporaryCustom, UserPreset
from yisi_svc.prompts import DefaultPromptBuilder
from yisi_svc.services.mode_resolver import build_prompts, resolve_mode

from tests.fixtures.builders import make_preset


@pytest.mark.unit
class TestResolveMode:
    """resolve_mode 函数测试。"""

    def test_presets_disabled(self):
        """预设关闭时为临时自定义，与选中 ID 无关。"""
        assert resolve_mode(False, "preset-1", [make_preset()]) == TemporaryCustom()

    def test_default_translation_sentinel(self):
        assert resolve_mode(True, "default_translation", [make_preset()]) == DefaultTranslation()

    def test_user_preset_found(self):
        preset = make_preset("preset-1")
        mode = resolve_mode(True, "preset-1", [make_preset("other"), preset])
        assert isinstance(mode, UserPreset)
        assert mode.preset == preset

    def test_stale_id_falls_back(self):
        """选中的预设已被删除时回退到默认翻译。"""
        assert resolve_mode(True, "deleted", [make_preset()]) == DefaultTranslation()

    def test_empty_preset_list(self):
        assert resolve_mode(True, "preset-1", []) == DefaultTranslation()


@pytest.mark.unit
class TestBuildPrompts:
    """build_prompts 函数测试。"""

    def setup_method(self):
        self.builder = DefaultPromptBuilder()

    def test_translation_path(self):
        system, user = build_prompts(DefaultTranslation(), self.builder, "Hello", "Auto Detect", "简体中文")
        assert "translation_result" in system
        assert "thinking_process" not in system
        assert user == "Translate the following text to 简体中文.\n\nInput Text:\nHello"

    def test_translation_path_with_cot(self):
        system, _ = build_prompts(DefaultTranslation(), self.builder, "Hello", "English", "日本語", enable_cot=True)
        assert "thinking_process" in system

    def test_preset_path(self):
        preset = PromptPreset(id="p", input_perception="A recipe.", output_instruction="List ingredients.")
        system, user = build_prompts(UserPreset(preset=preset), self.builder, "Text", "English", "简体中文")
        assert "A recipe." in system
        assert "List ingredients." in system
        assert user.startswith("Translate the following text from English to 简体中文.")

    def test_custom_path(self):
        system, _ = build_prompts(
            TemporaryCustom(),
            self.builder,
            "Text",
            "Auto Detect",
            "简体中文",
            user_perception="A tweet.",
            user_instruction="Explain the joke.",
        )
        assert "A tweet." in system
        assert "Explain the joke." in system

    def test_cot_ignored_outside_translation(self):
        """预设与自定义模式不注入提示词 CoT 指令。"""
        system, _ = build_prompts(TemporaryCustom(), self.builder, "Text", "Auto Detect", "简体中文", enable_cot=True)
        assert "translation_result" not in system
