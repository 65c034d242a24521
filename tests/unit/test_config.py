"""配置模块单元测试。"""

import pytest

from yisi_svc.config import DEFAULT_TRANSLATION_PRESET_ID, AppConfig, get_settings
from yisi_svc.models import APIUsage, PromptPreset, ProviderName


@pytest.mark.unit
class TestAppConfig:
    """AppConfig 测试。"""

    def test_defaults(self):
        config = AppConfig(_env_file=None)
        assert config.port == 8001
        assert config.api_provider == ProviderName.ZHIPU
        assert config.apply_api_to_image_mode is True
        assert config.enable_deep_thinking is False
        assert config.selected_preset_id == DEFAULT_TRANSLATION_PRESET_ID
        assert config.retry_attempts == 3

    @pytest.mark.parametrize("raw", ["zhipu", "Zhipu AI", "ZHIPU AI", " zhipu "])
    def test_provider_name_normalized(self, raw):
        """供应商名称大小写不敏感，支持简写。"""
        assert AppConfig(_env_file=None, api_provider=raw).api_provider == ProviderName.ZHIPU

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(_env_file=None, api_provider="Mistral")

    def test_env_variables(self, monkeypatch):
        """从环境变量加载。"""
        monkeypatch.setenv("API_PROVIDER", "OpenAI")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("SAVED_PRESETS", '[{"id": "p1", "name": "Sum"}]')
        config = AppConfig(_env_file=None)
        assert config.api_provider == ProviderName.OPENAI
        assert config.credential_for(ProviderName.OPENAI, APIUsage.TEXT) == "sk-env"
        assert config.presets() == [PromptPreset(id="p1", name="Sum")]

    def test_learned_rules_from_env(self, monkeypatch):
        monkeypatch.setenv("LEARNED_RULES", '["Keep brand names in English", "Use 您"]')
        config = AppConfig(_env_file=None)
        assert config.learned_rules == ["Keep brand names in English", "Use 您"]
        assert AppConfig(_env_file=None, learned_rules=[]).learned_rules == []

    def test_blank_model_falls_back_to_default(self):
        config = AppConfig(_env_file=None, zhipu_model="  ")
        assert config.model_for(ProviderName.ZHIPU, APIUsage.TEXT) == "glm-4.5-air"
        assert config.model_for(ProviderName.ZHIPU, APIUsage.IMAGE) == "glm-4.5v"

    def test_configured_model_used(self):
        config = AppConfig(_env_file=None, gemini_model="gemini-3-pro")
        assert config.model_for(ProviderName.GEMINI, APIUsage.TEXT) == "gemini-3-pro"

    def test_image_inherits_text_settings(self):
        """沿用文本设置时，图片场景使用文本供应商、凭证和模型字段。"""
        config = AppConfig(
            _env_file=None,
            api_provider="OpenAI",
            openai_api_key="sk-text",
            openai_model="gpt-4o",
            image_api_provider="Gemini",
            image_gemini_api_key="g-image",
        )
        assert config.provider_for(APIUsage.IMAGE) == ProviderName.OPENAI
        assert config.credential_for(ProviderName.OPENAI, APIUsage.IMAGE) == "sk-text"
        assert config.model_for(ProviderName.OPENAI, APIUsage.IMAGE) == "gpt-4o"

    def test_separate_image_settings(self):
        config = AppConfig(
            _env_file=None,
            apply_api_to_image_mode=False,
            image_api_provider="Gemini",
            image_gemini_api_key="g-image",
            gemini_api_key="g-text",
        )
        assert config.provider_for(APIUsage.IMAGE) == ProviderName.GEMINI
        assert config.provider_for(APIUsage.TEXT) == ProviderName.ZHIPU
        assert config.credential_for(ProviderName.GEMINI, APIUsage.IMAGE) == "g-image"
        assert config.model_for(ProviderName.GEMINI, APIUsage.IMAGE) == "gemini-2.5-flash"

    def test_missing_credential_is_empty(self):
        config = AppConfig(_env_file=None, deepseek_api_key="   ")
        assert config.credential_for(ProviderName.DEEPSEEK, APIUsage.TEXT) == ""

    def test_retry_attempts_bounds(self):
        with pytest.raises(ValueError):
            AppConfig(_env_file=None, retry_attempts=0)


@pytest.mark.unit
def test_get_settings_cached():
    """get_settings 返回同一实例。"""
    assert get_settings() is get_settings()
