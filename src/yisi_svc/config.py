"""应用配置模块。

本模块使用pydantic-settings进行环境变量管理，提供服务端参数、各供应商的
凭证与模型、图片模式设置、深度思考开关以及预设模式设置。
支持多环境配置：
- 开发环境：读取 .env.development
- 生产环境：读取 .env.production
- 默认：读取 .env

环境通过 APP_ENV 环境变量指定，默认为 development。

编排器不直接读取全局配置，而是在构造时接收一个 :class:`SettingsProvider`，
:class:`AppConfig` 是它的默认实现。
"""

import os
from functools import lru_cache
from typing import Literal, Optional, Protocol

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import APIUsage, PromptPreset, ProviderName
from .providers import PROVIDER_SPECS

DEFAULT_TRANSLATION_PRESET_ID = "default_translation"


def _get_env_files() -> tuple[str, ...]:
    """根据APP_ENV环境变量获取要加载的.env文件列表。

    :return: .env文件路径元组，按优先级从高到低排列
    """
    app_env = os.getenv("APP_ENV", "development")

    env_files_map = {
        "development": (".env.development", ".env"),
        "production": (".env.production", ".env"),
    }

    return env_files_map.get(app_env, (".env",))


class SettingsProvider(Protocol):
    """编排器所需的设置能力。

    测试中可以用固定配置替换，无需修改共享状态。
    """

    enable_deep_thinking: bool
    preset_mode_enabled: bool
    selected_preset_id: str
    retry_attempts: int
    timeout_extended: float
    learned_rules: list[str]

    def provider_for(self, usage: APIUsage) -> ProviderName: ...

    def credential_for(self, provider: ProviderName, usage: APIUsage) -> str: ...

    def model_for(self, provider: ProviderName, usage: APIUsage) -> str: ...

    def presets(self) -> list[PromptPreset]: ...


class AppConfig(BaseSettings):
    """应用配置类。

    使用 Pydantic BaseSettings 从环境变量加载配置。
    支持从 ``.env`` 文件读取，优先级：环境变量 > .env 文件 > 默认值。

    :param api_provider: 文本模式使用的供应商
    :param apply_api_to_image_mode: 图片模式是否沿用文本模式的供应商/凭证/模型
    :param image_api_provider: 图片模式单独使用的供应商
    :param enable_deep_thinking: 全局深度思考开关
    :param preset_mode_enabled: 是否启用预设模式
    :param selected_preset_id: 当前选中的预设 ID
    :param saved_presets: 已保存的预设列表（JSON）
    :param retry_attempts: 单次请求的最大尝试次数

    .. code-block:: bash

       # .env 文件示例
       API_PROVIDER="Zhipu AI"
       ZHIPU_API_KEY=your-key
       ZHIPU_MODEL=glm-4.5-air
       ENABLE_DEEP_THINKING=true

    .. note::
       模型设置为空字符串时回退到供应商的默认模型。
    """

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_env: Literal["development", "production"] = Field(
        default="development",
        description="应用运行环境"
    )

    host: str = Field(default="0.0.0.0", description="服务器监听地址")

    port: int = Field(default=8001, description="服务器监听端口", gt=0, lt=65536)

    workers: int = Field(default=1, description="工作进程数", ge=1)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="日志级别"
    )

    verbose_logging: bool = Field(default=False, description="是否启用详细日志模式")

    # 文本模式
    api_provider: ProviderName = Field(default=ProviderName.ZHIPU, description="文本模式供应商")

    openai_api_key: str = Field(default="", description="OpenAI API Key")
    openai_model: str = Field(default="", description="OpenAI 模型")
    gemini_api_key: str = Field(default="", description="Gemini API Key")
    gemini_model: str = Field(default="", description="Gemini 模型")
    zhipu_api_key: str = Field(default="", description="智谱 API Key")
    zhipu_model: str = Field(default="", description="智谱模型")
    deepseek_api_key: str = Field(default="", description="DeepSeek API Key")
    deepseek_model: str = Field(default="", description="DeepSeek 模型")
    minimax_api_key: str = Field(default="", description="MiniMax API Key")
    minimax_model: str = Field(default="", description="MiniMax 模型")

    # 图片模式
    apply_api_to_image_mode: bool = Field(default=True, description="图片模式沿用文本设置")
    image_api_provider: ProviderName = Field(default=ProviderName.ZHIPU, description="图片模式供应商")

    image_openai_api_key: str = Field(default="")
    image_openai_model: str = Field(default="")
    image_gemini_api_key: str = Field(default="")
    image_gemini_model: str = Field(default="")
    image_zhipu_api_key: str = Field(default="")
    image_zhipu_model: str = Field(default="")
    image_deepseek_api_key: str = Field(default="")
    image_deepseek_model: str = Field(default="")
    image_minimax_api_key: str = Field(default="")
    image_minimax_model: str = Field(default="")

    # 推理与预设
    enable_deep_thinking: bool = Field(default=False, description="深度思考开关")
    preset_mode_enabled: bool = Field(default=True, description="预设模式开关")
    selected_preset_id: str = Field(
        default=DEFAULT_TRANSLATION_PRESET_ID,
        description="选中的预设 ID"
    )
    saved_presets: list[PromptPreset] = Field(default_factory=list, description="已保存的预设")
    learned_rules: list[str] = Field(default_factory=list, description="默认翻译模式附加的个人规则")

    retry_attempts: int = Field(default=3, ge=1, le=10, description="最大尝试次数")

    # HTTP 超时配置（秒）
    timeout_extended: float = Field(default=120.0, ge=30, description="图片/推理请求超时(秒)")

    @field_validator("api_provider", "image_api_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        """接受大小写不敏感的供应商名称，以及 ``zhipu`` 这样的简写。"""
        if isinstance(v, str):
            lowered = v.strip().lower()
            for name in ProviderName:
                if lowered in (name.value.lower(), name.name.lower()):
                    return name
        return v

    def _usage_prefix(self, usage: APIUsage) -> str:
        if usage == APIUsage.IMAGE and not self.apply_api_to_image_mode:
            return "image_"
        return ""

    def provider_for(self, usage: APIUsage) -> ProviderName:
        """获取指定场景使用的供应商。"""
        if usage == APIUsage.IMAGE and not self.apply_api_to_image_mode:
            return self.image_api_provider
        return self.api_provider

    def credential_for(self, provider: ProviderName, usage: APIUsage) -> str:
        """获取指定供应商和场景的 API Key（未配置时为空字符串）。"""
        field = f"{self._usage_prefix(usage)}{PROVIDER_SPECS[provider].settings_key}_api_key"
        return (getattr(self, field, "") or "").strip()

    def model_for(self, provider: ProviderName, usage: APIUsage) -> str:
        """获取指定供应商和场景的模型，空值回退到默认模型。"""
        spec = PROVIDER_SPECS[provider]
        field = f"{self._usage_prefix(usage)}{spec.settings_key}_model"
        configured: Optional[str] = getattr(self, field, "")
        if configured and configured.strip():
            return configured.strip()
        return spec.default_image_model if usage == APIUsage.IMAGE else spec.default_model

    def presets(self) -> list[PromptPreset]:
        return list(self.saved_presets)


@lru_cache
def get_settings() -> AppConfig:
    """获取应用配置单例。

    使用lru_cache确保配置只被加载一次。

    :return: AppConfig实例

    Example::

        >>> settings = get_settings()
        >>> print(settings.api_provider, settings.model_for(settings.api_provider, APIUsage.TEXT))
    """
    return AppConfig()
