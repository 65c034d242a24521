"""翻译服务模块。

本模块是对外的编排入口，负责：

- 解析供应商、凭证和模型（文本/图片场景分别解析）
- 双模态推理策略：API 层原生推理 vs 提示词层 CoT
- 组装消息与请求配置，带重试地调用供应商
- 提取 → 解析 → 校验响应，并把结果交给历史记录协作方
"""

from typing import Optional, Protocol

import httpx

from .config import SettingsProvider
from .exceptions import MissingCredentialError
from .logger import get_logger, mask_secret
from .models import (
    APIUsage,
    DefaultTranslation,
    Message,
    MessageRole,
    Mode,
    ParsedResult,
    ProviderName,
    RequestConfig,
    TranslationOutcome,
    TranslationRecord,
    TemporaryCustom,
    mode_label,
)
from .prompts import DefaultPromptBuilder, PromptBuilder
from .providers import BaseProvider, get_provider
from .services.mode_resolver import build_prompts
from .services.response import extract_json, parse_result, strip_special_tokens, validate_result
from .services.retry import RetryPolicy
from .services.text_heuristics import max_tokens_for, preprocess_input, temperature_for

logger = get_logger(__name__)

IMAGE_USER_TEXT = "Please process this image according to the instructions."
IMAGE_TEMPERATURE = 0.1
IMAGE_MAX_TOKENS = 4096


class HistoryRecorder(Protocol):
    """历史记录协作方。"""

    def add(self, record: TranslationRecord) -> None: ...


class TranslationService:
    """翻译/识别编排器。

    :param settings: 设置提供者，通常为 :class:`~yisi_svc.config.AppConfig`
    :param prompt_builder: 提示词协作方，默认使用带 ``learned_rules`` 设置的 :class:`~yisi_svc.prompts.DefaultPromptBuilder`
    :param history: 可选的历史记录协作方
    :param retry_policy: 重试策略，默认按 ``settings.retry_attempts`` 构建
    :param http_client: 可选的共享 HTTP 客户端

    Example::

        >>> service = TranslationService(get_settings())
        >>> outcome = await service.translate_text("Hello", target_language="简体中文")
        >>> outcome.text
        '你好'
    """

    def __init__(
        self,
        settings: SettingsProvider,
        prompt_builder: Optional[PromptBuilder] = None,
        history: Optional[HistoryRecorder] = None,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.prompt_builder = prompt_builder or DefaultPromptBuilder(settings.learned_rules)
        self.history = history
        self.retry_policy = retry_policy or RetryPolicy(attempts=settings.retry_attempts)
        self.http_client = http_client

    def _provider(self, name: ProviderName) -> BaseProvider:
        return get_provider(name, client=self.http_client, extended_timeout=self.settings.timeout_extended)

    def _resolve(self, usage: APIUsage) -> tuple[ProviderName, str, str]:
        provider = self.settings.provider_for(usage)
        credential = self.settings.credential_for(provider, usage)
        if not credential:
            logger.warning("Missing credential: provider={}, usage={}", provider.value, usage.value)
            raise MissingCredentialError(provider.value, usage.value)
        model = self.settings.model_for(provider, usage)
        return provider, credential, model

    def _reasoning_strategy(self, mode: Mode, is_reasoning: bool) -> tuple[bool, bool]:
        """决定 ``(api_reasoning, prompt_cot)``。

        默认翻译模式受深度思考开关强管控：推理模型走 API 推理，其他模型走提示词 CoT，
        两者不会同时开启。预设与自定义模式只让推理模型受开关影响，从不注入 CoT。
        """
        deep_thinking = self.settings.enable_deep_thinking
        if isinstance(mode, DefaultTranslation):
            if not deep_thinking:
                return False, False
            return (True, False) if is_reasoning else (False, True)
        return is_reasoning and deep_thinking, False

    def should_enable_cot(self, mode: Mode, usage: APIUsage = APIUsage.IMAGE) -> bool:
        """当前设置下是否应在提示词中要求 ``thinking_process``。

        供调用方生成图片提示词时使用。
        """
        if not isinstance(mode, DefaultTranslation) or not self.settings.enable_deep_thinking:
            return False
        provider = self.settings.provider_for(usage)
        model = self.settings.model_for(provider, usage)
        return not self._provider(provider).is_reasoning_model(model)

    async def translate_text(
        self,
        text: str,
        mode: Mode = DefaultTranslation(),
        source_language: str = "Auto Detect",
        target_language: str = "简体中文",
        user_perception: Optional[str] = None,
        user_instruction: Optional[str] = None,
    ) -> TranslationOutcome:
        """翻译或按模式处理一段文本。

        :param text: 原始输入文本
        :param mode: 提示词模式
        :param source_language: 源语言，``Auto Detect`` 表示交给模型判断
        :param target_language: 目标语言
        :param user_perception: 临时自定义模式的输入感知
        :param user_instruction: 临时自定义模式的输出指令
        :return: 结果文本与历史记录
        :raises MissingCredentialError: 未配置 API Key（不重试）
        :raises YisiError: 重试耗尽或不可重试的错误
        """
        provider_name, credential, model = self._resolve(APIUsage.TEXT)
        provider = self._provider(provider_name)
        prepared = preprocess_input(text)

        is_reasoning = provider.is_reasoning_model(model)
        api_reasoning, prompt_cot = self._reasoning_strategy(mode, is_reasoning)

        system_prompt, user_prompt = build_prompts(
            mode,
            self.prompt_builder,
            prepared,
            source_language,
            target_language,
            user_perception=user_perception,
            user_instruction=user_instruction,
            enable_cot=prompt_cot,
        )
        messages = [
            Message(role=MessageRole.SYSTEM, text=system_prompt),
            Message(role=MessageRole.USER, text=user_prompt),
        ]
        config = RequestConfig(
            credential=credential,
            model=model,
            temperature=temperature_for(prepared),
            max_tokens=max_tokens_for(prepared),
            enable_reasoning=api_reasoning,
        )

        logger.info(
            "Translate request: provider={}, model={}, mode={}, api_reasoning={}, prompt_cot={}, credential={}",
            provider_name.value,
            model,
            mode_label(mode),
            api_reasoning,
            prompt_cot,
            mask_secret(credential),
        )

        raw = await self.retry_policy.run(lambda: provider.send(messages, config))
        parsed = parse_result(extract_json(raw))
        self._log_diagnostics(parsed)
        validate_result(parsed.text, text)

        custom = isinstance(mode, TemporaryCustom)
        record = TranslationRecord(
            source_text=text,
            target_text=parsed.text,
            source_language=source_language,
            target_language=target_language,
            mode=mode_label(mode),
            custom_perception=user_perception if custom else None,
            custom_instruction=user_instruction if custom else None,
        )
        self._record(record)
        return TranslationOutcome(text=parsed.text, record=record)

    async def recognize_image(
        self,
        image: bytes,
        instruction: str,
        mode: Mode = DefaultTranslation(),
    ) -> TranslationOutcome:
        """按系统指令识别图片。

        :param image: PNG 图片字节
        :param instruction: 系统指令（图片提示词）
        :param mode: 提示词模式，只影响推理策略
        :raises MissingCredentialError: 图片场景未配置 API Key
        """
        provider_name, credential, model = self._resolve(APIUsage.IMAGE)
        provider = self._provider(provider_name)

        # 图片模式的 CoT 由调用方写进 instruction，这里只决定 API 推理
        api_reasoning, _ = self._reasoning_strategy(mode, provider.is_reasoning_model(model))

        messages = [
            Message(role=MessageRole.SYSTEM, text=instruction),
            Message(role=MessageRole.USER, text=IMAGE_USER_TEXT, image=image),
        ]
        config = RequestConfig(
            credential=credential,
            model=model,
            temperature=IMAGE_TEMPERATURE,
            max_tokens=IMAGE_MAX_TOKENS,
            enable_reasoning=api_reasoning,
        )

        logger.info(
            "Recognize request: provider={}, model={}, mode={}, api_reasoning={}, image_bytes={}",
            provider_name.value,
            model,
            mode_label(mode),
            api_reasoning,
            len(image),
        )

        raw = await self.retry_policy.run(lambda: provider.send(messages, config))
        parsed = parse_result(extract_json(strip_special_tokens(raw)))
        self._log_diagnostics(parsed)
        validate_result(parsed.text, None)

        record = TranslationRecord(
            source_text="",
            target_text=parsed.text,
            source_language="Auto",
            target_language="Auto",
            mode=mode_label(mode),
            has_image=True,
        )
        self._record(record)
        return TranslationOutcome(text=parsed.text, record=record)

    def _record(self, record: TranslationRecord) -> None:
        if self.history is None:
            return
        self.history.add(record)

    @staticmethod
    def _log_diagnostics(parsed: ParsedResult) -> None:
        if parsed.detected_type or parsed.reasoning_trace:
            logger.debug(
                "Parsed diagnostics: detected_type={}, thinking_process={}",
                parsed.detected_type,
                (parsed.reasoning_trace or "")[:200],
            )
