"""Gemini 供应商适配器（generateContent）。

系统提示词放在独立的 ``system_instruction`` 字段，凭证通过 URL 查询参数传递。
"""

from typing import Any, Optional

from ..models import Message, MessageRole, ProviderName, RequestConfig
from .base import REASONING_MAX_TOKENS, BaseProvider, encode_image


class GeminiProvider(BaseProvider):
    """Gemini 适配器。

    - Gemini 3 系列：``thinkingConfig.thinkingLevel = "high"``
    - Gemini 2.5 系列：``thinkingConfig.thinkingBudget = 8192``

    思考模式下 ``parts`` 可能同时包含 ``thought`` 和答案文本，只返回答案。
    """

    name = ProviderName.GEMINI
    endpoint = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    reasoning_markers = ("gemini-3", "gemini-2.5")

    @staticmethod
    def is_gemini3_model(model: str) -> bool:
        return "gemini-3" in model.lower()

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        if not self.reasoning_active(config):
            return
        gen_config = body.setdefault("generationConfig", {})
        if self.is_gemini3_model(config.model):
            gen_config["thinkingConfig"] = {"thinkingLevel": "high"}
        else:
            gen_config["thinkingConfig"] = {"thinkingBudget": REASONING_MAX_TOKENS}
        gen_config["maxOutputTokens"] = max(gen_config.get("maxOutputTokens", 0), REASONING_MAX_TOKENS)

    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        contents: list[dict[str, Any]] = []
        system_instruction: Optional[dict[str, Any]] = None

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_instruction = {"parts": [{"text": msg.text}]}
                continue
            parts: list[dict[str, Any]] = []
            if msg.text:
                parts.append({"text": msg.text})
            if msg.image:
                parts.append({"inline_data": {"mime_type": "image/png", "data": encode_image(msg.image)}})
            role = "user" if msg.role == MessageRole.USER else "model"
            contents.append({"role": role, "parts": parts})

        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "response_mime_type": "application/json",
                "temperature": config.temperature,
                "maxOutputTokens": max(2048, config.max_tokens),
            },
        }
        if system_instruction is not None:
            body["system_instruction"] = system_instruction

        self.configure_reasoning(body, config)
        return body

    def build_url(self, config: RequestConfig) -> str:
        return self.endpoint.format(model=config.model)

    def build_params(self, config: RequestConfig) -> dict[str, str]:
        return {"key": config.credential}

    def build_headers(self, config: RequestConfig) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return None

        # 跳过思考内容，优先返回答案 part
        for part in parts:
            if not isinstance(part, dict) or part.get("thought"):
                continue
            text = part.get("text")
            if isinstance(text, str):
                return text

        for part in parts:
            if isinstance(part, dict):
                text = part.get("text")
                if isinstance(text, str) and text:
                    return text
        return None
