"""MiniMax 供应商适配器（Anthropic 兼容接口）。"""

from typing import Any, Optional

from ..logger import get_logger
from ..models import Message, MessageRole, ProviderName, RequestConfig
from .base import REASONING_MAX_TOKENS, BaseProvider, select_text_block

logger = get_logger(__name__)

MINIMAX_REASONING_MAX_TOKENS = 16384


class MiniMaxProvider(BaseProvider):
    """MiniMax 适配器。

    使用 Anthropic 风格的内容块：系统提示词放在顶层 ``system`` 字段，
    凭证放在 ``x-api-key`` 头。响应 ``content`` 中可能同时包含 ``thinking``
    块和 ``text`` 块。
    """

    name = ProviderName.MINIMAX
    endpoint = "https://api.minimaxi.com/anthropic/v1/messages"
    reasoning_markers = ("minimax-m2.5", "minimax-m2.1", "minimax-m1")

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        if not self.reasoning_active(config):
            return
        body["thinking"] = {"type": "enabled", "budget_tokens": REASONING_MAX_TOKENS}
        body["max_tokens"] = max(body.get("max_tokens", 0), MINIMAX_REASONING_MAX_TOKENS)

    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        system_text: Optional[str] = None
        conversation: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_text = msg.text
                continue
            if msg.image:
                logger.warning("MiniMax adapter sends text only, image dropped: model={}", config.model)
            conversation.append({
                "role": msg.role.value,
                "content": [{"type": "text", "text": msg.text}],
            })

        body: dict[str, Any] = {
            "model": config.model,
            "messages": conversation,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if system_text is not None:
            body["system"] = system_text

        self.configure_reasoning(body, config)
        return body

    def build_headers(self, config: RequestConfig) -> dict[str, str]:
        return {
            "x-api-key": config.credential,
            "Content-Type": "application/json",
        }

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        content = data.get("content")
        if not isinstance(content, list):
            return None
        return select_text_block(content)
