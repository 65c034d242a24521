"""DeepSeek 供应商适配器。"""

from typing import Any, Optional

from ..logger import get_logger
from ..models import Message, ProviderName, RequestConfig
from .base import BaseProvider
from .openai import chat_messages, choice_message_text

logger = get_logger(__name__)

DEEPSEEK_REASONING_MAX_TOKENS = 16384


class DeepSeekProvider(BaseProvider):
    """DeepSeek 适配器。

    ``deepseek-reasoner`` 总是输出推理内容，没有开关参数；开启推理时只提高
    token 预算。推理模型不接受 ``temperature``，请求中直接省略该字段。
    DeepSeek 不支持图片输入，图片会被丢弃。
    """

    name = ProviderName.DEEPSEEK
    endpoint = "https://api.deepseek.com/chat/completions"
    reasoning_markers = ("deepseek-reasoner", "deepseek-r1")

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        if not self.reasoning_active(config):
            return
        body["max_tokens"] = max(body.get("max_tokens", 0), DEEPSEEK_REASONING_MAX_TOKENS)

    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        if any(m.image for m in messages):
            logger.warning("DeepSeek does not accept images, sending text only: model={}", config.model)

        body: dict[str, Any] = {
            "model": config.model,
            "messages": chat_messages(messages, with_images=False),
            "max_tokens": config.max_tokens,
        }
        if not self.is_reasoning_model(config.model):
            body["temperature"] = max(config.temperature, 0.01)

        self.configure_reasoning(body, config)
        return body

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        return choice_message_text(data)
