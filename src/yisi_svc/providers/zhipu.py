"""智谱 AI 供应商适配器。"""

from typing import Any, Optional

from ..models import Message, ProviderName, RequestConfig
from .base import REASONING_MAX_TOKENS, BaseProvider
from .openai import chat_messages, choice_message_text


class ZhipuProvider(BaseProvider):
    """智谱适配器。

    推理模型：GLM-4.5 系列、GLM-4.6 系列、GLM-4-Plus。
    开启时发送 ``thinking: {"type": "enabled"}`` 并提高 ``max_tokens``。
    思考模式下 ``content`` 可能是 ``[{type: thinking}, {type: text}]`` 数组。
    """

    name = ProviderName.ZHIPU
    endpoint = "https://open.bigmodel.cn/api/paas/v4/chat/completions"
    reasoning_markers = ("glm-4.5", "glm-4.6", "glm-4-plus")

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        if not self.reasoning_active(config):
            return
        body["thinking"] = {"type": "enabled"}
        body["max_tokens"] = max(body.get("max_tokens", 0), REASONING_MAX_TOKENS)

    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": config.model,
            "messages": chat_messages(messages),
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        self.configure_reasoning(body, config)
        return body

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        return choice_message_text(data)
