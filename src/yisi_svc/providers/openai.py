"""OpenAI 供应商适配器（Chat Completions）。"""

from typing import Any, Optional

from ..models import Message, ProviderName, RequestConfig
from .base import REASONING_MAX_TOKENS, BaseProvider, encode_image, select_text_block


def chat_messages(messages: list[Message], with_images: bool = True) -> list[dict[str, Any]]:
    """构建 ``[{role, content}]`` 形式的消息数组。

    带图片的消息使用多模态内容数组，图片以 data URL 内联。
    """
    api_messages = []
    for msg in messages:
        content: Any = msg.text
        if with_images and msg.image:
            content = [
                {"type": "text", "text": msg.text},
                {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{encode_image(msg.image)}"}},
            ]
        api_messages.append({"role": msg.role.value, "content": content})
    return api_messages


def choice_message_text(data: dict[str, Any]) -> Optional[str]:
    """从 ``choices[0].message.content`` 中取出文本。

    ``content`` 可能是字符串，也可能是（思考模式下的）内容块数组。
    """
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return select_text_block(content)
    return None


class OpenAIProvider(BaseProvider):
    """OpenAI 适配器。

    推理模型（o1/o3 系列）不接受 ``max_tokens`` 和 ``temperature``，
    改用 ``max_completion_tokens``；开启推理时附加 ``reasoning_effort``。
    """

    name = ProviderName.OPENAI
    endpoint = "https://api.openai.com/v1/chat/completions"
    reasoning_markers = ("o1", "o3")
    default_timeout = 60.0

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        if not self.is_reasoning_model(config.model):
            return
        body.pop("temperature", None)
        budget = body.pop("max_tokens", config.max_tokens)
        if config.enable_reasoning:
            body["reasoning_effort"] = "medium"
            budget = max(budget, REASONING_MAX_TOKENS)
        body["max_completion_tokens"] = budget

    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": config.model,
            "messages": chat_messages(messages),
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
            "response_format": {"type": "json_object"},
        }
        self.configure_reasoning(body, config)
        return body

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        return choice_message_text(data)
