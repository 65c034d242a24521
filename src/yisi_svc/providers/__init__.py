"""供应商适配器包。

每个 :class:`~yisi_svc.models.ProviderName` 恰好对应一个适配器、一个端点和
非空的默认模型。
"""

from typing import NamedTuple, Optional

import httpx

from ..models import ProviderName
from .base import BaseProvider, select_text_block, strip_think_tags
from .deepseek import DeepSeekProvider
from .gemini import GeminiProvider
from .minimax import MiniMaxProvider
from .openai import OpenAIProvider
from .zhipu import ZhipuProvider


class ProviderSpec(NamedTuple):
    """供应商注册信息。

    :param adapter: 适配器类
    :param default_model: 文本模式默认模型
    :param default_image_model: 图片模式默认模型
    :param settings_key: 配置字段前缀（如 ``zhipu`` 对应 ``zhipu_api_key``）
    """

    adapter: type[BaseProvider]
    default_model: str
    default_image_model: str
    settings_key: str

    @property
    def endpoint(self) -> str:
        return self.adapter.endpoint


PROVIDER_SPECS: dict[ProviderName, ProviderSpec] = {
    ProviderName.OPENAI: ProviderSpec(OpenAIProvider, "gpt-4o-mini", "gpt-4o-mini", "openai"),
    ProviderName.GEMINI: ProviderSpec(GeminiProvider, "gemini-2.5-flash", "gemini-2.5-flash", "gemini"),
    ProviderName.ZHIPU: ProviderSpec(ZhipuProvider, "glm-4.5-air", "glm-4.5v", "zhipu"),
    ProviderName.DEEPSEEK: ProviderSpec(DeepSeekProvider, "deepseek-chat", "deepseek-chat", "deepseek"),
    ProviderName.MINIMAX: ProviderSpec(MiniMaxProvider, "MiniMax-M2.5", "MiniMax-M2.5", "minimax"),
}


def get_provider(
    name: ProviderName,
    client: Optional[httpx.AsyncClient] = None,
    extended_timeout: float = 120.0,
) -> BaseProvider:
    """获取对应供应商的适配器实例。

    :param name: 供应商标识
    :param client: 可选的共享 HTTP 客户端
    :param extended_timeout: 图片/推理请求的超时（秒）
    """
    return PROVIDER_SPECS[name].adapter(client=client, extended_timeout=extended_timeout)


__all__ = [
    "BaseProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "MiniMaxProvider",
    "OpenAIProvider",
    "ZhipuProvider",
    "PROVIDER_SPECS",
    "ProviderSpec",
    "get_provider",
    "select_text_block",
    "strip_think_tags",
]
