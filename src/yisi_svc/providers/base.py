"""供应商适配器基类。

每个供应商实现统一的 ``send(messages, config) -> str`` 约定，并自带推理能力策略：

- :meth:`BaseProvider.is_reasoning_model` 按模型名称判断是否具备原生推理能力
- :meth:`BaseProvider.configure_reasoning` 把供应商特有的思考开关注入请求体

请求体由 :meth:`BaseProvider.build_body` 按请求现场构建，不共享可变的 schema 对象。
"""

import base64
import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

import httpx
import orjson

from ..exceptions import MalformedResponseError, NetworkError, UnauthorizedError, VendorError
from ..logger import get_logger, json_str
from ..models import Message, ProviderName, RequestConfig

logger = get_logger(__name__)

THINK_SPAN_PATTERN = re.compile(r"<think>[\s\S]*?</think>")

# 推理模式开启时的输出 token 预算下限
REASONING_MAX_TOKENS = 8192


def strip_think_tags(text: str) -> str:
    """去掉文本中可见的 ``<think>...</think>`` 推理片段。"""
    if "<think>" not in text:
        return text
    return THINK_SPAN_PATTERN.sub("", text).strip()


def encode_image(image: bytes) -> str:
    """将图片字节编码为 base64 字符串。"""
    return base64.b64encode(image).decode("ascii")


def select_text_block(blocks: list[Any], text_types: tuple[str, ...] = ("text", "answer")) -> Optional[str]:
    """从内容块数组中挑选答案文本。

    优先返回 ``type`` 为 ``text``/``answer`` 的块，丢弃 ``thinking`` 块；
    找不到带类型的文本块时，退而返回任意非空的 ``text`` 字段。

    :param blocks: 供应商返回的内容块列表
    :return: 答案文本，找不到时返回 None
    """
    for block in blocks:
        if not isinstance(block, dict):
            continue
        if block.get("type") in text_types:
            text = block.get("text")
            if isinstance(text, str):
                return text
    for block in blocks:
        if not isinstance(block, dict):
            continue
        text = block.get("text")
        if isinstance(text, str) and text:
            return text
    return None


class BaseProvider(ABC):
    """供应商适配器基类。

    子类需要声明 :attr:`name`、:attr:`endpoint`、:attr:`reasoning_markers`，
    并实现 :meth:`build_body` 和 :meth:`extract_text`。

    :param client: 可选的共享 ``httpx.AsyncClient``；未提供时每次请求创建短生命周期客户端
    :param timeout: 普通请求超时（秒），默认使用类属性 :attr:`default_timeout`
    :param extended_timeout: 图片/推理请求超时（秒）
    """

    name: ClassVar[ProviderName]
    endpoint: ClassVar[str]
    reasoning_markers: ClassVar[tuple[str, ...]] = ()
    default_timeout: ClassVar[float] = 120.0

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        extended_timeout: float = 120.0,
    ):
        self._client = client
        self.timeout = timeout if timeout is not None else self.default_timeout
        self.extended_timeout = max(extended_timeout, self.timeout)

    # --- 推理能力策略 ---

    def is_reasoning_model(self, model: str) -> bool:
        """按大小写不敏感的子串匹配判断模型是否为推理模型。"""
        lower = model.lower()
        return any(marker in lower for marker in self.reasoning_markers)

    def reasoning_active(self, config: RequestConfig) -> bool:
        return config.enable_reasoning and self.is_reasoning_model(config.model)

    def configure_reasoning(self, body: dict[str, Any], config: RequestConfig) -> None:
        """把推理参数写入请求体。默认实现：无推理能力，不做任何修改。"""
        return None

    # --- 请求构建 ---

    @abstractmethod
    def build_body(self, messages: list[Message], config: RequestConfig) -> dict[str, Any]:
        """构建供应商请求体（包含推理参数）。"""

    def build_url(self, config: RequestConfig) -> str:
        return self.endpoint

    def build_params(self, config: RequestConfig) -> dict[str, str]:
        return {}

    def build_headers(self, config: RequestConfig) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {config.credential}",
            "Content-Type": "application/json",
        }

    def request_timeout(self, messages: list[Message], config: RequestConfig) -> float:
        """图片请求和推理请求耗时明显更长，使用扩展超时。"""
        has_image = any(m.image for m in messages)
        if has_image or self.reasoning_active(config):
            return self.extended_timeout
        return self.timeout

    # --- 响应解析 ---

    @abstractmethod
    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        """从解码后的响应中定位助手文本，找不到时返回 None。"""

    # --- 发送 ---

    async def send(self, messages: list[Message], config: RequestConfig) -> str:
        """发送请求并返回助手文本。

        :raises NetworkError: 连接失败、超时、重定向过多或响应体解码失败
        :raises UnauthorizedError: 上游返回 401/403
        :raises VendorError: 上游返回其他非 2xx 状态码
        :raises MalformedResponseError: 响应中没有可用的文本字段
        """
        body = self.build_body(messages, config)
        url = self.build_url(config)
        timeout = self.request_timeout(messages, config)

        logger.info(
            "Provider request: provider={}, model={}, reasoning={}, timeout={}s",
            self.name.value,
            config.model,
            self.reasoning_active(config),
            timeout,
        )
        logger.debug("Provider request body: provider={}, body={}", self.name.value, json_str(_redact_images(body), 500))

        try:
            if self._client is not None:
                response = await self._post(self._client, url, body, config, timeout)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await self._post(client, url, body, config, timeout)
        except httpx.TimeoutException as e:
            logger.error("Provider request timed out: provider={}, error={}", self.name.value, str(e))
            raise NetworkError(f"{self.name.value} request timed out: {e}", self.name.value) from e
        except httpx.RequestError as e:
            logger.error(
                "Provider transport error: provider={}, error_type={}, error={}",
                self.name.value,
                type(e).__name__,
                str(e),
            )
            raise NetworkError(f"{self.name.value} request failed: {e}", self.name.value) from e

        raw_text = response.text
        logger.debug(
            "Provider raw response: provider={}, status_code={}, body={}",
            self.name.value,
            response.status_code,
            raw_text[:500],
        )

        if not response.is_success:
            logger.error(
                "Provider HTTP error: provider={}, status_code={}, response_text={}",
                self.name.value,
                response.status_code,
                raw_text[:200],
            )
            if response.status_code in (401, 403):
                raise UnauthorizedError(response.status_code, raw_text, self.name.value)
            raise VendorError(response.status_code, raw_text, self.name.value)

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise MalformedResponseError(f"{self.name.value} response is not valid JSON") from e

        text = self.extract_text(data) if isinstance(data, dict) else None
        if text is None:
            keys = sorted(data.keys()) if isinstance(data, dict) else []
            logger.warning("Provider response without text: provider={}, keys={}", self.name.value, json_str(keys))
            raise MalformedResponseError(
                f"Failed to parse {self.name.value} response. Available keys: {', '.join(keys)}",
                keys,
            )

        return strip_think_tags(text)

    async def _post(
        self,
        client: httpx.AsyncClient,
        url: str,
        body: dict[str, Any],
        config: RequestConfig,
        timeout: float,
    ) -> httpx.Response:
        return await client.post(
            url,
            params=self.build_params(config) or None,
            headers=self.build_headers(config),
            content=orjson.dumps(body),
            timeout=timeout,
        )


def _redact_images(value: Any) -> Any:
    """日志用：把 base64 图片数据替换为长度占位。"""
    if isinstance(value, dict):
        return {
            k: (f"<{len(v)} chars>" if k in ("data", "url") and isinstance(v, str) and len(v) > 200 else _redact_images(v))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact_images(v) for v in value]
    return value
