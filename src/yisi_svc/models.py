"""数据模型定义模块。

本模块定义一次翻译/识别请求中使用的不可变值类型，以及 HTTP 接口的
请求/响应模型。所有请求期值类型都在请求开始时创建，请求结束后丢弃。
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """消息角色。"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """统一的消息结构（兼容文本和多模态）。

    :param role: 消息角色
    :param text: 文本内容
    :param image: 可选的图片字节（PNG）
    :type role: MessageRole
    :type text: str
    :type image: Optional[bytes]
    """

    model_config = ConfigDict(frozen=True)

    role: MessageRole = Field(..., description="消息角色")
    text: str = Field(default="", description="文本内容")
    image: Optional[bytes] = Field(default=None, description="图片数据")


class RequestConfig(BaseModel):
    """统一的请求配置要素。

    每次调用时从存储的设置重新构建，不在并发调用之间共享。

    :param credential: 供应商 API Key
    :param model: 模型 ID
    :param temperature: 采样温度
    :param max_tokens: 输出 token 上限
    :param enable_reasoning: API 层面是否开启原生推理能力
    """

    model_config = ConfigDict(frozen=True)

    credential: str = Field(..., description="API Key")
    model: str = Field(..., description="模型 ID")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="采样温度")
    max_tokens: int = Field(default=1024, ge=1, description="最大token数")
    enable_reasoning: bool = Field(default=False, description="是否开启原生推理")


class ProviderName(str, Enum):
    """供应商标识（封闭集合）。值与设置中存储的字符串一致。"""

    OPENAI = "OpenAI"
    GEMINI = "Gemini"
    ZHIPU = "Zhipu AI"
    DEEPSEEK = "DeepSeek"
    MINIMAX = "MiniMax"


class APIUsage(str, Enum):
    """API 使用场景。"""

    TEXT = "text"
    IMAGE = "image"


class PromptPreset(BaseModel):
    """用户保存的可复用预设（感知 + 指令）。"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="预设 ID")
    name: str = Field(default="", description="预设名称")
    input_perception: str = Field(default="", description="输入感知")
    output_instruction: str = Field(default="", description="输出指令")


# --- Mode (提示词模式) ---


class TemporaryCustom(BaseModel):
    """临时自定义：预设关闭，用户直接提供感知和指令。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["temporary_custom"] = "temporary_custom"


class DefaultTranslation(BaseModel):
    """默认翻译：语言对 + 已学习规则生效。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default_translation"] = "default_translation"


class UserPreset(BaseModel):
    """用户预设模式。

    两个预设模式相等当且仅当预设 ID 相同，即使内容已被编辑。
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["user_preset"] = "user_preset"
    preset: PromptPreset

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserPreset):
            return False
        return self.preset.id == other.preset.id

    def __hash__(self) -> int:
        return hash((self.kind, self.preset.id))


Mode = Union[TemporaryCustom, DefaultTranslation, UserPreset]


def mode_label(mode: Mode) -> str:
    """返回用于日志和历史记录的模式标签。"""
    if isinstance(mode, UserPreset):
        return f"user_preset:{mode.preset.id}"
    return mode.kind


class ParsedResult(BaseModel):
    """解析后的结果。

    ``detected_type`` 和 ``reasoning_trace`` 仅用于诊断，不返回给调用方。
    """

    model_config = ConfigDict(frozen=True)

    text: str
    detected_type: Optional[str] = None
    reasoning_trace: Optional[str] = None


class TranslationRecord(BaseModel):
    """交给历史记录协作方保存的出站记录。"""

    model_config = ConfigDict(frozen=True)

    source_text: str
    target_text: str
    source_language: str
    target_language: str
    mode: str
    custom_perception: Optional[str] = None
    custom_instruction: Optional[str] = None
    has_image: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TranslationOutcome(BaseModel):
    """编排器的最终返回值。"""

    model_config = ConfigDict(frozen=True)

    text: str
    record: TranslationRecord


# --- HTTP API Models ---


ModeName = Literal["custom", "translation", "preset"]


class TranslateRequest(BaseModel):
    """文本翻译请求。

    ``mode`` 省略时根据已存储的预设设置解析模式。
    """

    text: str = Field(..., min_length=1, description="待处理文本")
    source_language: str = Field(default="Auto Detect", description="源语言")
    target_language: str = Field(default="简体中文", description="目标语言")
    mode: Optional[ModeName] = Field(default=None, description="提示词模式")
    preset_id: Optional[str] = Field(default=None, description="预设 ID（mode=preset 时使用）")
    user_perception: Optional[str] = Field(default=None, description="临时自定义的输入感知")
    user_instruction: Optional[str] = Field(default=None, description="临时自定义的输出指令")


class RecognizeRequest(BaseModel):
    """图片识别请求。"""

    image_base64: str = Field(..., min_length=1, description="Base64 编码的 PNG 图片")
    instruction: str = Field(..., description="系统指令")
    mode: Optional[ModeName] = Field(default=None, description="提示词模式")
    preset_id: Optional[str] = Field(default=None, description="预设 ID")


class ErrorDetail(BaseModel):
    """错误详情。"""

    message: str
    type: str
    code: int


class ErrorResponse(BaseModel):
    """错误响应。"""

    error: ErrorDetail


class ProviderInfo(BaseModel):
    """供应商信息。"""

    name: str
    endpoint: str
    default_model: str
    default_image_model: str
    reasoning_markers: list[str]


def dump_record(record: TranslationRecord) -> dict[str, Any]:
    return record.model_dump(mode="json")
