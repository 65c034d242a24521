"""测试辅助工具包。"""

from .builders import (
    PNG_BYTES,
    SettingsBuilder,
    make_config,
    make_messages,
    make_preset,
)

from .mocks import (
    RecordingHistory,
    ScriptedTransport,
    gemini_response,
    json_response,
    minimax_response,
    openai_chat_response,
    text_response,
)

__all__ = [
    # Builders
    "PNG_BYTES",
    "SettingsBuilder",
    "make_config",
    "make_messages",
    "make_preset",
    # Mocks
    "RecordingHistory",
    "ScriptedTransport",
    "gemini_response",
    "json_response",
    "minimax_response",
    "openai_chat_response",
    "text_response",
]
