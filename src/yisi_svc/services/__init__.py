"""翻译服务的内部组件。"""

from .mode_resolver import build_prompts, resolve_mode
from .retry import RetryPolicy, is_retryable
from .text_heuristics import max_tokens_for, preprocess_input, temperature_for

__all__ = [
    "RetryPolicy",
    "build_prompts",
    "is_retryable",
    "max_tokens_for",
    "preprocess_input",
    "resolve_mode",
    "temperature_for",
]
