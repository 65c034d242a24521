"""日志配置模块。

本模块使用loguru进行结构化日志记录，提供统一的日志配置和获取接口。
供应商的原始响应只在 DEBUG 级别输出，且会被截断。
"""

import sys
from typing import Any

import orjson
from loguru import logger

_CONCISE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <5}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
_VERBOSE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <5}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging(log_level: str = "INFO", use_colors: bool = True, verbose: bool = False) -> None:
    """配置loguru日志系统。

    :param log_level: 日志级别，可选值：DEBUG, INFO, WARNING, ERROR, CRITICAL
    :param use_colors: 是否在控制台输出中使用颜色
    :param verbose: 是否启用详细日志模式（包含完整时间戳、行号、backtrace和diagnose）

    .. note::
       此函数应在应用启动时调用一次。

       - 简洁模式（verbose=False，默认）：短时间格式，不显示行号
       - 详细模式（verbose=True）：完整时间格式、行号、backtrace
    """
    logger.remove()

    fmt = _VERBOSE_FORMAT if verbose else _CONCISE_FORMAT
    if not use_colors:
        # 去掉颜色标签，保留纯文本格式
        for tag in ("<green>", "</green>", "<level>", "</level>", "<cyan>", "</cyan>"):
            fmt = fmt.replace(tag, "")

    logger.add(
        sys.stderr,
        format=fmt,
        level=log_level.upper(),
        colorize=use_colors,
        backtrace=verbose,
        diagnose=verbose and use_colors,
    )


def get_logger(name: str | None = None):
    """获取logger实例。

    :param name: logger名称，通常使用模块的__name__。loguru使用全局logger，此参数用于兼容性
    :return: 配置好的loguru logger实例

    Example::

        >>> from yisi_svc.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Provider selected: provider={}, model={}", "Gemini", "gemini-2.5-flash")
    """
    return logger


def json_str(value: Any, limit: int | None = None) -> str:
    """将对象序列化为紧凑的 JSON 字符串，用于日志字段。

    无法序列化的对象退化为 ``str(value)``。

    :param value: 待序列化的对象
    :param limit: 可选的最大长度，超出部分截断
    """
    try:
        text = orjson.dumps(value, default=str).decode("utf-8")
    except TypeError:
        text = str(value)
    if limit is not None and len(text) > limit:
        return text[:limit] + "..."
    return text


def mask_secret(secret: str | None) -> str:
    """脱敏显示密钥，仅保留前 4 位。"""
    if not secret:
        return "<empty>"
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}...({len(secret)} chars)"
