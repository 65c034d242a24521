"""全局测试配置和 fixtures。

本模块提供所有测试共享的 fixtures 和配置。
"""

import asyncio
import os
import sys

import pytest

# 在导入任何模块之前设置必需的环境变量
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("VERBOSE_LOGGING", "false")

# 确保可以导入 src 下的包
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from yisi_svc.config import AppConfig
from yisi_svc.models import ProviderName

from tests.fixtures.builders import SettingsBuilder
from tests.fixtures.mocks import RecordingHistory


@pytest.fixture
def settings_builder() -> SettingsBuilder:
    """默认使用智谱供应商的配置构建器。"""
    return SettingsBuilder()


@pytest.fixture
def zhipu_settings(settings_builder: SettingsBuilder) -> AppConfig:
    """智谱 + 默认模型（glm-4.5-air，推理模型）的配置。"""
    return settings_builder.with_provider(ProviderName.ZHIPU, api_key="test-zhipu-key").build()


@pytest.fixture
def history() -> RecordingHistory:
    """记录型历史协作方。"""
    return RecordingHistory()


@pytest.fixture
def sleep_calls(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """替换 ``asyncio.sleep``，记录退避时长而不真正等待。"""
    calls: list[float] = []
    original_sleep = asyncio.sleep

    async def fake_sleep(delay: float, *args, **kwargs):
        calls.append(delay)
        await original_sleep(0)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return calls


@pytest.fixture(autouse=True)
def reset_lru_cache():
    """自动重置 LRU 缓存。

    确保每个测试都有干净的配置状态。
    """
    from yisi_svc.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
