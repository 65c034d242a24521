"""ASGI应用入口模块。

本模块导出FastAPI应用实例，供ASGI服务器（如Granian、Uvicorn等）使用。
应用启动时创建一个共享的 ``httpx.AsyncClient``，关闭时释放。

Example::

    # 使用Granian运行
    granian --interface asgi yisi_svc.asgi:app --host 0.0.0.0 --port 8001

    # 使用Granian运行（带workers）
    granian --interface asgi yisi_svc.asgi:app --host 0.0.0.0 --port 8001 --workers 4
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI

from .app import create_app as _create_app
from .config import get_settings
from .logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI应用生命周期管理器。

    启动时创建供应商请求共用的 HTTP 客户端，关闭时关闭连接池。

    :param app: FastAPI应用实例
    :yield: None
    """
    logger.info("Initializing application services...")
    app.state.http_client = httpx.AsyncClient(follow_redirects=True)
    logger.info(
        "Application services initialized successfully: env={}, host={}, port={}, api_provider={}",
        settings.app_env,
        settings.host,
        settings.port,
        settings.api_provider.value,
    )

    try:
        yield
    finally:
        logger.info("Shutting down application services...")
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Application services shut down successfully")


def create_app_with_lifespan() -> FastAPI:
    """创建带有生命周期管理的 FastAPI 应用实例。

    :return: 配置完成的 FastAPI 应用实例
    """
    app = _create_app()
    app.router.lifespan_context = lifespan
    return app


app = create_app_with_lifespan()

__all__ = ["app"]
