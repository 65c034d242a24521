"""FastAPI应用主模块。

本模块负责创建和配置FastAPI应用实例，包括中间件、路由和全局异常处理。
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .exceptions import YisiError
from .logger import configure_logging, get_logger
from .models import ErrorDetail, ErrorResponse
from .routes import router

settings = get_settings()
configure_logging(settings.log_level, use_colors=settings.verbose_logging, verbose=settings.verbose_logging)
logger = get_logger(__name__)


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    """构建 ``{"error": {message, type, code}}`` 形式的错误响应。"""
    body = ErrorResponse(error=ErrorDetail(message=message, type=error_type, code=status_code))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    """创建并配置FastAPI应用实例。

    配置包括CORS中间件、API路由和异常处理。

    :return: 配置完成的FastAPI应用实例

    .. note::
       VERBOSE_LOGGING=true 时启用API文档（/docs和/redoc）和配置查看端点（/config）。
       生命周期管理器需要在asgi.py中单独配置。

    **错误映射:**

    - 缺少凭证：400
    - 凭证被拒：401
    - 校验失败：422
    - 网络错误、供应商错误、响应格式错误：502
    """
    app = FastAPI(
        title="Yisi Translation API",
        description="Multi-vendor AI translation and image recognition service",
        version=__version__,
        docs_url="/docs" if settings.verbose_logging else None,
        redoc_url="/redoc" if settings.verbose_logging else None,
        lifespan=None,  # 生命周期管理器将在asgi.py中配置
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/v1")

    @app.exception_handler(YisiError)
    async def yisi_error_handler(request: Request, exc: YisiError) -> JSONResponse:
        """业务异常处理器：按错误类别映射状态码。"""
        logger.error(
            "Request failed: path={}, error_type={}, status_code={}, error={}",
            request.url.path,
            exc.error_type,
            exc.status_code,
            exc.message[:300],
        )
        return error_response(exc.status_code, exc.message, exc.error_type)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """全局异常处理器。

        :param request: FastAPI请求对象
        :param exc: 捕获的异常
        :return: 包含错误信息的JSON响应
        """
        logger.error(
            "Unhandled exception: path={}, method={}, error={}",
            request.url.path,
            request.method,
            str(exc)
        )
        message = str(exc) if settings.verbose_logging else "An internal server error occurred."
        return error_response(500, message, "internal_error")

    @app.get("/")
    async def root() -> dict:
        """根路径端点。

        :return: 包含欢迎信息和版本号的字典
        """
        return {"message": "Hello Yisi", "version": __version__}

    if settings.verbose_logging:

        @app.get("/config")
        async def get_config() -> dict:
            """获取当前配置信息（仅详细日志模式）。

            .. warning::
               生产环境不应暴露配置信息。API Key 不会输出。
            """
            return {
                "host": settings.host,
                "port": settings.port,
                "workers": settings.workers,
                "log_level": settings.log_level,
                "api_provider": settings.api_provider.value,
                "apply_api_to_image_mode": settings.apply_api_to_image_mode,
                "image_api_provider": settings.image_api_provider.value,
                "enable_deep_thinking": settings.enable_deep_thinking,
                "preset_mode_enabled": settings.preset_mode_enabled,
                "selected_preset_id": settings.selected_preset_id,
                "retry_attempts": settings.retry_attempts,
            }

    logger.info(
        "Application created: log_level={}, verbose_logging={}, api_provider={}",
        settings.log_level,
        settings.verbose_logging,
        settings.api_provider.value,
    )

    return app


app = create_app()
