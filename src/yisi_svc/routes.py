"""API路由模块。

本模块定义所有HTTP端点：文本翻译、图片识别和供应商列表。
业务错误由 :mod:`yisi_svc.app` 中的异常处理器统一转换为错误响应。
"""

import base64
import binascii
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from .config import DEFAULT_TRANSLATION_PRESET_ID, get_settings
from .logger import get_logger
from .models import (
    DefaultTranslation,
    ErrorDetail,
    ErrorResponse,
    Mode,
    ModeName,
    ProviderInfo,
    RecognizeRequest,
    TemporaryCustom,
    TranslateRequest,
    dump_record,
)
from .providers import PROVIDER_SPECS
from .services.mode_resolver import resolve_mode
from .translation_service import TranslationService

logger = get_logger(__name__)
router = APIRouter()


def get_translation_service(request: Request) -> TranslationService:
    """构建请求级的编排器，复用应用级共享的 HTTP 客户端（如有）。"""
    http_client = getattr(request.app.state, "http_client", None)
    return TranslationService(get_settings(), http_client=http_client)


def request_mode(service: TranslationService, mode: Optional[ModeName], preset_id: Optional[str]) -> Mode:
    """把请求中的模式名称转换为 :data:`~yisi_svc.models.Mode`。

    未指定模式时按已存储的预设设置解析。
    """
    settings = service.settings
    if mode is None:
        return resolve_mode(settings.preset_mode_enabled, settings.selected_preset_id, settings.presets())
    if mode == "custom":
        return TemporaryCustom()
    if mode == "translation":
        return DefaultTranslation()
    return resolve_mode(True, preset_id or DEFAULT_TRANSLATION_PRESET_ID, settings.presets())


def _bad_request(message: str) -> Response:
    error_response = ErrorResponse(
        error=ErrorDetail(message=message, type="invalid_request_error", code=400)
    )
    return Response(
        status_code=400,
        content=error_response.model_dump_json(),
        media_type="application/json",
    )


@router.post("/translate", response_model=None)
async def translate(
    body: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
) -> dict:
    """翻译文本或按预设/自定义指令处理文本。

    :param body: 翻译请求
    :return: ``{"text": ..., "record": {...}}``
    """
    mode = request_mode(service, body.mode, body.preset_id)
    outcome = await service.translate_text(
        body.text,
        mode=mode,
        source_language=body.source_language,
        target_language=body.target_language,
        user_perception=body.user_perception,
        user_instruction=body.user_instruction,
    )
    return {"text": outcome.text, "record": dump_record(outcome.record)}


@router.post("/recognize", response_model=None)
async def recognize(
    body: RecognizeRequest,
    service: TranslationService = Depends(get_translation_service),
) -> dict | Response:
    """识别 Base64 编码的图片。

    :param body: 识别请求
    :return: ``{"text": ..., "record": {...}}``；图片无法解码时返回 400
    """
    try:
        image = base64.b64decode(body.image_base64, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Invalid image payload: length={}", len(body.image_base64))
        return _bad_request("image_base64 is not valid Base64 data")

    mode = request_mode(service, body.mode, body.preset_id)
    outcome = await service.recognize_image(image, body.instruction, mode=mode)
    return {"text": outcome.text, "record": dump_record(outcome.record)}


@router.get("/providers")
async def list_providers() -> dict:
    """列出所有支持的供应商及其默认模型。"""
    data = [
        ProviderInfo(
            name=name.value,
            endpoint=spec.endpoint,
            default_model=spec.default_model,
            default_image_model=spec.default_image_model,
            reasoning_markers=list(spec.adapter.reasoning_markers),
        ).model_dump()
        for name, spec in PROVIDER_SPECS.items()
    ]
    return {"object": "list", "data": data}
