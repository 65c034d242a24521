"""提示词模式解析模块。

根据预设设置决定本次请求的 :data:`~yisi_svc.models.Mode`，并按模式选择提示词路径。
"""

from typing import Iterable, Optional

from ..config import DEFAULT_TRANSLATION_PRESET_ID
from ..logger import get_logger
from ..models import DefaultTranslation, Mode, PromptPreset, TemporaryCustom, UserPreset
from ..prompts import PromptBuilder

logger = get_logger(__name__)


def resolve_mode(
    preset_mode_enabled: bool,
    selected_preset_id: str,
    presets: Iterable[PromptPreset],
) -> Mode:
    """解析当前提示词模式。

    :param preset_mode_enabled: 预设模式开关
    :param selected_preset_id: 选中的预设 ID
    :param presets: 已保存的预设
    :return: 预设关闭时为 :class:`TemporaryCustom`；选中默认翻译或 ID 已失效时为
        :class:`DefaultTranslation`；否则为对应的 :class:`UserPreset`
    """
    if not preset_mode_enabled:
        return TemporaryCustom()

    if selected_preset_id == DEFAULT_TRANSLATION_PRESET_ID:
        return DefaultTranslation()

    for preset in presets:
        if preset.id == selected_preset_id:
            return UserPreset(preset=preset)

    logger.warning("Selected preset not found, falling back to translation: preset_id={}", selected_preset_id)
    return DefaultTranslation()


def build_prompts(
    mode: Mode,
    prompt_builder: PromptBuilder,
    text: str,
    source_language: str,
    target_language: str,
    user_perception: Optional[str] = None,
    user_instruction: Optional[str] = None,
    enable_cot: bool = False,
) -> tuple[str, str]:
    """按模式生成 ``(system, user)`` 提示词。

    ``enable_cot`` 只对默认翻译模式生效；预设与自定义模式的提示词由用户掌控。
    """
    if isinstance(mode, TemporaryCustom):
        system = prompt_builder.custom_prompt(user_perception, user_instruction)
    elif isinstance(mode, UserPreset):
        system = prompt_builder.preset_prompt(mode.preset)
    else:
        system = prompt_builder.translation_prompt(enable_cot=enable_cot)

    user = prompt_builder.user_prompt(text, source_language, target_language)
    return system, user
