"""Yisi Service - 多供应商 AI 翻译与图片识别服务。

本包提供了一个FastAPI应用，通过可互换的 AI 供应商（OpenAI、Gemini、智谱、
DeepSeek、MiniMax）完成文本翻译和图片识别，支持运行时切换供应商、模型
和深度思考能力。

主要模块：
    - app: FastAPI应用实例和配置
    - routes: API路由定义
    - translation_service: 编排器（供应商选择、推理策略、重试、响应处理）
    - providers: 各供应商适配器
    - services: 重试、模式解析、响应提取/解析/校验
    - config: 应用配置管理
    - logger: 结构化日志配置
    - models: 数据模型定义
"""

__version__ = "0.1.0"
