"""Yisi Service 测试套件。

测试分层：
- unit/: 单元测试 - 快速、隔离，HTTP 使用 MockTransport
- integration/: 集成测试 - 编排器与 HTTP 接口的完整流程

使用方法：
    pytest                          # 运行所有测试
    pytest tests/unit/ -m unit      # 仅单元测试
    pytest -m integration           # 仅集成测试
"""
