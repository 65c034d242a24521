#!/usr/bin/env python3
"""Yisi 翻译服务启动入口。

启动前先检查文本与图片场景的供应商凭证，再交给 Granian 运行 ``yisi_svc.asgi:app``。

Example::

    python main.py --port 8080 --workers 2
    python main.py --check          # 只做凭证检查，不启动
    python main.py --allow-missing  # 缺少凭证时仍然启动
"""

import argparse
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from yisi_svc.config import AppConfig, get_settings
from yisi_svc.logger import configure_logging, get_logger, mask_secret
from yisi_svc.models import APIUsage

logger = get_logger(__name__)


def check_credentials(settings: AppConfig) -> list[str]:
    """返回缺少凭证的场景列表，例如 ``["image:Gemini"]``。"""
    missing = []
    for usage in (APIUsage.TEXT, APIUsage.IMAGE):
        provider = settings.provider_for(usage)
        credential = settings.credential_for(provider, usage)
        logger.info(
            "Preflight: usage={}, provider={}, model={}, api_key={}",
            usage.value,
            provider.value,
            settings.model_for(provider, usage),
            mask_secret(credential),
        )
        if not credential:
            missing.append(f"{usage.value}:{provider.value}")
    return missing


def granian_command(args: argparse.Namespace) -> list[str]:
    cmd = [
        "granian",
        "--interface", "asgi",
        "--host", args.host,
        "--port", str(args.port),
        "--workers", str(args.workers),
        "--log-level", args.log_level,
    ]
    if args.reload:
        cmd.append("--reload")
    cmd.append("yisi_svc.asgi:app")
    return cmd


def build_parser(settings: AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="启动 Yisi 翻译服务")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--workers", type=int, default=settings.workers)
    parser.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug"],
    )
    parser.add_argument("--reload", action="store_true", help="开发模式热重载")
    parser.add_argument("--check", action="store_true", help="只检查凭证后退出")
    parser.add_argument("--allow-missing", action="store_true", help="缺少凭证时仍然启动")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level.upper(), verbose=settings.verbose_logging)

    missing = check_credentials(settings)
    if missing:
        logger.warning("Missing credentials: {}", ", ".join(missing))
    if args.check:
        return 1 if missing else 0
    if missing and not args.allow_missing:
        logger.error("Refusing to start without credentials, pass --allow-missing to override")
        return 1

    cmd = granian_command(args)
    logger.info("Starting Granian: {}", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Granian exited: returncode={}", e.returncode)
        return e.returncode
    return 0


if __name__ == "__main__":
    sys.exit(main())
