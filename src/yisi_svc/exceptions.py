"""自定义异常模块。

本模块定义翻译/识别请求生命周期中的错误类型。每个异常都带有一个
:class:`ErrorKind` 标签，重试策略只依据该标签判断是否重试，
原始消息仅作为载荷保留。
"""

from enum import Enum


class ErrorKind(str, Enum):
    """错误类别标签。"""

    MISSING_CREDENTIAL = "missing_credential"
    NETWORK = "network_error"
    VENDOR = "vendor_error"
    UNAUTHORIZED = "unauthorized"
    MALFORMED_RESPONSE = "malformed_response"
    VALIDATION_FAILED = "validation_failed"


RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.VENDOR})


class YisiError(Exception):
    """所有业务错误的基类。

    :param message: 面向调用方的错误信息
    :param kind: 错误类别标签
    :param status_code: 映射到 HTTP 接口时使用的状态码
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: int = 500):
        self.message = message
        self.kind = kind
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """是否属于可重试的瞬时错误。"""
        return self.kind in RETRYABLE_KINDS

    @property
    def error_type(self) -> str:
        return self.kind.value


class MissingCredentialError(YisiError):
    """未配置供应商 API Key。不重试，直接提示用户去设置。"""

    def __init__(self, provider: str, usage: str = "text"):
        self.provider = provider
        suffix = " for image recognition" if usage == "image" else ""
        super().__init__(
            f"Please set your {provider} API Key in Settings{suffix}.",
            ErrorKind.MISSING_CREDENTIAL,
            status_code=400,
        )


class NetworkError(YisiError):
    """连接失败、超时等传输层错误。"""

    def __init__(self, message: str, provider: str = ""):
        self.provider = provider
        super().__init__(message, ErrorKind.NETWORK, status_code=502)


class VendorError(YisiError):
    """供应商返回非 2xx 响应。

    :param status: 上游 HTTP 状态码
    :param body: 上游原始响应体，用于排查
    :param provider: 供应商名称
    """

    def __init__(
        self,
        status: int,
        body: str,
        provider: str = "",
        kind: ErrorKind = ErrorKind.VENDOR,
    ):
        self.status = status
        self.body = body
        self.provider = provider
        prefix = f"{provider} HTTP {status}" if provider else f"HTTP {status}"
        super().__init__(f"{prefix}: {body}", kind, status_code=502)


class UnauthorizedError(VendorError):
    """上游拒绝凭证（401/403）。凭证问题不会因重试而恢复。"""

    def __init__(self, status: int, body: str, provider: str = ""):
        super().__init__(status, body, provider, kind=ErrorKind.UNAUTHORIZED)
        self.status_code = 401


class MalformedResponseError(YisiError):
    """响应结构不符合约定（找不到文本字段或结果键）。

    :param message: 错误描述
    :param available_keys: 响应中实际出现的键，便于诊断
    """

    def __init__(self, message: str, available_keys: list[str] | None = None):
        self.available_keys = list(available_keys or [])
        super().__init__(message, ErrorKind.MALFORMED_RESPONSE, status_code=502)


class ValidationFailedError(YisiError):
    """模型遵守了格式但给出了不可接受的结果。"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason, ErrorKind.VALIDATION_FAILED, status_code=422)
