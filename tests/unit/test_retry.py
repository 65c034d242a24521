"""重试策略单元测试。

退避时长通过替换 ``asyncio.sleep`` 记录，测试不真正等待。
"""

import pytest

from yisi_svc.exceptions import (
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    UnauthorizedError,
    ValidationFailedError,
    VendorError,
)
from yisi_svc.services.retry import RetryPolicy, is_retryable


class FlakyOperation:
    """前 ``failures`` 次调用抛出给定异常，之后返回 ``result``。"""

    def __init__(self, error: Exception, failures: int, result: str = "ok"):
        self.error = error
        self.failures = failures
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


def positive(delays: list[float]) -> list[float]:
    return [d for d in delays if d > 0]


@pytest.mark.unit
class TestIsRetryable:
    """is_retryable 函数测试。"""

    def test_transient_errors(self):
        assert is_retryable(NetworkError("timeout"))
        assert is_retryable(VendorError(503, "busy"))

    def test_permanent_errors(self):
        assert not is_retryable(UnauthorizedError(401, "bad key"))
        assert not is_retryable(MissingCredentialError("OpenAI"))
        assert not is_retryable(MalformedResponseError("no keys"))
        assert not is_retryable(ValidationFailedError("empty"))

    def test_foreign_exception_not_retried(self):
        assert not is_retryable(RuntimeError("boom"))


@pytest.mark.unit
class TestRetryPolicy:
    """RetryPolicy 测试。"""

    def test_delay_schedule(self):
        policy = RetryPolicy(attempts=5, wait_initial=1.0, wait_max=3.0)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(attempts=0)

    @pytest.mark.asyncio
    async def test_success_first_try(self, sleep_calls):
        """首次成功不等待。"""
        op = FlakyOperation(NetworkError("x"), failures=0)
        assert await RetryPolicy().run(op) == "ok"
        assert op.calls == 1
        assert positive(sleep_calls) == []

    @pytest.mark.asyncio
    async def test_network_error_then_success(self, sleep_calls):
        """两次网络错误后成功：共 3 次尝试，依次等待 1s、2s。"""
        op = FlakyOperation(NetworkError("connection reset"), failures=2, result="你好")
        assert await RetryPolicy(attempts=3).run(op) == "你好"
        assert op.calls == 3
        assert positive(sleep_calls) == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_vendor_error_exhausts_attempts(self, sleep_calls):
        """重试耗尽后抛出最后一次的错误，保留原始响应体。"""
        op = FlakyOperation(VendorError(503, "overloaded", "OpenAI"), failures=10)
        with pytest.raises(VendorError) as exc_info:
            await RetryPolicy(attempts=3).run(op)

        assert op.calls == 3
        assert exc_info.value.body == "overloaded"
        assert positive(sleep_calls) == [1.0, 2.0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            UnauthorizedError(401, "invalid api key", "OpenAI"),
            MissingCredentialError("Gemini"),
            MalformedResponseError("no usable keys", ["foo"]),
            ValidationFailedError("Empty translation result"),
        ],
    )
    async def test_permanent_errors_not_retried(self, sleep_calls, error):
        """非瞬时错误只尝试一次，且不等待。"""
        op = FlakyOperation(error, failures=10)
        with pytest.raises(type(error)):
            await RetryPolicy(attempts=3).run(op)

        assert op.calls == 1
        assert positive(sleep_calls) == []

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self, sleep_calls):
        op = FlakyOperation(NetworkError("down"), failures=10)
        with pytest.raises(NetworkError):
            await RetryPolicy(attempts=1).run(op)
        assert op.calls == 1
        assert positive(sleep_calls) == []
