"""重试与退避模块。

使用 stamina 对单次供应商调用做指数退避重试。是否重试只看异常的
:class:`~yisi_svc.exceptions.ErrorKind` 标签：

- ``NETWORK`` / ``VENDOR``：瞬时错误，重试
- 其余类别（缺少凭证、凭证被拒、响应格式错误、校验失败）：立即抛出，不等待

第 n 次与第 n+1 次尝试之间等待 ``wait_initial * wait_exp_base ** (n - 1)`` 秒。
"""

from typing import Awaitable, Callable, TypeVar

import stamina

from ..exceptions import YisiError
from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_retryable(exc: Exception) -> bool:
    """判断异常是否属于可重试的瞬时错误。"""
    return isinstance(exc, YisiError) and exc.retryable


class RetryPolicy:
    """单请求的顺序重试策略。

    :param attempts: 最大尝试次数（含首次）
    :param wait_initial: 首次退避时长（秒）
    :param wait_exp_base: 退避指数底数
    :param wait_max: 单次退避上限（秒）

    .. code-block:: python

       policy = RetryPolicy(attempts=3)
       text = await policy.run(lambda: provider.send(messages, config))
       # 失败时依次等待 1s、2s
    """

    def __init__(
        self,
        attempts: int = 3,
        wait_initial: float = 1.0,
        wait_exp_base: float = 2.0,
        wait_max: float = 60.0,
    ):
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self.attempts = attempts
        self.wait_initial = wait_initial
        self.wait_exp_base = wait_exp_base
        self.wait_max = wait_max

    def delay_for(self, attempt: int) -> float:
        """第 ``attempt`` 次失败后的等待时长（秒）。"""
        return min(self.wait_initial * self.wait_exp_base ** (attempt - 1), self.wait_max)

    async def run(self, operation: Callable[[], Awaitable[T]], name: str = "provider.send") -> T:
        """执行操作，按策略重试瞬时错误。

        :param operation: 无参的异步可调用对象，每次尝试都会重新调用
        :param name: 日志中的操作名称
        :return: 操作的返回值
        :raises YisiError: 非瞬时错误立即抛出；重试耗尽时抛出最后一次的错误
        """
        async for attempt in stamina.retry_context(
            on=is_retryable,
            attempts=self.attempts,
            wait_initial=self.wait_initial,
            wait_exp_base=self.wait_exp_base,
            wait_max=self.wait_max,
            wait_jitter=0.0,
            timeout=None,
        ):
            with attempt:
                if attempt.num > 1:
                    logger.warning(
                        "Retrying {}: attempt={}/{}, waited={}s",
                        name,
                        attempt.num,
                        self.attempts,
                        self.delay_for(attempt.num - 1),
                    )
                try:
                    return await operation()
                except YisiError as e:
                    if e.retryable and attempt.num < self.attempts:
                        logger.warning(
                            "{} failed: error_type={}, error={}, next_wait={}s",
                            name,
                            e.error_type,
                            e.message[:200],
                            self.delay_for(attempt.num),
                        )
                    raise
        raise AssertionError("retry_context exited without result")
