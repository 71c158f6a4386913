import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, ParamSpec, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .platform import TransientPlatformError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    プラットフォームへのコマンドのリトライ方針
    TransientPlatformErrorのみリトライし、最後の例外はそのまま再送出する
    """

    attempts: int = 3
    base_wait: float = 1.0
    max_wait: float = 10.0

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1: {self.attempts}")
        if self.base_wait < 0 or self.max_wait < 0:
            raise ValueError("wait must not be negative")

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.base_wait, max=self.max_wait),
            retry=retry_if_exception_type(TransientPlatformError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def call(
        self, func: Callable[P, Awaitable[T]], *args: P.args, **kwargs: P.kwargs
    ) -> T:
        return await self.retrying()(func, *args, **kwargs)
