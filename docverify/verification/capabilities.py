from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from docverify.verification.exceptions import CapabilityTimeoutError

T = TypeVar("T")


class CapabilityRunner:
    """Invokes external capabilities with a bounded wait.

    A call that exceeds the budget raises CapabilityTimeoutError; the worker
    thread is abandoned, not killed, so adapters should also enforce their
    own timeouts where the underlying library allows it.
    """

    def __init__(self, timeout_seconds: float, max_workers: int = 8) -> None:
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="docverify-capability",
        )

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def call(self, name: str, fn: Callable[..., T], *args: object) -> T:
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError as exc:
            future.cancel()
            raise CapabilityTimeoutError(
                f"{name} timed out after {self._timeout_seconds}s"
            ) from exc

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
