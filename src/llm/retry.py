# src/llm/retry.py — v3
"""Timeout-bounded inference calls with exponential-backoff retry.

Each attempt races the call against a wall-clock deadline. A call that
misses the deadline is abandoned, not cancelled: the task keeps running in
the background and its eventual outcome is discarded.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from nutriguard.core.errors import AnalysisError, ErrorCode, InvocationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Calls past their deadline; asyncio only keeps weak references to tasks.
_ABANDONED: set[asyncio.Future] = set()

# Retryable kinds and the code reported once retries are exhausted.
RETRYABLE_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "connection_reset": ErrorCode.CONNECTION_ERROR,
    "name_resolution": ErrorCode.CONNECTION_ERROR,
    "rate_limit": ErrorCode.RATE_LIMITED,
}

_MESSAGE_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("timeout", ("timeout", "timed out", "etimedout", "deadline exceeded")),
    ("connection_reset", ("econnreset", "connection reset", "connection aborted")),
    ("name_resolution", ("enotfound", "name resolution", "name or service not known")),
    ("rate_limit", ("429", "rate limit", "resource exhausted", "resource_exhausted")),
)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget for one stage."""

    max_retries: int
    base_delay_s: float
    timeout_s: float
    backoff_factor: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Backoff before the retry following 0-based ``attempt``."""
        return self.base_delay_s * (self.backoff_factor ** attempt)


@dataclass
class RetryContext:
    """State of one invocation chain. Lives only inside invoke()."""

    attempt: int
    max_attempts: int
    base_delay_s: float


def classify_error(error: BaseException) -> str | None:
    """Return the retryable kind of ``error``, or None if it is fatal."""
    if isinstance(error, InvocationError):
        return error.retry_kind
    if isinstance(error, AnalysisError):
        return None
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "timeout"
    if isinstance(error, ConnectionResetError):
        return "connection_reset"
    if isinstance(error, socket.gaierror):
        return "name_resolution"

    text = f"{type(error).__name__} {error}".lower()
    for kind, needles in _MESSAGE_PATTERNS:
        if any(n in text for n in needles):
            return kind
    return None


class RetryingInvoker:
    """Run an async callable under a per-attempt timeout with bounded retries."""

    def __init__(
        self,
        policy: RetryPolicy,
        name: str = "inference",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._policy = policy
        self._name = name
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def invoke(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Call ``fn`` until it succeeds, fails fatally, or retries run out.

        Raises:
            InvocationError: Retryable failure after the last attempt, or a
                fatal failure that is not already an AnalysisError.
            AnalysisError: Fatal AnalysisError raised by ``fn``, unchanged.
        """
        ctx = RetryContext(
            attempt=0,
            max_attempts=self._policy.max_retries + 1,
            base_delay_s=self._policy.base_delay_s,
        )

        while True:
            try:
                return await self._attempt(fn)
            except Exception as exc:
                kind = classify_error(exc)
                logger.warning(
                    "%s attempt %d/%d failed (%s): %s",
                    self._name, ctx.attempt + 1, ctx.max_attempts,
                    kind or "fatal", exc,
                )
                if kind is None:
                    if isinstance(exc, AnalysisError):
                        raise
                    raise InvocationError(
                        ErrorCode.INFERENCE_FAILED,
                        f"{self._name} failed: {exc}",
                        attempts=ctx.attempt + 1,
                    ) from exc
                if ctx.attempt + 1 >= ctx.max_attempts:
                    raise self._exhausted(exc, kind, ctx) from exc

                delay = self._policy.delay_for(ctx.attempt)
                logger.info("Retrying %s in %.2fs", self._name, delay)
                await self._sleep(delay)
                ctx.attempt += 1

    async def _attempt(self, fn: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.ensure_future(fn())
        done, _ = await asyncio.wait({task}, timeout=self._policy.timeout_s)
        if not done:
            _ABANDONED.add(task)
            task.add_done_callback(_discard_abandoned)
            raise InvocationError(
                ErrorCode.TIMEOUT,
                f"{self._name} timed out after {self._policy.timeout_s:g}s",
                retry_kind="timeout",
            )
        return task.result()

    def _exhausted(self, exc: Exception, kind: str, ctx: RetryContext) -> InvocationError:
        return InvocationError(
            RETRYABLE_CODES[kind],
            f"{self._name} failed after {ctx.attempt + 1} attempts ({kind}): {exc}",
            retry_kind=kind,
            attempts=ctx.attempt + 1,
        )


def _discard_abandoned(task: asyncio.Future) -> None:
    """Consume the outcome of a call nobody waits for any more."""
    _ABANDONED.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned inference call finished with error: %s", exc)
    else:
        logger.debug("Abandoned inference call finished after its deadline")
