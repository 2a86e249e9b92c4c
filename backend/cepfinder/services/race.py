"""Race several asynchronous lookups against a shared deadline.

Each operation resolves to a :class:`Success` or a :class:`Failure`. The first
success observed wins; when every operation fails before the deadline the
failures are returned together; otherwise the race times out. Operations still
running when the race ends are cancelled and their results are never reported.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Mapping, TypeVar

from cepfinder.core.logging import get_logger
from cepfinder.domain.results import (
    AllFailed,
    RaceOutcome,
    Resolved,
    Result,
    Success,
    TimedOut,
)


T = TypeVar("T")
E = TypeVar("E")

Operation = Callable[[], Awaitable[Result[T, E]]]


_logger = get_logger(__name__)


async def race_first_success(
    operations: Mapping[str, Operation[T, E]],
    timeout: float,
) -> RaceOutcome[T, E]:
    """Run ``operations`` concurrently and return the first success.

    Args:
        operations: Named zero-argument coroutine factories, one per contender.
            Iteration order decides the order of errors in ``AllFailed``.
        timeout: Overall race deadline in seconds.

    Returns:
        ``Resolved`` with the winning value and its name, ``AllFailed`` with one
        error per operation, or ``TimedOut``.
    """

    if timeout <= 0:
        raise ValueError("Race timeout must be positive")
    if not operations:
        return AllFailed([])

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    names: dict[asyncio.Task[Result[T, E]], str] = {}
    for name, operation in operations.items():
        task = asyncio.ensure_future(operation())
        task.add_done_callback(_consume_result)
        names[task] = name

    errors: dict[str, E] = {}
    pending: set[asyncio.Task[Result[T, E]]] = set(names)
    try:
        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                result = task.result()
                if isinstance(result, Success):
                    return Resolved(result.value, names[task])
                errors[names[task]] = result.error

        if pending:
            return TimedOut(timeout)
        return AllFailed([errors[name] for name in operations])
    finally:
        if pending:
            _logger.debug(
                "Abandoning pending lookups",
                pending=sorted(names[task] for task in pending),
            )
        for task in pending:
            task.cancel()


def _consume_result(task: asyncio.Future) -> None:
    # Retrieve exceptions of abandoned tasks so asyncio does not report them.
    if not task.cancelled():
        task.exception()
