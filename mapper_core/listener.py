from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from mapper_bus.bus import BusClient, Connector

from .conditions import ConditionResult, ConditionState

logger = logging.getLogger(__name__)

Check = Callable[[], Awaitable[ConditionResult]]
Subscribe = Callable[[], AsyncIterator[Any]]


async def listen(subscribe: Subscribe, check: Check, *, name: str = "listener") -> None:
    """Re-run ``check`` on every notification until it is satisfied.

    Returns when the condition holds or the notification stream ends; raises
    the checker's cause on a hard error. ``subscribe`` is only called when the
    first check does not already pass.
    """
    if await _evaluate(check, name):
        return
    async for _event in subscribe():
        logger.debug("%s: notification received", name)
        if await _evaluate(check, name):
            return
    logger.info("%s: notification stream ended", name)


async def _evaluate(check: Check, name: str) -> bool:
    result = await check()
    if result.state is ConditionState.HARD_ERROR:
        logger.debug("%s: hard error: %s", name, result.cause)
        raise result.cause
    if result.satisfied:
        logger.debug("%s: condition satisfied", name)
        return True
    return False


def signal_listener(
    connect: Connector,
    signal_kind: str,
    probe: Callable[[BusClient], Awaitable[ConditionResult]],
) -> Callable[[], Awaitable[None]]:
    """Listener coroutine factory; each run opens its own bus connection."""

    async def _run() -> None:
        client = connect()
        await listen(
            lambda: client.subscribe(signal_kind),
            lambda: probe(client),
            name=signal_kind,
        )

    return _run
