from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Mapping, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0

ListenerFactory = Callable[[], Awaitable[None]]

_ABANDONED: Set[asyncio.Task] = set()


@dataclass(frozen=True)
class ListenerOutcome:
    """Terminal value of a listener task; ``error is None`` means it succeeded."""

    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_task(cls, task: asyncio.Task) -> "ListenerOutcome":
        if task.cancelled():
            return cls(asyncio.CancelledError())
        return cls(task.exception())

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class RaceResult:
    winner: str
    outcome: ListenerOutcome

    def raise_for_error(self) -> None:
        self.outcome.raise_for_error()


def _discard(task: asyncio.Task) -> None:
    _ABANDONED.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.debug("abandoned %s finished with %r", task.get_name(), task.exception())


def _abandon(tasks: Dict[str, asyncio.Task]) -> None:
    for task in tasks.values():
        if task.done():
            _discard(task)
            continue
        _ABANDONED.add(task)
        task.add_done_callback(_discard)


async def race(
    listeners: Mapping[str, ListenerFactory],
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> RaceResult:
    """Run all listeners concurrently and return the first one to finish.

    The loop wakes at least every ``poll_interval`` seconds. When several
    listeners are found finished in the same wake-up the first one in
    ``listeners`` order wins. The others keep running unobserved.
    """
    if not listeners:
        raise ValueError("race needs at least one listener")

    tasks: Dict[str, asyncio.Task] = {
        name: asyncio.create_task(factory(), name=f"mapper-{name}")
        for name, factory in listeners.items()
    }
    while True:
        await asyncio.wait(
            tasks.values(), timeout=poll_interval, return_when=asyncio.FIRST_COMPLETED
        )
        for name, task in tasks.items():
            if not task.done():
                continue
            outcome = ListenerOutcome.from_task(task)
            losers = {other: t for other, t in tasks.items() if other != name}
            _abandon(losers)
            logger.info("race won by %s (ok=%s)", name, outcome.ok)
            return RaceResult(winner=name, outcome=outcome)
        logger.debug("still waiting on %s", ", ".join(tasks))
