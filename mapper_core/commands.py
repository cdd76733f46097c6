from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List, Union

from mapper_bus import topics
from mapper_bus.bus import BusClient, Connector

from .conditions import (
    ConditionResult,
    ConditionState,
    SubtreeTarget,
    parse_namespace_interface,
    probe_object,
    probe_subtree_removed,
)
from .listener import signal_listener
from .race import DEFAULT_POLL_INTERVAL, race

logger = logging.getLogger(__name__)


async def _check_once(
    connect: Connector, probe: Callable[[BusClient], Awaitable[ConditionResult]]
) -> ConditionResult:
    # The connection is released on return, before any listener opens its own.
    client = connect()
    return await probe(client)


async def mapper_wait(
    path: str,
    connect: Connector,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    """Block until the object mapper knows about ``path``.

    Raises the original bus error if the mapper answers with anything other
    than "resource not found".
    """

    def _probe(client: BusClient):
        return probe_object(client, path)

    result = await _check_once(connect, _probe)
    if result.satisfied:
        return
    if result.state is ConditionState.HARD_ERROR:
        raise result.cause

    logger.info("waiting for %s", path)
    outcome = await race(
        {
            topics.INTERFACES_ADDED: signal_listener(connect, topics.INTERFACES_ADDED, _probe),
            topics.INTROSPECTION_COMPLETE: signal_listener(
                connect, topics.INTROSPECTION_COMPLETE, _probe
            ),
        },
        poll_interval=poll_interval,
    )
    outcome.raise_for_error()


async def mapper_subtree_remove(
    target: Union[str, SubtreeTarget],
    connect: Connector,
) -> None:
    """Block until no object under the namespace implements the interface."""
    if isinstance(target, str):
        target = parse_namespace_interface(target)

    def _probe(client: BusClient):
        return probe_subtree_removed(client, target)

    result = await _check_once(connect, _probe)
    if result.satisfied:
        return
    if result.state is ConditionState.HARD_ERROR:
        raise result.cause

    logger.info("waiting for %s to leave %s", target.interface, target.namespace)
    await signal_listener(connect, topics.INTERFACES_REMOVED, _probe)()


async def mapper_get_service(path: str, connect: Connector) -> Dict[str, List[str]]:
    """Return ``{service: [interfaces]}`` for the services owning ``path``."""
    client = connect()
    return await client.get_object(path, ())
