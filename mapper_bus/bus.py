from __future__ import annotations

import logging
from typing import Any, AsyncIterable, AsyncIterator, Awaitable, Callable, Dict, List, Protocol, Sequence

from sdbus import (
    DbusInterfaceCommonAsync,
    DbusObjectManagerInterfaceAsync,
    SdBus,
    dbus_method_async,
    dbus_signal_async,
    sd_bus_open_system,
    sd_bus_open_user,
)
from sdbus.exceptions import SdBusBaseError, SdBusUnmappedMessageError

from . import topics
from .messages import RemoteFailure

logger = logging.getLogger(__name__)


class ObjectMapperInterface(
    DbusInterfaceCommonAsync,
    interface_name=topics.MAPPER_INTERFACE,
):
    @dbus_method_async(
        input_signature="sas",
        result_signature="a{sas}",
        method_name="GetObject",
    )
    async def get_object(self, path: str, interfaces: List[str]) -> Dict[str, List[str]]:
        raise NotImplementedError

    @dbus_method_async(
        input_signature="sias",
        result_signature="as",
        method_name="GetSubTreePaths",
    )
    async def get_sub_tree_paths(
        self, subtree: str, depth: int, interfaces: List[str]
    ) -> List[str]:
        raise NotImplementedError


class ObjectMapperPrivateInterface(
    DbusInterfaceCommonAsync,
    interface_name=topics.MAPPER_PRIVATE_INTERFACE,
):
    @dbus_signal_async(signal_signature="s", signal_name="IntrospectionComplete")
    def introspection_complete(self) -> str:
        raise NotImplementedError


class BusClient(Protocol):
    """What the reconciliation engine needs from a bus connection."""

    async def get_object(self, path: str, interfaces: Sequence[str] = ()) -> Dict[str, List[str]]:
        ...

    async def get_sub_tree_paths(
        self, namespace: str, depth: int, interfaces: Sequence[str]
    ) -> List[str]:
        ...

    def subscribe(self, signal_kind: str) -> AsyncIterator[Any]:
        ...


Connector = Callable[[], BusClient]


def _remote_failure_from(exc: SdBusBaseError) -> RemoteFailure | None:
    if isinstance(exc, SdBusUnmappedMessageError):
        name = str(exc.args[0]) if exc.args else ""
        detail = str(exc.args[1]) if len(exc.args) > 1 else None
        return RemoteFailure(name, detail)
    name = getattr(type(exc), "dbus_error_name", None)
    if not name:
        return None
    return RemoteFailure(str(name), str(exc.args[0]) if exc.args else None)


async def _translated(call: Awaitable[Any]) -> Any:
    """Await a mapper call, turning D-Bus error replies into RemoteFailure."""
    try:
        return await call
    except SdBusBaseError as exc:
        failure = _remote_failure_from(exc)
        if failure is None:
            raise
        raise failure from exc


class SdBusClient:
    """Object mapper client over a single sdbus connection."""

    def __init__(self, bus: SdBus):
        self._bus = bus
        self._mapper = ObjectMapperInterface.new_proxy(
            topics.MAPPER_SERVICE, topics.MAPPER_PATH, bus
        )

    @classmethod
    def open(cls, kind: str = topics.BUS_SYSTEM) -> "SdBusClient":
        if kind == topics.BUS_SYSTEM:
            bus = sd_bus_open_system()
        elif kind == topics.BUS_SESSION:
            bus = sd_bus_open_user()
        else:
            raise ValueError(f"unknown bus kind: {kind}")
        logger.debug("opened %s bus connection", kind)
        return cls(bus)

    async def get_object(self, path: str, interfaces: Sequence[str] = ()) -> Dict[str, List[str]]:
        return await _translated(self._mapper.get_object(path, list(interfaces)))

    async def get_sub_tree_paths(
        self, namespace: str, depth: int, interfaces: Sequence[str]
    ) -> List[str]:
        return await _translated(
            self._mapper.get_sub_tree_paths(namespace, depth, list(interfaces))
        )

    def subscribe(self, signal_kind: str) -> AsyncIterator[Any]:
        # ObjectManager signals may come from any sender and any path.
        if signal_kind == topics.INTERFACES_ADDED:
            return _relay(
                DbusObjectManagerInterfaceAsync.interfaces_added.catch_anywhere(None, self._bus)
            )
        if signal_kind == topics.INTERFACES_REMOVED:
            return _relay(
                DbusObjectManagerInterfaceAsync.interfaces_removed.catch_anywhere(None, self._bus)
            )
        if signal_kind == topics.INTROSPECTION_COMPLETE:
            proxy = ObjectMapperPrivateInterface.new_proxy(
                topics.MAPPER_SERVICE, topics.MAPPER_PATH, self._bus
            )
            return _relay(proxy.introspection_complete)
        raise ValueError(f"unknown signal kind: {signal_kind}")


async def _relay(source: AsyncIterable[Any]) -> AsyncIterator[Any]:
    async for event in source:
        yield event


def open_connector(kind: str = topics.BUS_SYSTEM) -> Connector:
    """Return a factory opening a fresh connection on every call."""

    def _connect() -> BusClient:
        return SdBusClient.open(kind)

    return _connect
