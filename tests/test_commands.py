from __future__ import annotations

import asyncio
import gc

import pytest

from mapper_bus import topics
from mapper_bus.messages import RemoteFailure
from mapper_core.commands import mapper_get_service, mapper_subtree_remove, mapper_wait
from mapper_core.errors import InvalidSubtreeRemoveArg

IFACE = "xyz.openbmc_project.Inventory.Item"


def _run(coro, timeout: float = 2.0):
    async def _bounded():
        return await asyncio.wait_for(coro, timeout)

    return asyncio.run(_bounded())


def test_wait_object_already_present_makes_one_call(mapper) -> None:
    mapper.objects["/foo"] = {"xyz.openbmc_project.Foo": [IFACE]}

    _run(mapper_wait("/foo", mapper.connect))

    assert mapper.calls == [("GetObject", "/foo")]
    assert mapper.subscriptions == []


def test_wait_returns_after_one_interfaces_added_cycle(mapper) -> None:
    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        calls_before = len(mapper.calls)
        mapper.objects["/foo"] = {"xyz.openbmc_project.Foo": [IFACE]}
        mapper.emit(topics.INTERFACES_ADDED, ("/foo", {IFACE: {}}))
        await task
        return calls_before

    calls_before = _run(_scenario())

    assert calls_before == 3
    assert mapper.calls[calls_before:] == [("GetObject", "/foo")]
    assert mapper.connections == 3


def test_wait_returns_after_introspection_complete(mapper) -> None:
    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        mapper.objects["/foo"] = {"xyz.openbmc_project.Foo": [IFACE]}
        mapper.emit(topics.INTROSPECTION_COMPLETE, "xyz.openbmc_project.Foo")
        await task

    _run(_scenario())


def test_wait_keeps_waiting_while_object_absent(mapper) -> None:
    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        mapper.emit(topics.INTERFACES_ADDED, ("/bar", {}))
        await asyncio.sleep(0.05)
        assert not task.done()
        mapper.objects["/foo"] = {"svc": [IFACE]}
        mapper.emit(topics.INTERFACES_ADDED, ("/foo", {}))
        await task

    _run(_scenario())


def test_wait_releases_first_check_connection_before_listening(mapper) -> None:
    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        gc.collect()
        alive = [ref() is not None for ref in mapper.clients]
        mapper.objects["/foo"] = {"svc": [IFACE]}
        mapper.emit(topics.INTERFACES_ADDED)
        await task
        return alive

    assert _run(_scenario()) == [False, True, True]


def test_wait_propagates_hard_error_from_listener(mapper) -> None:
    cause = RemoteFailure("org.freedesktop.DBus.Error.AccessDenied", "denied")

    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        mapper.failure = cause
        mapper.emit(topics.INTERFACES_ADDED)
        await task

    with pytest.raises(RemoteFailure) as info:
        _run(_scenario())
    assert info.value is cause


def test_wait_hard_error_on_first_check_skips_subscriptions(mapper) -> None:
    mapper.failure = RemoteFailure("org.freedesktop.DBus.Error.ServiceUnknown")

    with pytest.raises(RemoteFailure):
        _run(mapper_wait("/foo", mapper.connect))
    assert mapper.subscriptions == []


def test_wait_succeeds_when_notification_stream_ends(mapper) -> None:
    async def _scenario():
        task = asyncio.create_task(mapper_wait("/foo", mapper.connect, poll_interval=0.01))
        await mapper.wait_subscribed(topics.INTERFACES_ADDED, topics.INTROSPECTION_COMPLETE)
        mapper.end_stream(topics.INTROSPECTION_COMPLETE)
        await task

    _run(_scenario())


def test_subtree_remove_returns_after_interfaces_removed(mapper) -> None:
    mapper.subtrees["/ns"] = {"/ns/a": [IFACE]}

    async def _scenario():
        task = asyncio.create_task(mapper_subtree_remove(f"/ns:{IFACE}", mapper.connect))
        await mapper.wait_subscribed(topics.INTERFACES_REMOVED)
        assert not task.done()
        mapper.subtrees["/ns"] = {}
        mapper.emit(topics.INTERFACES_REMOVED, ("/ns/a", [IFACE]))
        await task

    _run(_scenario())
    assert mapper.subscriptions == [topics.INTERFACES_REMOVED]
    assert mapper.calls[-1] == ("GetSubTreePaths", "/ns", topics.DEPTH_UNBOUNDED, (IFACE,))


def test_subtree_remove_missing_namespace_is_already_removed(mapper) -> None:
    _run(mapper_subtree_remove(f"/gone:{IFACE}", mapper.connect))
    assert mapper.subscriptions == []
    assert len(mapper.calls) == 1


def test_subtree_remove_rejects_bad_token_before_bus_io(mapper) -> None:
    with pytest.raises(InvalidSubtreeRemoveArg):
        _run(mapper_subtree_remove("badtoken", mapper.connect))
    assert mapper.connections == 0
    assert mapper.calls == []


def test_get_service_returns_owners(mapper) -> None:
    mapper.objects["/foo"] = {"xyz.openbmc_project.Foo": [IFACE, "org.freedesktop.DBus.Properties"]}
    owners = _run(mapper_get_service("/foo", mapper.connect))
    assert owners == {"xyz.openbmc_project.Foo": [IFACE, "org.freedesktop.DBus.Properties"]}


def test_get_service_propagates_not_found_uncategorized(mapper) -> None:
    with pytest.raises(RemoteFailure) as info:
        _run(mapper_get_service("/missing", mapper.connect))
    assert info.value.error_name == topics.RESOURCE_NOT_FOUND
