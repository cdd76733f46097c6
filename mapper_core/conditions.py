"""Classify object mapper replies into satisfied / not yet / hard error."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mapper_bus import topics
from mapper_bus.bus import BusClient
from mapper_bus.messages import CallOutcome, RemoteFailure, capture

from .errors import InvalidSubtreeRemoveArg

logger = logging.getLogger(__name__)


class ConditionState(str, Enum):
    SATISFIED = "satisfied"
    NOT_YET_SATISFIED = "not_yet_satisfied"
    HARD_ERROR = "hard_error"


class FailureKind(str, Enum):
    EXPECTED_ABSENCE = "expected_absence"
    OTHER = "other"


@dataclass(frozen=True)
class ConditionResult:
    state: ConditionState
    cause: Optional[BaseException] = None

    @property
    def satisfied(self) -> bool:
        return self.state is ConditionState.SATISFIED


SATISFIED = ConditionResult(ConditionState.SATISFIED)
NOT_YET_SATISFIED = ConditionResult(ConditionState.NOT_YET_SATISFIED)


def _hard_error(cause: BaseException) -> ConditionResult:
    return ConditionResult(ConditionState.HARD_ERROR, cause)


@dataclass(frozen=True)
class SubtreeTarget:
    namespace: str
    interface: str


def parse_namespace_interface(token: str) -> SubtreeTarget:
    """Split ``NAMESPACE:INTERFACE`` on its first colon."""
    namespace, sep, interface = token.partition(":")
    if not sep:
        raise InvalidSubtreeRemoveArg(token)
    return SubtreeTarget(namespace=namespace, interface=interface)


def classify_failure(error: BaseException) -> FailureKind:
    if isinstance(error, RemoteFailure) and error.error_name == topics.RESOURCE_NOT_FOUND:
        return FailureKind.EXPECTED_ABSENCE
    return FailureKind.OTHER


def check_object(outcome: CallOutcome) -> ConditionResult:
    """GetObject reply -> the object exists, is still missing, or the call failed."""
    if outcome.ok:
        return SATISFIED
    if classify_failure(outcome.error) is FailureKind.EXPECTED_ABSENCE:
        return NOT_YET_SATISFIED
    return _hard_error(outcome.error)


def check_subtree_removed(outcome: CallOutcome) -> ConditionResult:
    """GetSubTreePaths reply -> the interface is gone from the subtree or not.

    A missing namespace counts as removed, same as an empty path list.
    """
    if outcome.ok:
        if outcome.value:
            return NOT_YET_SATISFIED
        return SATISFIED
    if classify_failure(outcome.error) is FailureKind.EXPECTED_ABSENCE:
        return SATISFIED
    return _hard_error(outcome.error)


async def probe_object(client: BusClient, path: str) -> ConditionResult:
    result = check_object(await capture(client.get_object(path, ())))
    logger.debug("object %s: %s", path, result.state.value)
    return result


async def probe_subtree_removed(client: BusClient, target: SubtreeTarget) -> ConditionResult:
    outcome = await capture(
        client.get_sub_tree_paths(target.namespace, topics.DEPTH_UNBOUNDED, [target.interface])
    )
    result = check_subtree_removed(outcome)
    logger.debug(
        "interface %s under %s: %s", target.interface, target.namespace, result.state.value
    )
    return result


__all__ = [
    "ConditionState",
    "ConditionResult",
    "FailureKind",
    "SubtreeTarget",
    "SATISFIED",
    "NOT_YET_SATISFIED",
    "parse_namespace_interface",
    "classify_failure",
    "check_object",
    "check_subtree_removed",
    "probe_object",
    "probe_subtree_removed",
]
