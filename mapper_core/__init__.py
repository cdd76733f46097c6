"""Object presence reconciliation: condition checks, listeners, race and commands."""

from .commands import mapper_get_service, mapper_subtree_remove, mapper_wait
from .conditions import ConditionResult, ConditionState, SubtreeTarget, parse_namespace_interface
from .race import ListenerOutcome, RaceResult, race

__all__ = [
    "mapper_wait",
    "mapper_subtree_remove",
    "mapper_get_service",
    "ConditionResult",
    "ConditionState",
    "SubtreeTarget",
    "parse_namespace_interface",
    "ListenerOutcome",
    "RaceResult",
    "race",
]
