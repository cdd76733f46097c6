from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Optional


class RemoteFailure(Exception):
    """A D-Bus method call answered with an error reply."""

    def __init__(self, error_name: str, detail: Optional[str] = None):
        super().__init__(error_name, detail)
        self.error_name = error_name
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.error_name}: {self.detail}"
        return self.error_name


@dataclass(slots=True)
class CallOutcome:
    """Result of one RPC call: either a value or the exception it raised."""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def capture(call: Awaitable[Any]) -> CallOutcome:
    """Await ``call`` and fold its value or exception into a CallOutcome."""
    try:
        value = await call
    except Exception as exc:
        return CallOutcome(error=exc)
    return CallOutcome(value=value)
