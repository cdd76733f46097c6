"""Object mapper bus client: D-Bus names, call outcomes and the sdbus transport."""

from . import topics
from .messages import CallOutcome, RemoteFailure, capture

__all__ = ["CallOutcome", "RemoteFailure", "capture", "topics"]
