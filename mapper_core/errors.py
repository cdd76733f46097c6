from __future__ import annotations

PROG = "mapper"

USAGE = f"""
Usage: {PROG} {{COMMAND}} ...
COMMANDS:
wait         wait for the specified objects to appear on the DBus
subtree-remove
             wait until the specified interface is not present
             in any of the subtrees of the specified namespace
get-service  return the service identifier for input path"""


class MapperInputError(ValueError):
    """Bad command line input, detected before any bus traffic."""

    message = USAGE

    def __str__(self) -> str:
        return self.message


class MissingCommand(MapperInputError):
    pass


class InvalidCommand(MapperInputError):
    def __init__(self, command: str):
        super().__init__(command)
        self.command = command
        self.message = f"invalid command: {command}:\n{USAGE}"


class MissingWaitArg(MapperInputError):
    message = f"Usage: {PROG} wait OBJECTPATH"


class MissingSubtreeRemoveArg(MapperInputError):
    message = f"Usage: {PROG} subtree-remove NAMESPACE:INTERFACE"


class MissingGetServiceArg(MapperInputError):
    message = f"Usage: {PROG} get-service OBJECTPATH"


class InvalidSubtreeRemoveArg(MapperInputError):
    def __init__(self, token: str):
        super().__init__(token)
        self.token = token
        self.message = f"Token ':' was not found in '{token}'"


__all__ = [
    "PROG",
    "USAGE",
    "MapperInputError",
    "MissingCommand",
    "InvalidCommand",
    "MissingWaitArg",
    "MissingSubtreeRemoveArg",
    "MissingGetServiceArg",
    "InvalidSubtreeRemoveArg",
]
