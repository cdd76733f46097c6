"""D-Bus names used when talking to the object mapper."""

# Object mapper service
MAPPER_SERVICE = "xyz.openbmc_project.ObjectMapper"
MAPPER_PATH = "/xyz/openbmc_project/object_mapper"
MAPPER_INTERFACE = "xyz.openbmc_project.ObjectMapper"
MAPPER_PRIVATE_INTERFACE = "xyz.openbmc_project.ObjectMapper.Private"

# Errors
RESOURCE_NOT_FOUND = "xyz.openbmc_project.Common.Error.ResourceNotFound"

# Broadcast signal kinds
INTERFACES_ADDED = "interfaces-added"
INTERFACES_REMOVED = "interfaces-removed"
INTROSPECTION_COMPLETE = "introspection-complete"

SIGNAL_KINDS = (INTERFACES_ADDED, INTERFACES_REMOVED, INTROSPECTION_COMPLETE)

# GetSubTreePaths depth meaning "no limit"
DEPTH_UNBOUNDED = 0

# Bus kinds
BUS_SYSTEM = "system"
BUS_SESSION = "session"

__all__ = [
    "MAPPER_SERVICE",
    "MAPPER_PATH",
    "MAPPER_INTERFACE",
    "MAPPER_PRIVATE_INTERFACE",
    "RESOURCE_NOT_FOUND",
    "INTERFACES_ADDED",
    "INTERFACES_REMOVED",
    "INTROSPECTION_COMPLETE",
    "SIGNAL_KINDS",
    "DEPTH_UNBOUNDED",
    "BUS_SYSTEM",
    "BUS_SESSION",
]
