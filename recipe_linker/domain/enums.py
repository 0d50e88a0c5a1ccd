"""Domain enums for the recipe linker."""
from enum import Enum


class DependencyDirection(str, Enum):
    """Whether a recipe consumes from (input) or produces to (output) a target."""
    INPUT = "input"
    OUTPUT = "output"


class BlockKind(str, Enum):
    """Zendesk resource kind a recipe block operates on."""
    TICKET = "ticket"
    USER = "user"
    ORGANIZATION = "organization"
    OTHER = "other"
