"""Recipe block shapes and the schema guard applied at the boundary.

Recipe code is untyped JSON. A dict is only treated as a Zendesk block once
the guard has accepted it and narrowed it to a ZendeskBlock.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, StringConstraints, ValidationError

from recipe_linker.domain.constants import TRIGGER_KEYWORD
from recipe_linker.domain.enums import DependencyDirection

NonEmptyStr = Annotated[StrictStr, StringConstraints(min_length=1)]


class ZendeskBlock(BaseModel):
    """One trigger or action step of a recipe targeting Zendesk."""

    model_config = ConfigDict(extra='allow', frozen=True, populate_by_name=True)

    keyword: NonEmptyStr
    as_: NonEmptyStr = Field(alias='as')
    provider: NonEmptyStr
    name: NonEmptyStr
    input: dict[str, Any]


def parse_zendesk_block(value: Any) -> ZendeskBlock | None:
    """Accept and narrow a raw value to a ZendeskBlock, or reject it.

    Returns:
        The validated block, or None if the value does not have the block shape.
    """
    if not isinstance(value, dict):
        return None
    try:
        return ZendeskBlock.model_validate(value)
    except ValidationError:
        return None


def get_block_dependency_direction(block: ZendeskBlock) -> DependencyDirection:
    """Triggers read from the service; actions write to it."""
    if block.keyword == TRIGGER_KEYWORD:
        return DependencyDirection.INPUT
    return DependencyDirection.OUTPUT
