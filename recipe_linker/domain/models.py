"""Shared data models used across linker modules."""

from dataclasses import dataclass, field
from typing import Any

from recipe_linker.domain.enums import DependencyDirection

ELEM_ID_SEPARATOR = '.'


class InvalidInstanceError(Exception):
    """A configuration instance that is not a valid record."""
    pass


@dataclass(frozen=True)
class ElemID:
    """Dot-addressable identifier of a type, an instance, or a path inside one.

    Examples:
        zendesk.ticket_field                         → type
        zendesk.ticket_field.instance.priority       → instance
        workato.recipe__code.instance.r1.block.0     → nested path
    """

    adapter: str
    type_name: str
    id_type: str = 'type'
    name_parts: tuple[str, ...] = ()

    @classmethod
    def from_full_name(cls, full_name: str) -> 'ElemID':
        parts = full_name.split(ELEM_ID_SEPARATOR)
        if len(parts) < 2:
            raise ValueError(f"Invalid element ID: {full_name!r}")
        if len(parts) == 2:
            return cls(parts[0], parts[1])
        return cls(parts[0], parts[1], parts[2], tuple(parts[3:]))

    def create_nested_id(self, *parts: Any) -> 'ElemID':
        """Return a new ElemID extending this one with the given name parts."""
        return ElemID(
            self.adapter, self.type_name, self.id_type,
            self.name_parts + tuple(str(p) for p in parts),
        )

    def get_full_name(self) -> str:
        return ELEM_ID_SEPARATOR.join(
            [self.adapter, self.type_name, *([self.id_type] if self.name_parts else []), *self.name_parts]
        )

    def __str__(self) -> str:
        return self.get_full_name()


@dataclass
class ConfigInstance:
    """A fetched configuration instance: an element ID plus its raw value."""

    elem_id: ElemID
    value: dict[str, Any]
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        return self.elem_id.type_name

    @property
    def full_name(self) -> str:
        return self.elem_id.get_full_name()


@dataclass(frozen=True)
class Reference:
    """A typed reference that replaces a raw value inside an instance."""

    elem_id: ElemID
    original_value: Any = None


@dataclass(frozen=True)
class MappedReference:
    """A reference discovered inside a recipe instance.

    Attributes:
        location: Path of the block or formula string the reference was found in.
        direction: Whether the recipe consumes from or produces to the target.
        reference: Element ID of the resolved target instance.
        path_to_override: Nested path whose value is replaced by the reference.
    """

    location: ElemID
    direction: DependencyDirection
    reference: ElemID
    path_to_override: ElemID | None = None


@dataclass
class LinkOptions:
    """Options controlling a link run."""

    app_name: str = 'zendesk'
    support_deploy: bool = False
    pretty: bool = True


@dataclass
class LinkResult:
    """Result summary of a link run."""

    recipes_linked: int
    references_found: int
    output_dir: str
