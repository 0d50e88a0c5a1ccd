"""Formula reference matcher.

Recipe formulas read other blocks' output through quoted dotted paths such
as ('data.zendesk.1234abcd.priority'). Scanning a formula for those paths
and resolving a path against the index are kept as separate pure functions.
"""

import re
from dataclasses import dataclass
from typing import Callable

from recipe_linker.domain.constants import (
    CUSTOM_TICKET_KIND,
    custom_field_formula_re,
    standard_field_formula_re,
)
from recipe_linker.domain.enums import BlockKind, DependencyDirection
from recipe_linker.domain.models import ConfigInstance, ElemID, MappedReference
from recipe_linker.index.element_index import (
    ORGANIZATION,
    TICKET_FIELDS,
    USER,
    ZendeskIndex,
    parse_ticket_field_id,
)
from recipe_linker.resolution.block_classifier import BlockKindTable


@dataclass(frozen=True)
class FormulaMatchGroup:
    """One dotted-path match inside a formula."""

    block: str
    field: str
    custom: str | None = None


FormulaScanner = Callable[[str], list[FormulaMatchGroup]]


def create_formula_scanner(application: str) -> FormulaScanner:
    """Build a scanner for the given application's data paths.

    Returns:
        A function mapping formula text to its match groups: all standard
        field matches first, then all custom field matches.
    """
    patterns = [standard_field_formula_re(application), custom_field_formula_re(application)]

    def scan(text: str) -> list[FormulaMatchGroup]:
        return scan_formula(text, patterns)

    return scan


def scan_formula(text: str, patterns: list[re.Pattern]) -> list[FormulaMatchGroup]:
    """Collect every non-overlapping match of each pattern in text."""
    groups: list[FormulaMatchGroup] = []
    for pattern in patterns:
        for m in pattern.finditer(text):
            parts = m.groupdict()
            block, field, custom = parts.get('block'), parts.get('field'), parts.get('custom')
            if isinstance(block, str) and isinstance(field, str):
                groups.append(FormulaMatchGroup(block, field, custom))
    return groups


def resolve_formula_match(
    group: FormulaMatchGroup,
    index: ZendeskIndex,
    block_kinds: BlockKindTable,
    location: ElemID,
) -> MappedReference | None:
    """Resolve one formula match to a reference, or None.

    Args:
        group: The match to resolve.
        index: Zendesk lookup tables.
        block_kinds: Classified blocks of the recipe the formula lives in.
        location: Path of the string holding the formula.
    """
    # an unknown alias belongs to a block of another application
    if group.block not in block_kinds:
        return None

    if group.custom is not None:
        # tickets have no ticket_fields, only custom_fields
        if group.custom == CUSTOM_TICKET_KIND:
            field_id = parse_ticket_field_id(group.field)
            if field_id is None:
                return None
            return _field_reference(index.elements_by_internal_id[TICKET_FIELDS].get(field_id), location)
        if group.custom in (USER, ORGANIZATION):
            return _field_reference(index.custom_fields_by_key[group.custom].get(group.field), location)
        return None

    if block_kinds[group.block] != BlockKind.TICKET:
        return None
    return _field_reference(index.standard_ticket_field_by_name.get(group.field), location)


def _field_reference(target: ConfigInstance | None, location: ElemID) -> MappedReference | None:
    if target is None:
        return None
    # references inside formulas are always used as input
    return MappedReference(location, DependencyDirection.INPUT, target.elem_id)


class FormulaMatcher:
    """Finds references in formula strings of one recipe.

    Args:
        index: Zendesk lookup tables for the current fetch.
        application: Application name used in formula data paths.
    """

    def __init__(self, index: ZendeskIndex, application: str) -> None:
        self._index = index
        self._scan = create_formula_scanner(application)

    def find(self, value: str, location: ElemID, block_kinds: BlockKindTable) -> list[MappedReference]:
        refs = (
            resolve_formula_match(group, self._index, block_kinds, location)
            for group in self._scan(value)
        )
        return [ref for ref in refs if ref is not None]
