"""Generic driver that finds references in a recipe and applies them.

Service-specific finders plug in through three callables: a guard that
narrows a raw dict to a block of the service, a finder for a block's
declared inputs, and a finder for formula strings. Every block is visited
before any formula is scanned, so a formula finder can rely on state the
block finder collected for the whole recipe.
"""

import logging
from typing import Any, Callable, Iterable, TypeVar

from recipe_linker.domain.constants import (
    CROSS_SERVICE_SUPPORTED_APPS,
    GENERATED_DEPENDENCIES,
    INPUT_KEY,
)
from recipe_linker.domain.field_walker import (
    get_at_path,
    iter_dict_nodes,
    iter_string_leaves,
    relative_parts,
    set_at_path,
)
from recipe_linker.domain.models import (
    ConfigInstance,
    ElemID,
    InvalidInstanceError,
    MappedReference,
    Reference,
)

logger = logging.getLogger(__name__)

BlockT = TypeVar('BlockT')
BlockGuard = Callable[[Any], BlockT | None]
ReferenceFinder = Callable[[BlockT, ElemID], Iterable[MappedReference | None]]
FormulaReferenceFinder = Callable[[str, ElemID], Iterable[MappedReference | None]]


def find_references_for_service(
    instance: ConfigInstance,
    app_name: str,
    block_guard: BlockGuard,
    reference_finder: ReferenceFinder,
    formula_reference_finder: FormulaReferenceFinder,
) -> list[MappedReference]:
    """Find all references from a recipe instance to one service.

    Args:
        instance: Recipe code instance to scan.
        app_name: Cross-service application name (e.g. 'zendesk').
        block_guard: Narrows a dict to a block, or returns None.
        reference_finder: Finds references in one block of the application.
        formula_reference_finder: Finds references in one formula string.

    Returns:
        Block references in block order, then formula references.

    Raises:
        InvalidInstanceError: If the instance value is not a record.
    """
    if not isinstance(instance.value, dict):
        raise InvalidInstanceError(f"Instance {instance.full_name} value is not a record")

    providers = set(CROSS_SERVICE_SUPPORTED_APPS.get(app_name, [app_name]))
    nodes = list(iter_dict_nodes(instance.value, instance.elem_id))

    block_refs: list[MappedReference | None] = []
    for node, path in nodes:
        provider = node.get('provider')
        if not isinstance(provider, str) or provider not in providers:
            continue
        block = block_guard(node)
        if block is None:
            logger.debug("Skipping %s: not a valid %s block", path, app_name)
            continue
        block_refs.extend(reference_finder(block, path))

    formula_refs: list[MappedReference | None] = []
    for node, path in nodes:
        block_input = node.get(INPUT_KEY)
        if not _is_block_like(node) or not isinstance(block_input, dict):
            continue
        for value, value_path in iter_string_leaves(block_input, path.create_nested_id(INPUT_KEY)):
            formula_refs.extend(formula_reference_finder(value, value_path))

    return [ref for ref in block_refs + formula_refs if ref is not None]


def apply_references(instance: ConfigInstance, references: Iterable[MappedReference]) -> None:
    """Apply references to an instance (mutates in place).

    References with a path to override replace the value at that path.
    The rest are recorded in the _generated_dependencies annotation, one
    entry per target with its distinct occurrences. Applying the same
    references again leaves the instance unchanged.
    """
    occurrences: dict[str, list[dict[str, str]]] = {
        dep['reference']: list(dep.get('occurrences', []))
        for dep in instance.annotations.get(GENERATED_DEPENDENCIES, [])
    }

    for ref in references:
        if ref.path_to_override is not None and _override(instance, ref):
            continue
        occurrence = {'location': ref.location.get_full_name(), 'direction': ref.direction.value}
        target_occurrences = occurrences.setdefault(ref.reference.get_full_name(), [])
        if occurrence not in target_occurrences:
            target_occurrences.append(occurrence)

    if occurrences:
        instance.annotations[GENERATED_DEPENDENCIES] = [
            {'reference': name, 'occurrences': occurrences[name]}
            for name in sorted(occurrences)
        ]


def add_references_for_service(
    instance: ConfigInstance,
    app_name: str,
    block_guard: BlockGuard,
    reference_finder: ReferenceFinder,
    formula_reference_finder: FormulaReferenceFinder,
) -> list[MappedReference]:
    """Find references from a recipe instance to a service and apply them.

    Returns:
        The references that were found.
    """
    references = find_references_for_service(
        instance, app_name, block_guard, reference_finder, formula_reference_finder,
    )
    apply_references(instance, references)
    logger.debug("Found %d %s references in %s", len(references), app_name, instance.full_name)
    return references


def _override(instance: ConfigInstance, ref: MappedReference) -> bool:
    """Replace the value at the reference's override path. Returns False if the path is gone."""
    parts = relative_parts(instance.elem_id, ref.path_to_override)
    if not parts:
        return False
    current = get_at_path(instance.value, parts)
    if isinstance(current, Reference):
        return current.elem_id == ref.reference
    if current is None:
        return False
    return set_at_path(instance.value, parts, Reference(ref.reference, current))


def _is_block_like(node: dict[str, Any]) -> bool:
    return isinstance(node.get('keyword'), str)
