"""Shared utility for walking nested instance values with their element paths.

Paths are ElemIDs nested under the owning instance, with list indexes as
name parts:
  - 'workato.recipe__code.instance.r1.block.0'         → first block
  - 'workato.recipe__code.instance.r1.block.0.input'   → its input
  - 'workato.recipe__code.instance.r1.block.0.block.2' → a nested block
"""

from typing import Any, Iterator

from recipe_linker.domain.models import ElemID


def iter_dict_nodes(value: Any, path: ElemID) -> Iterator[tuple[dict[str, Any], ElemID]]:
    """Yield every dict in a nested value (depth-first, pre-order) with its path.

    Args:
        value: Root value to walk.
        path: Element path of the root value.
    """
    if isinstance(value, dict):
        yield value, path
        for key, child in value.items():
            yield from iter_dict_nodes(child, path.create_nested_id(key))
    elif isinstance(value, list):
        for i, child in enumerate(value):
            yield from iter_dict_nodes(child, path.create_nested_id(i))


def iter_string_leaves(value: Any, path: ElemID) -> Iterator[tuple[str, ElemID]]:
    """Yield every string leaf in a nested value with its path."""
    if isinstance(value, str):
        yield value, path
    elif isinstance(value, dict):
        for key, child in value.items():
            yield from iter_string_leaves(child, path.create_nested_id(key))
    elif isinstance(value, list):
        for i, child in enumerate(value):
            yield from iter_string_leaves(child, path.create_nested_id(i))


def relative_parts(base: ElemID, path: ElemID) -> tuple[str, ...] | None:
    """Return the name parts of path below base, or None if path is not nested in base."""
    if (path.adapter, path.type_name, path.id_type) != (base.adapter, base.type_name, base.id_type):
        return None
    if path.name_parts[:len(base.name_parts)] != base.name_parts:
        return None
    return path.name_parts[len(base.name_parts):]


def get_at_path(data: Any, parts: tuple[str, ...]) -> Any:
    """Return the value at the given name parts, or None when any step is missing."""
    node = data
    for part in parts:
        node = _step(node, part)
        if node is None:
            return None
    return node


def set_at_path(data: Any, parts: tuple[str, ...], new_value: Any) -> bool:
    """Set the value at the given name parts in place.

    Returns:
        True if the value was set, False if the path does not exist.
    """
    if not parts:
        return False
    parent = get_at_path(data, parts[:-1])
    last = parts[-1]
    if isinstance(parent, dict) and last in parent:
        parent[last] = new_value
        return True
    if isinstance(parent, list) and last.isdigit() and int(last) < len(parent):
        parent[int(last)] = new_value
        return True
    return False


def _step(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node.get(part)
    if isinstance(node, list) and part.isdigit():
        idx = int(part)
        return node[idx] if idx < len(node) else None
    return None
