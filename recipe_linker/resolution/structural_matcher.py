"""Structural reference matcher for Zendesk recipe blocks.

Resolves the declared input keys of a block against the Zendesk index:
well-known id keys, standard ticket field names, and custom field keys
(field_<id> for tickets, field_<key> for users and organizations).
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from recipe_linker.domain.constants import (
    BRAND_ID_KEY,
    GROUP_ID_KEY,
    ID_FIELD_RE,
    INPUT_KEY,
    KEY_FIELD_RE,
    MACRO_IDS_KEY,
    TICKET_FORM_ID_KEY,
)
from recipe_linker.domain.enums import BlockKind
from recipe_linker.domain.models import ConfigInstance, ElemID, MappedReference
from recipe_linker.domain.recipe_blocks import ZendeskBlock, get_block_dependency_direction
from recipe_linker.index.element_index import (
    BRANDS,
    GROUPS,
    MACROS,
    ORGANIZATION,
    TICKET_FIELDS,
    TICKET_FORMS,
    USER,
    ZendeskIndex,
    normalize_key,
    parse_ticket_field_id,
)

_MISSING = object()


@dataclass(frozen=True)
class _CustomFieldRule:
    """How to find custom field keys in a block input and where to resolve them."""

    fields: Mapping[str, ConfigInstance]
    options: Mapping[str, Mapping[str, ConfigInstance]]
    pattern: re.Pattern = KEY_FIELD_RE
    convert_key: Callable[[str], str | None] = lambda token: token


class StructuralMatcher:
    """Finds direct references declared by a block's input keys.

    Args:
        index: Zendesk lookup tables for the current fetch.
    """

    def __init__(self, index: ZendeskIndex) -> None:
        self._index = index
        ids = index.elements_by_internal_id
        # (input path below 'input', category)
        self._fixed_keys: list[tuple[tuple[str, ...], str]] = [
            ((MACRO_IDS_KEY, 'id'), MACROS),
            ((GROUP_ID_KEY,), GROUPS),
            ((BRAND_ID_KEY,), BRANDS),
            ((TICKET_FORM_ID_KEY,), TICKET_FORMS),
        ]
        self._custom_rules: dict[BlockKind, _CustomFieldRule] = {
            BlockKind.TICKET: _CustomFieldRule(
                fields=ids[TICKET_FIELDS],
                options=index.ticket_custom_option_by_field_id_and_value,
                pattern=ID_FIELD_RE,
                convert_key=parse_ticket_field_id,
            ),
            BlockKind.USER: _CustomFieldRule(
                fields=index.custom_fields_by_key[USER],
                options=index.custom_options_by_field_key_and_value[USER],
            ),
            BlockKind.ORGANIZATION: _CustomFieldRule(
                fields=index.custom_fields_by_key[ORGANIZATION],
                options=index.custom_options_by_field_key_and_value[ORGANIZATION],
            ),
        }

    def find(self, block: ZendeskBlock, path: ElemID, kind: BlockKind) -> list[MappedReference]:
        """Return the direct references of one classified block.

        Args:
            block: The validated block.
            path: Element path of the block inside its recipe.
            kind: The block's classified resource kind.
        """
        direction = get_block_dependency_direction(block)
        refs: list[MappedReference] = []

        def add(target: ConfigInstance | None, nested_path: ElemID | None = None) -> bool:
            if target is None:
                return False
            refs.append(MappedReference(path, direction, target.elem_id, nested_path))
            return True

        self._add_fixed_key_refs(block.input, path, add)
        if kind == BlockKind.TICKET:
            self._add_standard_field_refs(block.input, add)
        rule = self._custom_rules.get(kind)
        if rule is not None:
            self._add_custom_field_refs(block.input, path, rule, add)
        return refs

    # ── Matchers ─────────────────────────────────────────────────────────

    def _add_fixed_key_refs(self, block_input: dict[str, Any], path: ElemID, add: Callable) -> None:
        ids = self._index.elements_by_internal_id
        for key_path, category in self._fixed_keys:
            value = _get_nested(block_input, key_path)
            if value is _MISSING:
                continue
            key = normalize_key(value)
            if key is not None:
                add(ids[category].get(key), path.create_nested_id(INPUT_KEY, *key_path))

    def _add_standard_field_refs(self, block_input: dict[str, Any], add: Callable) -> None:
        # no path override: field keys cannot be replaced in the current format
        for field_name, field_inst in self._index.standard_ticket_field_by_name.items():
            if field_name in block_input:
                add(field_inst)

    @staticmethod
    def _add_custom_field_refs(
        block_input: dict[str, Any], path: ElemID, rule: _CustomFieldRule, add: Callable,
    ) -> None:
        for input_key, input_value in block_input.items():
            m = rule.pattern.match(input_key)
            if not m:
                continue
            field_key = rule.convert_key(m.group(1))
            if field_key is None:
                continue
            # no path override on the field itself, only on its option value
            if not add(rule.fields.get(field_key)):
                continue
            options = rule.options.get(field_key)
            option_value = normalize_key(input_value)
            if options is not None and option_value is not None:
                add(options.get(option_value), path.create_nested_id(INPUT_KEY, input_key))


def _get_nested(data: dict[str, Any], key_path: tuple[str, ...]) -> Any:
    node: Any = data
    for key in key_path:
        if not isinstance(node, dict) or key not in node:
            return _MISSING
        node = node[key]
    return node
