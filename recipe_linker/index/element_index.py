"""Lookup tables over fetched Zendesk instances.

Built once per fetch and shared read-only by every recipe linked in that
run. Internal ids are normalized to strings so that an id given as a number
in one payload and as a string in another resolve to the same entry.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from recipe_linker.config import IndexTypeNames
from recipe_linker.domain.constants import PARENT_ANNOTATION
from recipe_linker.domain.models import ConfigInstance

logger = logging.getLogger(__name__)

InstanceTable = Mapping[str, ConfigInstance]
OptionTable = Mapping[str, Mapping[str, ConfigInstance]]

# elements_by_internal_id categories
TICKET_FIELDS = 'ticket_fields'
USER_FIELDS = 'user_fields'
ORGANIZATION_FIELDS = 'organization_fields'
MACROS = 'macros'
GROUPS = 'groups'
BRANDS = 'brands'
TICKET_FORMS = 'ticket_forms'

# custom field kinds
USER = 'user'
ORGANIZATION = 'organization'


@dataclass(frozen=True)
class ZendeskIndex:
    """Read-only lookup tables for one fetch of Zendesk instances.

    Attributes:
        elements_by_internal_id: category → id → instance.
        standard_ticket_field_by_name: built-in ticket field type → instance.
        custom_fields_by_key: kind (user/organization) → field key → instance.
        custom_options_by_field_key_and_value: kind → field key → option value → instance.
        ticket_custom_option_by_field_id_and_value: ticket field id → option value → instance.
    """

    elements_by_internal_id: Mapping[str, InstanceTable]
    standard_ticket_field_by_name: InstanceTable
    custom_fields_by_key: Mapping[str, InstanceTable]
    custom_options_by_field_key_and_value: Mapping[str, OptionTable]
    ticket_custom_option_by_field_id_and_value: OptionTable


def normalize_key(value: Any) -> str | None:
    """Normalize an id, key, or option value to a lookup key.

    Returns:
        The string form of a scalar, or None for values that cannot be a key.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def parse_ticket_field_id(token: str) -> str | None:
    """Parse a ticket field id token. Only plain ASCII digits are ids."""
    if not (token.isascii() and token.isdigit()):
        return None
    return str(int(token))


def build_zendesk_index(
    instances: Iterable[ConfigInstance],
    type_names: IndexTypeNames | None = None,
) -> ZendeskIndex:
    """Build all Zendesk lookup tables in one pass over the instances.

    Args:
        instances: Fetched Zendesk instances of any type.
        type_names: Type names to read each category from.

    Returns:
        A ZendeskIndex. Categories with no instances yield empty tables.
    """
    names = type_names or IndexTypeNames()
    by_type: dict[str, list[ConfigInstance]] = defaultdict(list)
    for inst in instances:
        by_type[inst.type_name].append(inst)

    by_internal_id = {
        TICKET_FIELDS: _build_by_id(by_type[names.ticket_field]),
        USER_FIELDS: _build_by_id(by_type[names.user_field]),
        ORGANIZATION_FIELDS: _build_by_id(by_type[names.organization_field]),
        MACROS: _build_by_id(by_type[names.macro]),
        GROUPS: _build_by_id(by_type[names.group]),
        BRANDS: _build_by_id(by_type[names.brand]),
        TICKET_FORMS: _build_by_id(by_type[names.ticket_form]),
    }

    ticket_fields = by_type[names.ticket_field]
    user_fields = by_type[names.user_field]
    org_fields = by_type[names.organization_field]

    index = ZendeskIndex(
        elements_by_internal_id=_freeze(by_internal_id),
        standard_ticket_field_by_name=_freeze(_build_standard_ticket_fields(ticket_fields)),
        custom_fields_by_key=_freeze({
            USER: _build_by_field(user_fields, 'key'),
            ORGANIZATION: _build_by_field(org_fields, 'key'),
        }),
        custom_options_by_field_key_and_value=_freeze({
            USER: _build_options(by_type[names.user_field_option], user_fields, 'key'),
            ORGANIZATION: _build_options(by_type[names.organization_field_option], org_fields, 'key'),
        }),
        ticket_custom_option_by_field_id_and_value=_freeze(
            _build_options(by_type[names.ticket_field_option], ticket_fields, 'id')
        ),
    )
    logger.debug(
        "Indexed %d ticket fields, %d user fields, %d organization fields",
        len(index.elements_by_internal_id[TICKET_FIELDS]),
        len(index.custom_fields_by_key[USER]),
        len(index.custom_fields_by_key[ORGANIZATION]),
    )
    return index


# ── Table Builders ───────────────────────────────────────────────────────

def _build_by_id(instances: list[ConfigInstance]) -> dict[str, ConfigInstance]:
    return _build_by_field(instances, 'id')


def _build_by_field(instances: list[ConfigInstance], field_name: str) -> dict[str, ConfigInstance]:
    """Build value[field_name] → instance, skipping instances without the field."""
    table: dict[str, ConfigInstance] = {}
    for inst in instances:
        key = normalize_key(inst.value.get(field_name))
        if key is not None:
            table[key] = inst
    return table


def _build_standard_ticket_fields(ticket_fields: list[ConfigInstance]) -> dict[str, ConfigInstance]:
    """Built-in ticket fields cannot be removed; they are addressed by their type."""
    table: dict[str, ConfigInstance] = {}
    for inst in ticket_fields:
        if inst.value.get('removable') is False and isinstance(inst.value.get('type'), str):
            table[inst.value['type']] = inst
    return table


def _build_options(
    options: list[ConfigInstance],
    parents: list[ConfigInstance],
    parent_key_field: str,
) -> dict[str, dict[str, ConfigInstance]]:
    """Build parent key → option value → option instance.

    Options point to their field through the _parent annotation; the field is
    then keyed by parent_key_field (id for ticket fields, key otherwise).
    """
    parent_keys = {
        p.full_name: normalize_key(p.value.get(parent_key_field)) for p in parents
    }
    table: dict[str, dict[str, ConfigInstance]] = {}
    for option in options:
        option_value = normalize_key(option.value.get('value'))
        if option_value is None:
            continue
        for parent_name in _parent_names(option):
            parent_key = parent_keys.get(parent_name)
            if parent_key is not None:
                table.setdefault(parent_key, {})[option_value] = option
    return table


def _parent_names(inst: ConfigInstance) -> list[str]:
    parents = inst.annotations.get(PARENT_ANNOTATION, [])
    if isinstance(parents, str):
        return [parents]
    return [p for p in parents if isinstance(p, str)] if isinstance(parents, list) else []


def _freeze(table: dict) -> Mapping:
    """Wrap nested dicts in read-only mapping proxies."""
    return MappingProxyType({
        k: _freeze(v) if isinstance(v, dict) else v for k, v in table.items()
    })
