"""Default per-type transformation options and index type names.

The Workato `recipe` type carries large extended input/output schemas that
are only needed when deploying; they are omitted from fetched instances
unless deploy support is enabled.
"""

import copy
from dataclasses import dataclass
from typing import Any

from recipe_linker.domain.constants import RECIPE_CODE_TYPE, RECIPE_TYPE

SUPPORT_DEPLOY_FLAG = 'enableDeploySupport'
API_DEFINITIONS_CONFIG = 'apiDefinitions'

_EXTENDED_SCHEMA_FIELDS = ['extended_input_schema', 'extended_output_schema']


@dataclass(frozen=True)
class FieldToOmit:
    field_name: str


@dataclass(frozen=True)
class TypeTransformation:
    fields_to_omit: tuple[FieldToOmit, ...] = ()


@dataclass(frozen=True)
class IndexTypeNames:
    """Zendesk type names the element index reads instances from."""

    ticket_field: str = 'ticket_field'
    user_field: str = 'user_field'
    organization_field: str = 'organization_field'
    macro: str = 'macro'
    group: str = 'group'
    brand: str = 'brand'
    ticket_form: str = 'ticket_form'
    ticket_field_option: str = 'ticket_field__custom_field_options'
    user_field_option: str = 'user_field__custom_field_options'
    organization_field_option: str = 'organization_field__custom_field_options'


def get_default_types(support_deploy: bool) -> dict[str, TypeTransformation]:
    """Build the default transformation options for each Workato type."""
    recipe_omit = [] if support_deploy else [FieldToOmit(name) for name in _EXTENDED_SCHEMA_FIELDS]
    return {
        RECIPE_TYPE: TypeTransformation(fields_to_omit=tuple(recipe_omit)),
        RECIPE_CODE_TYPE: TypeTransformation(),
    }


def get_default_config(support_deploy: bool) -> dict[str, Any]:
    """Build the default adapter configuration."""
    return {
        SUPPORT_DEPLOY_FLAG: support_deploy,
        API_DEFINITIONS_CONFIG: {
            'types': get_default_types(support_deploy),
        },
    }


def omit_fields(value: dict[str, Any], transformation: TypeTransformation | None) -> dict[str, Any]:
    """Return a copy of value with the configured fields removed at every depth."""
    if transformation is None or not transformation.fields_to_omit:
        return value
    names = {f.field_name for f in transformation.fields_to_omit}
    return _strip(copy.deepcopy(value), names)


def _strip(node: Any, names: set[str]) -> Any:
    if isinstance(node, dict):
        for name in node.keys() & names:
            del node[name]
        for child in node.values():
            _strip(child, names)
    elif isinstance(node, list):
        for child in node:
            _strip(child, names)
    return node
