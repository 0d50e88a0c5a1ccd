"""Shared test fixtures."""

import copy
import json

import pytest

from recipe_linker.domain.models import ConfigInstance, ElemID
from recipe_linker.index.element_index import build_zendesk_index


def zendesk_instance(type_name: str, name: str, value: dict, parent: str | None = None) -> ConfigInstance:
    """Build a Zendesk instance, optionally pointing at a parent field."""
    annotations = {'_parent': [parent]} if parent else {}
    return ConfigInstance(ElemID('zendesk', type_name, 'instance', (name,)), value, annotations)


def recipe_instance(name: str, value: dict) -> ConfigInstance:
    return ConfigInstance(ElemID('workato', 'recipe__code', 'instance', (name,)), copy.deepcopy(value))


CUSTOM_TICKET_FIELD_ID = 6092682303763

# ── Sample Recipe Code ───────────────────────────────────────────────────

RECIPE_CODE = {
    'keyword': 'trigger',
    'provider': 'zendesk',
    'name': 'new_ticket',
    'as': 'trig1',
    'input': {'ticket_form_id': 44},
    'block': [
        {
            'keyword': 'action',
            'provider': 'zendesk',
            'name': 'update_ticket',
            'as': 'blk1',
            'input': {
                'priority': 'high',
                f'field_{CUSTOM_TICKET_FIELD_ID}': 'opt_a',
                'group_id': '22',
                'macro_ids': {'id': 11},
            },
        },
        {
            'keyword': 'action',
            'provider': 'zendesk',
            'name': 'get_user_by_id',
            'as': 'blk3',
            'input': {'field_userfield1': 'gold'},
        },
        {
            'keyword': 'action',
            'provider': 'salesforce',
            'name': 'create_record',
            'as': 'sf1',
            'input': {
                'Description': (
                    "=_('data.zendesk.blk1.priority') + "
                    "_('data.zendesk.blk3.user_field.field_userfield1')"
                ),
            },
        },
    ],
}


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def zendesk_instances():
    """A minimal Zendesk fetch covering every index category."""
    return [
        zendesk_instance('ticket_field', 'priority', {
            'id': 1001, 'type': 'priority', 'title': 'Priority', 'removable': False,
        }),
        zendesk_instance('ticket_field', 'subject', {
            'id': 1002, 'type': 'subject', 'title': 'Subject', 'removable': False,
        }),
        zendesk_instance('ticket_field', 'custom_dropdown', {
            'id': CUSTOM_TICKET_FIELD_ID, 'type': 'tagger', 'title': 'Custom Dropdown', 'removable': True,
        }),
        zendesk_instance('ticket_field__custom_field_options', 'custom_dropdown__opt_a', {
            'id': 5001, 'name': 'Option A', 'value': 'opt_a',
        }, parent='zendesk.ticket_field.instance.custom_dropdown'),
        zendesk_instance('user_field', 'userfield1', {
            'id': 2001, 'key': 'userfield1', 'type': 'dropdown', 'title': 'Tier',
        }),
        zendesk_instance('user_field__custom_field_options', 'userfield1__gold', {
            'id': 5002, 'name': 'Gold', 'value': 'gold',
        }, parent='zendesk.user_field.instance.userfield1'),
        zendesk_instance('organization_field', 'age', {
            'id': 3001, 'key': 'age', 'type': 'dropdown', 'title': 'Age',
        }),
        zendesk_instance('organization_field__custom_field_options', 'age__senior', {
            'id': 5003, 'name': 'Senior', 'value': 'senior',
        }, parent='zendesk.organization_field.instance.age'),
        zendesk_instance('macro', 'close_ticket', {'id': 11, 'title': 'Close ticket'}),
        zendesk_instance('group', 'support', {'id': 22, 'name': 'Support'}),
        zendesk_instance('brand', 'main', {'id': 33, 'name': 'Main'}),
        zendesk_instance('ticket_form', 'default', {'id': 44, 'name': 'Default form'}),
    ]


@pytest.fixture
def zendesk_index(zendesk_instances):
    return build_zendesk_index(zendesk_instances)


@pytest.fixture
def sample_recipe():
    return recipe_instance('r1', RECIPE_CODE)


@pytest.fixture
def sample_exports(tmp_path, zendesk_instances, sample_recipe):
    """Write Zendesk and Workato exports to temp files and return their paths."""
    zendesk_path = tmp_path / 'zendesk.json'
    zendesk_path.write_text(json.dumps([
        {'elem_id': inst.full_name, 'value': inst.value, 'annotations': inst.annotations}
        for inst in zendesk_instances
    ]), encoding='utf-8')

    workato_path = tmp_path / 'workato.json'
    workato_path.write_text(json.dumps([
        {'elem_id': sample_recipe.full_name, 'value': sample_recipe.value},
        {
            'elem_id': 'workato.recipe.instance.r1',
            'value': {
                'name': 'Sync tickets',
                'code': 'workato.recipe__code.instance.r1',
                'extended_input_schema': [{'name': 'x'}],
                'extended_output_schema': [{'name': 'y'}],
            },
        },
    ]), encoding='utf-8')
    return str(zendesk_path), str(workato_path)
