"""Tests for the Zendesk element index."""

import pytest

from recipe_linker.config import IndexTypeNames
from recipe_linker.index.element_index import (
    BRANDS,
    GROUPS,
    MACROS,
    ORGANIZATION,
    TICKET_FIELDS,
    TICKET_FORMS,
    USER,
    build_zendesk_index,
    normalize_key,
    parse_ticket_field_id,
)
from tests.conftest import CUSTOM_TICKET_FIELD_ID, zendesk_instance


class TestBuildZendeskIndex:
    """Tests for build_zendesk_index."""

    def test_internal_ids_are_string_keys(self, zendesk_index):
        ids = zendesk_index.elements_by_internal_id
        assert ids[MACROS]['11'].full_name == 'zendesk.macro.instance.close_ticket'
        assert ids[GROUPS]['22'].full_name == 'zendesk.group.instance.support'
        assert ids[BRANDS]['33'].full_name == 'zendesk.brand.instance.main'
        assert ids[TICKET_FORMS]['44'].full_name == 'zendesk.ticket_form.instance.default'
        assert str(CUSTOM_TICKET_FIELD_ID) in ids[TICKET_FIELDS]

    def test_standard_ticket_fields_keyed_by_type(self, zendesk_index):
        standard = zendesk_index.standard_ticket_field_by_name
        assert set(standard) == {'priority', 'subject'}
        assert standard['priority'].value['id'] == 1001

    def test_custom_fields_by_key(self, zendesk_index):
        assert zendesk_index.custom_fields_by_key[USER]['userfield1'].value['id'] == 2001
        assert zendesk_index.custom_fields_by_key[ORGANIZATION]['age'].value['id'] == 3001

    def test_custom_options_by_field_key_and_value(self, zendesk_index):
        options = zendesk_index.custom_options_by_field_key_and_value
        assert options[USER]['userfield1']['gold'].value['name'] == 'Gold'
        assert options[ORGANIZATION]['age']['senior'].value['name'] == 'Senior'

    def test_ticket_options_keyed_by_field_id(self, zendesk_index):
        options = zendesk_index.ticket_custom_option_by_field_id_and_value
        assert options[str(CUSTOM_TICKET_FIELD_ID)]['opt_a'].value['id'] == 5001

    def test_empty_fetch_yields_empty_tables(self):
        index = build_zendesk_index([])
        assert all(len(table) == 0 for table in index.elements_by_internal_id.values())
        assert len(index.standard_ticket_field_by_name) == 0
        assert len(index.custom_fields_by_key[USER]) == 0
        assert len(index.custom_options_by_field_key_and_value[ORGANIZATION]) == 0
        assert len(index.ticket_custom_option_by_field_id_and_value) == 0

    def test_instances_without_id_are_skipped(self):
        index = build_zendesk_index([zendesk_instance('group', 'nameless', {'name': 'No id'})])
        assert len(index.elements_by_internal_id[GROUPS]) == 0

    def test_duplicate_ids_last_write_wins(self):
        index = build_zendesk_index([
            zendesk_instance('group', 'first', {'id': 1}),
            zendesk_instance('group', 'second', {'id': 1}),
        ])
        assert index.elements_by_internal_id[GROUPS]['1'].full_name == 'zendesk.group.instance.second'

    def test_option_with_unknown_parent_is_skipped(self):
        index = build_zendesk_index([
            zendesk_instance('user_field__custom_field_options', 'orphan', {'value': 'x'},
                             parent='zendesk.user_field.instance.missing'),
        ])
        assert len(index.custom_options_by_field_key_and_value[USER]) == 0

    def test_tables_are_read_only(self, zendesk_index):
        with pytest.raises(TypeError):
            zendesk_index.elements_by_internal_id[GROUPS]['99'] = None

    def test_custom_type_names(self):
        names = IndexTypeNames(group='support_group')
        index = build_zendesk_index([zendesk_instance('support_group', 'g', {'id': 7})], names)
        assert '7' in index.elements_by_internal_id[GROUPS]

    def test_deterministic(self, zendesk_instances):
        first = build_zendesk_index(zendesk_instances)
        second = build_zendesk_index(zendesk_instances)
        for category in first.elements_by_internal_id:
            assert dict(first.elements_by_internal_id[category]) == dict(second.elements_by_internal_id[category])
        assert dict(first.standard_ticket_field_by_name) == dict(second.standard_ticket_field_by_name)


class TestNormalizeKey:
    """Tests for lookup key normalization."""

    def test_int_and_string_match(self):
        assert normalize_key(22) == normalize_key('22') == '22'

    def test_integral_float(self):
        assert normalize_key(22.0) == '22'

    def test_bool(self):
        assert normalize_key(True) == 'true'

    @pytest.mark.parametrize('token, expected', [
        ('6092', '6092'),
        ('006092', '6092'),
        ('6_092', None),
        ('٦٠٩٢', None),
        ('-1', None),
        ('abc', None),
    ])
    def test_parse_ticket_field_id(self, token, expected):
        assert parse_ticket_field_id(token) == expected

    def test_unhashable_values(self):
        assert normalize_key(None) is None
        assert normalize_key(['a']) is None
        assert normalize_key({'id': 1}) is None
