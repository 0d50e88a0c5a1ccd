"""Shared constants, regex patterns, and naming conventions.

Centralizes the Zendesk and Workato naming conventions that the index,
the matchers, and the reference driver depend on.
"""

import re

ZENDESK = 'zendesk'
WORKATO = 'workato'

# ── Workato Recipe Structure ─────────────────────────────────────────────

RECIPE_TYPE = 'recipe'
RECIPE_CODE_TYPE = 'recipe__code'
INPUT_KEY = 'input'
TRIGGER_KEYWORD = 'trigger'

PARENT_ANNOTATION = '_parent'
GENERATED_DEPENDENCIES = '_generated_dependencies'

# Application name → providers whose blocks belong to that application
CROSS_SERVICE_SUPPORTED_APPS: dict[str, list[str]] = {
    ZENDESK: ['zendesk', 'zendesk_secondary'],
}

# ── Block Input Conventions ──────────────────────────────────────────────

# pattern: field_<number>
ID_FIELD_RE = re.compile(r'^field_(\d+)\Z', re.ASCII)
# pattern: field_<string>
KEY_FIELD_RE = re.compile(r'^field_(\S+)\Z')

MACRO_IDS_KEY = 'macro_ids'
GROUP_ID_KEY = 'group_id'
BRAND_ID_KEY = 'brand_id'
TICKET_FORM_ID_KEY = 'ticket_form_id'

# ── Formula Patterns ─────────────────────────────────────────────────────

# Formula paths use <kind>_fields for custom fields; tickets use custom_fields
CUSTOM_TICKET_KIND = 'custom'


def standard_field_formula_re(application: str) -> re.Pattern:
    """Pattern for standard field paths.

    example: ('data.zendesk.1234abcd.priority')
    """
    app = re.escape(application)
    return re.compile(rf"\('data\.{app}\.(?P<block>\w+)\.(?P<field>\w+)'\)", re.ASCII)


def custom_field_formula_re(application: str) -> re.Pattern:
    """Pattern for custom field paths, optionally behind chained lookups.

    examples:
      ('data.zendesk.1234abcd.custom_fields.field_6092682303763')
      ('data.zendesk.1234abcd.organization_fields.field_age')
      ('data.zendesk.1234abcd.user_field.field_userfield1')
      ('data.zendesk.1234abcd.users.first.user_field.field_userfield1')
      ('data.zendesk.1234abcd.get_user_by_id(requester_id>id).user_field.field_userfield1')
    """
    app = re.escape(application)
    return re.compile(
        rf"\('data\.{app}\.(?P<block>\w+)\.(?:[^']*?\.)?"
        rf"(?P<custom>[A-Za-z0-9]+)_fields?\.field_(?P<field>\w+)[^']*'\)",
        re.ASCII,
    )
