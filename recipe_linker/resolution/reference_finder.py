"""Zendesk reference finder for Workato recipes.

Links recipe blocks and formulas to the Zendesk fields, options, macros,
groups, brands, and ticket forms they use.
"""

from recipe_linker.domain.constants import ZENDESK
from recipe_linker.domain.models import ConfigInstance, ElemID, MappedReference
from recipe_linker.domain.recipe_blocks import ZendeskBlock, parse_zendesk_block
from recipe_linker.index.element_index import ZendeskIndex
from recipe_linker.resolution.block_classifier import BlockClassifier
from recipe_linker.resolution.formula_matcher import FormulaMatcher
from recipe_linker.resolution.reference_driver import (
    add_references_for_service,
    find_references_for_service,
)
from recipe_linker.resolution.structural_matcher import StructuralMatcher


class ZendeskReferenceFinder:
    """Finds references from recipes to Zendesk instances.

    One finder can be reused for every recipe of a fetch: the index is
    read-only and each recipe gets its own block kind table.

    Args:
        index: Zendesk lookup tables for the current fetch.
        app_name: Application name used by the recipes (e.g. 'zendesk').
    """

    def __init__(self, index: ZendeskIndex, app_name: str = ZENDESK) -> None:
        self._app_name = app_name
        self._structural = StructuralMatcher(index)
        self._formulas = FormulaMatcher(index, app_name)

    def find(self, instance: ConfigInstance) -> list[MappedReference]:
        """Return all references of one recipe instance without applying them."""
        return find_references_for_service(instance, self._app_name, *self._finders())

    def add(self, instance: ConfigInstance) -> list[MappedReference]:
        """Find all references of one recipe instance and apply them to it."""
        return add_references_for_service(instance, self._app_name, *self._finders())

    def _finders(self):
        classifier = BlockClassifier()

        def reference_finder(block: ZendeskBlock, path: ElemID) -> list[MappedReference]:
            kind = classifier.classify(block)
            return self._structural.find(block, path, kind)

        def formula_reference_finder(value: str, path: ElemID) -> list[MappedReference]:
            return self._formulas.find(value, path, classifier.block_kinds)

        return parse_zendesk_block, reference_finder, formula_reference_finder


def find_zendesk_recipe_references(
    instance: ConfigInstance, index: ZendeskIndex, app_name: str = ZENDESK,
) -> list[MappedReference]:
    return ZendeskReferenceFinder(index, app_name).find(instance)


def add_zendesk_recipe_references(
    instance: ConfigInstance, index: ZendeskIndex, app_name: str = ZENDESK,
) -> list[MappedReference]:
    return ZendeskReferenceFinder(index, app_name).add(instance)
