"""CLI for recipe-linker."""

import argparse
import logging
import os
import sys

from recipe_linker.config import API_DEFINITIONS_CONFIG, get_default_config, omit_fields
from recipe_linker.domain.constants import CROSS_SERVICE_SUPPORTED_APPS, RECIPE_CODE_TYPE, WORKATO
from recipe_linker.domain.models import ConfigInstance, LinkOptions, LinkResult, MappedReference
from recipe_linker.index.element_index import build_zendesk_index
from recipe_linker.instance_reader import InstanceReader
from recipe_linker.output.reference_dumper import ReferenceDumper
from recipe_linker.resolution.reference_finder import ZendeskReferenceFinder

logger = logging.getLogger(__name__)


def link_recipes(zendesk_path: str, workato_path: str, output_dir: str, options: LinkOptions) -> LinkResult:
    """Main orchestration: exports -> index -> linked recipes -> JSON output."""
    reader = InstanceReader()
    zendesk_instances = reader.read(zendesk_path)
    workato_instances = reader.read(workato_path)

    types = get_default_config(options.support_deploy)[API_DEFINITIONS_CONFIG]['types']
    for inst in workato_instances:
        inst.value = omit_fields(inst.value, types.get(inst.type_name))

    index = build_zendesk_index(zendesk_instances)
    finder = ZendeskReferenceFinder(index, options.app_name)

    references: dict[str, list[MappedReference]] = {}
    recipes: list[ConfigInstance] = [
        inst for inst in workato_instances
        if inst.elem_id.adapter == WORKATO and inst.type_name == RECIPE_CODE_TYPE
    ]
    for recipe in recipes:
        references[recipe.full_name] = finder.add(recipe)
    logger.info("Linked %d recipes against %d Zendesk instances", len(recipes), len(zendesk_instances))

    dumper = ReferenceDumper(output_dir, pretty=options.pretty)
    dumper.write_instances(workato_instances)
    dumper.write_references(references)

    return LinkResult(
        recipes_linked=len(recipes),
        references_found=sum(len(refs) for refs in references.values()),
        output_dir=output_dir,
    )


def main():
    parser = argparse.ArgumentParser(prog='recipe-linker', description='Cross-service recipe reference linker')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    # link command
    link_parser = subparsers.add_parser('link', help='Link recipes to Zendesk instances and dump JSON')
    link_parser.add_argument('zendesk', help='Path to the Zendesk instance export')
    link_parser.add_argument('workato', help='Path to the Workato instance export')
    link_parser.add_argument('output', help='Output directory')
    link_parser.add_argument('--app-name', default='zendesk', help='Application name used in recipes (default: zendesk)')
    link_parser.add_argument('--support-deploy', action='store_true', help='Keep fields only needed for deploy')
    link_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')

    # apps command
    subparsers.add_parser('apps', help='List supported cross-service applications')

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if args.command == 'link':
        for path in (args.zendesk, args.workato):
            if not os.path.isfile(path):
                print(f"Error: {path} not found", file=sys.stderr)
                sys.exit(1)

        options = LinkOptions(
            app_name=args.app_name,
            support_deploy=args.support_deploy,
            pretty=not args.no_pretty,
        )
        print(f"Linking {args.workato} against {args.zendesk}...")
        result = link_recipes(args.zendesk, args.workato, args.output, options)
        print(f"Done! Linked {result.recipes_linked} recipes ({result.references_found} references)")
        print(f"Output: {result.output_dir}")

    elif args.command == 'apps':
        for app, providers in sorted(CROSS_SERVICE_SUPPORTED_APPS.items()):
            print(f"  {app}: {', '.join(providers)}")

    else:
        parser.print_help()


if __name__ == '__main__':
    main()
