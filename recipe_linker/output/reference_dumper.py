"""JSON output generation.

Writes linked recipe instances and a reference summary to an output
directory.
"""

import json
import os
import re
from datetime import datetime, timezone
from typing import Any

from recipe_linker.domain.models import ConfigInstance, ElemID, MappedReference, Reference


def _sanitize_filename(full_name: str) -> str:
    """Create a safe filename from an element full name."""
    return re.sub(r'[^\w\-.]', '_', full_name)[:120] + '.json'


def _encode(value: Any) -> Any:
    """JSON default hook for references and element IDs."""
    if isinstance(value, Reference):
        return {'ref': value.elem_id.get_full_name()}
    if isinstance(value, ElemID):
        return value.get_full_name()
    return str(value)


class ReferenceDumper:
    """Writes linked instances and their references.

    Output structure:
        output_dir/
        ├── references.json
        └── instances/{elem_id full name}.json

    Args:
        output_dir: Root directory for output files.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, output_dir: str, pretty: bool = True) -> None:
        self._output_dir = output_dir
        self._indent = 2 if pretty else None

    def write_instances(self, instances: list[ConfigInstance]) -> None:
        """Write each instance as an individual JSON file."""
        dir_path = os.path.join(self._output_dir, 'instances')
        os.makedirs(dir_path, exist_ok=True)
        for inst in instances:
            envelope = {
                'elem_id': inst.full_name,
                'value': inst.value,
                'annotations': inst.annotations,
            }
            self._write_json(os.path.join(dir_path, _sanitize_filename(inst.full_name)), envelope)

    def write_references(self, references: dict[str, list[MappedReference]]) -> None:
        """Write the reference summary, keyed by recipe full name."""
        os.makedirs(self._output_dir, exist_ok=True)
        data = {
            '_metadata': {
                'generated_at': datetime.now(timezone.utc).isoformat(),
                'total_recipes': len(references),
                'total_references': sum(len(refs) for refs in references.values()),
            },
            'recipes': {
                name: [
                    {
                        'location': ref.location.get_full_name(),
                        'direction': ref.direction.value,
                        'target': ref.reference.get_full_name(),
                        'path_to_override': ref.path_to_override.get_full_name() if ref.path_to_override else None,
                    }
                    for ref in refs
                ]
                for name, refs in sorted(references.items())
            },
        }
        self._write_json(os.path.join(self._output_dir, 'references.json'), data)

    def _write_json(self, path: str, data: Any) -> None:
        """Write data as JSON to a file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self._indent, ensure_ascii=False, default=_encode)
