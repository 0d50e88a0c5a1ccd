"""Reader for fetched instance exports."""
import json
import os
from typing import Any, List

from recipe_linker.domain.models import ConfigInstance, ElemID


class InstanceReadError(Exception):
    """Error reading an instance export."""
    pass


class InstanceReader:
    """Reads configuration instances from JSON export files.

    Accepts either a list of records:
        [{"elem_id": "zendesk.group.instance.support", "value": {...}, "annotations": {...}}]
    or an object mapping element full names to values:
        {"zendesk.group.instance.support": {...}}
    """

    def read(self, path: str) -> List[ConfigInstance]:
        """Read all instances from a file."""
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InstanceReadError(f"Failed to read {os.path.basename(path)}: {e}")

        if isinstance(data, dict):
            records = [{'elem_id': name, 'value': value} for name, value in data.items()]
        elif isinstance(data, list):
            records = data
        else:
            raise InstanceReadError(f"Unexpected export format in {os.path.basename(path)}")

        return [self._to_instance(record) for record in records]

    @staticmethod
    def _to_instance(record: Any) -> ConfigInstance:
        if not isinstance(record, dict) or not isinstance(record.get('elem_id'), str):
            raise InstanceReadError(f"Record without an elem_id: {record!r:.80}")
        try:
            elem_id = ElemID.from_full_name(record['elem_id'])
        except ValueError as e:
            raise InstanceReadError(str(e))
        value = record.get('value')
        if not isinstance(value, dict):
            raise InstanceReadError(f"Instance {record['elem_id']} value is not a record")
        return ConfigInstance(elem_id=elem_id, value=value, annotations=dict(record.get('annotations') or {}))
