import json
from typing import Any, Sequence


def truncate_depth(value: Any, max_depth: int, _depth: int = 0) -> Any:
    """
    Collapse containers nested deeper than `max_depth` into their string form.

    The value passed in sits at depth 0, so with `max_depth=1` a record keeps
    its own properties and the properties of directly nested objects, while
    anything below that becomes a string.
    """
    if isinstance(value, dict):
        if _depth > max_depth:
            return str(value)
        return {
            key: truncate_depth(item, max_depth, _depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        if _depth > max_depth:
            return str(value)
        return [truncate_depth(item, max_depth, _depth + 1) for item in value]
    return value


def serialize_records(records: Sequence[Any], max_depth: int) -> str:
    truncated = [truncate_depth(record, max_depth) for record in records]
    return json.dumps(truncated, indent=2, ensure_ascii=False, default=str)
