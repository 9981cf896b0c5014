# /src/aave_positions/schema.py
from typing import Any, Dict, List, Union

from jsonschema import Draft202012Validator

SNAPSHOT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Aave v3 net positions snapshot",
    "type": "object",
    "required": ["address", "timestamp", "networks", "errors", "meta"],
    "additionalProperties": False,
    "properties": {
        "address": {"type": "string", "pattern": "^0x[0-9a-fA-F]{40}$"},
        "timestamp": {"type": "integer", "minimum": 0},
        "networks": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": {"type": "number"},
            },
        },
        "errors": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "meta": {
            "type": "object",
            "required": ["data_provider", "latency_ms", "version"],
            "properties": {
                "data_provider": {"type": "string"},
                "latency_ms": {"type": "integer", "minimum": 0},
                "version": {"type": "string"},
            },
        },
    },
}

Draft202012Validator.check_schema(SNAPSHOT_SCHEMA)


def json_pointer(e_path: List[Union[str, int]]) -> str:
    """
    Format a jsonschema error path like $.a[0].b
    """
    out = "$"
    for seg in e_path:
        if isinstance(seg, int):
            out += f"[{seg}]"
        else:
            out += f".{seg}"
    return out


def validate_snapshot(data: Any) -> List[str]:
    """Return one '$.path: message' line per schema violation (empty when valid)."""
    validator = Draft202012Validator(SNAPSHOT_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    return [f"{json_pointer(list(e.path))}: {e.message}" for e in errors]
