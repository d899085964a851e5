"""JSON export and import of the full dataset.

Decoding distinguishes text that is not JSON at all (``JsonSyntaxError``)
from JSON whose top-level shape or field types are wrong
(``JsonStructureError``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from src.errors.boundary import OperationResult, with_error_handling
from src.tracker.exceptions import JsonStructureError, JsonSyntaxError
from src.tracker.models import AppData

SCHEMA_NAME = "app_data"

_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    return Path(__file__).parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        _schema_cache[schema_name] = json.loads(schema_path.read_text(encoding="utf-8"))
    return _schema_cache[schema_name]


def encode_json(data: AppData) -> str:
    """Pretty-print the dataset with 2-space indentation, sprints first."""
    return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise JsonSyntaxError(f"Invalid JSON format: non-finite number {name}", {"value": name})


def parse_json_payload(text: str) -> dict[str, Any]:
    """Parse and shape-check JSON text, returning the raw camelCase payload.

    Raises:
        JsonSyntaxError: The text is not parsable JSON, or uses the
            non-standard NaN or Infinity literals.
        JsonStructureError: The top-level keys are missing or a field has
            the wrong type.
    """
    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise JsonSyntaxError(
            f"Invalid JSON format: {e.msg}", {"line": e.lineno, "column": e.colno}
        ) from None

    if not isinstance(payload, dict) or not isinstance(payload.get("sprints"), list):
        raise JsonStructureError("Invalid JSON format: Missing or invalid sprints array")
    if not isinstance(payload.get("config"), dict):
        raise JsonStructureError("Invalid JSON format: Missing or invalid config object")

    try:
        jsonschema.validate(instance=payload, schema=_load_schema(SCHEMA_NAME))
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise JsonStructureError(
            f"Invalid JSON format: {e.message} at {path}", {"path": path}
        ) from None
    return payload


def parse_json(text: str) -> AppData:
    return AppData.from_dict(parse_json_payload(text))


def decode_json(text: str) -> OperationResult[AppData]:
    return with_error_handling(lambda: parse_json(text), "decode_json")
