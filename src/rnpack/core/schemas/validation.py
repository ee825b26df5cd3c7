"""Shared schema validation utilities.

Schemas are JSON Schema documents stored as YAML under
``rnpack.data/schemas/`` and loaded in one consistent way.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft202012Validator

from rnpack.core.exceptions import ConfigError
from rnpack.core.utils.io import read_yaml
from rnpack.data import get_data_path


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema; ``.yaml`` is appended when no extension is given."""
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        ConfigError: listing every violation, each prefixed with its JSON path.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return

    messages = []
    for err in errors:
        location = ".".join(str(p) for p in err.absolute_path) or "<root>"
        messages.append(f"{location}: {err.message}")
    raise ConfigError(
        f"Validation failed against schema '{schema_name}': " + "; ".join(messages),
        context={"errors": messages},
    )


__all__ = ["load_schema", "validate_payload"]
