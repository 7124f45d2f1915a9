"""Schema validation helpers.

Schemas are JSON Schema documents serialized as YAML and bundled under
``assetpipe/data/schemas/``.
"""
from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft202012Validator

from assetpipe.core.exceptions import ConfigError
from assetpipe.data import read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema, e.g. ``"config/config.schema"``.

    Appends ``.yaml`` when no extension is given.

    Raises:
        FileNotFoundError: If the schema does not exist
        ValueError: If the schema is not a YAML mapping
    """
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        ConfigError: Listing every violation, with its dotted location.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if not errors:
        return

    messages = []
    for err in errors:
        location = ".".join(str(p) for p in err.path) or "<root>"
        messages.append(f"{location}: {err.message}")
    raise ConfigError(
        f"Validation failed against schema '{schema_name}': " + "; ".join(messages),
        context={"schema": schema_name, "errors": messages},
    )


__all__ = ["load_schema", "validate_payload"]
