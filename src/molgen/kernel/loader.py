"""Schema IR loading."""

import json
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from .errors import EmptySchemaError, MissingInputError, SchemaStructureError
from .schema import MoleculeSchema


def load_schema_from_dict(data: Dict[str, Any]) -> MoleculeSchema:
    """Load a schema from an already-parsed dict."""
    try:
        return MoleculeSchema.model_validate(data)
    except ValidationError as e:
        raise SchemaStructureError(f"Schema does not match the molecule IR: {e}") from e


def load_schema(path: Union[str, Path]) -> MoleculeSchema:
    """Load a molecule schema IR from a JSON file.

    Raises:
        MissingInputError: the file does not exist.
        EmptySchemaError: the file is empty, whitespace only, or declares nothing.
        SchemaStructureError: the content is not a valid schema IR.
    """
    schema_path = Path(path)
    if not schema_path.is_file():
        raise MissingInputError(schema_path)

    try:
        content = schema_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SchemaStructureError(f"Schema file is not valid UTF-8: {schema_path}") from e
    if not content.strip():
        raise EmptySchemaError(schema_path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise SchemaStructureError(f"Invalid JSON in {schema_path}: {e}") from e
    if not isinstance(data, dict):
        raise SchemaStructureError(f"Schema root must be an object, got {type(data).__name__}")

    schema = load_schema_from_dict(data)
    if not schema.declarations:
        raise EmptySchemaError(schema_path)
    return schema
