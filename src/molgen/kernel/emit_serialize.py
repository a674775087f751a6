"""Serialize wrappers: one per declaration, all returning plain bytes."""

from typing import List

from .catalog import FoundationCatalog
from .resolve import Resolver, serializer_name
from .schema import MoleculeSchema


def emit_serializers(schema: MoleculeSchema, catalog: FoundationCatalog) -> List[str]:
    resolver = Resolver(schema, catalog)
    return [
        f"def {serializer_name(decl.name)}(value: {resolver.like(decl.name)}) -> bytes:\n"
        f"    return bytes({decl.name}.encode(value))"
        for decl in schema.declarations
    ]
