"""Semantic type emission: TypedDict records and aliases."""

import json
import keyword
from typing import List

from .catalog import Bucket, FoundationCatalog
from .resolve import Resolver, type_name
from .schema import Declaration, Kind, MoleculeSchema


def _record(decl: Declaration, resolver: Resolver) -> str:
    name = type_name(decl.name)
    fields = decl.fields or ()
    if any(not f.name.isidentifier() or keyword.iskeyword(f.name) for f in fields):
        # Functional syntax accepts any string key
        body = "".join(f"    {json.dumps(f.name)}: {resolver.semantic(f.type)},\n" for f in fields)
        return f'{name} = TypedDict("{name}", {{\n{body}}})'
    if not fields:
        return f"class {name}(TypedDict):\n    pass"
    body = "\n".join(f"    {f.name}: {resolver.semantic(f.type)}" for f in fields)
    return f"class {name}(TypedDict):\n{body}"


def emit_types(schema: MoleculeSchema, catalog: FoundationCatalog) -> List[str]:
    """One statement per declaration, in schema order.

    Custom references are string forward references, so the statements
    can appear in any order.
    """
    resolver = Resolver(schema, catalog)
    statements = []
    for decl in schema.declarations:
        name = type_name(decl.name)
        if resolver.bucket(decl.name) != Bucket.CUSTOM:
            statements.append(f"{name} = {resolver.semantic(decl.name)}")
        elif decl.kind.is_record:
            statements.append(_record(decl, resolver))
        elif decl.kind == Kind.ARRAY:
            statements.append(f"{name} = mol.Hex")
        elif decl.kind.is_vector:
            statements.append(f"{name} = List[{resolver.semantic(decl.item)}]")
        elif decl.kind == Kind.OPTION:
            statements.append(f"{name} = Optional[{resolver.semantic(decl.item)}]")
    return statements
