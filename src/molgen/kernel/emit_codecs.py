"""Codec emission in dependency order.

Foundation codecs come first: they depend only on the runtime. Custom codecs
follow in the graph's topological order, so every name a codec expression
references is bound on an earlier line.
"""

import json
import logging
from typing import List, Sequence, Tuple

from .catalog import Bucket, FoundationCatalog
from .graph import TypeGraph
from .resolve import Resolver
from .schema import Declaration, Kind, MoleculeSchema

logger = logging.getLogger(__name__)


def emit_codec(decl: Declaration, resolver: Resolver) -> str:
    """Codec statement for one custom declaration."""
    name = decl.name
    if decl.kind.is_record:
        fields = decl.fields or ()
        if not fields:
            return f"{name} = mol.{decl.kind.value}({{}})"
        # Field order is the binary layout
        body = "".join(f"    {json.dumps(f.name)}: {resolver.codec_ref(f.type)},\n" for f in fields)
        return f"{name} = mol.{decl.kind.value}({{\n{body}}})"
    if decl.kind == Kind.ARRAY:
        return f"{name} = mol.byte_array({resolver.array_size(decl)})"
    if decl.kind == Kind.FIXVEC:
        return f"{name} = mol.fixvec({resolver.codec_ref(decl.item)})"
    if decl.kind == Kind.DYNVEC:
        return f"{name} = mol.dynvec({resolver.codec_ref(decl.item)})"
    if decl.kind == Kind.OPTION:
        return f"{name} = mol.option({resolver.codec_ref(decl.item)})"
    raise ValueError(f"Unhandled kind {decl.kind!r} for {name}")


def emit_codecs(
    schema: MoleculeSchema,
    catalog: FoundationCatalog,
    graph: TypeGraph,
    early_types: Sequence[str] = (),
) -> Tuple[List[str], List[str]]:
    """Return (foundation statements + custom statements, custom emission order)."""
    resolver = Resolver(schema, catalog)

    statements = []
    for decl in schema.declarations:
        if resolver.bucket(decl.name) != Bucket.CUSTOM:
            statements.append(f"{decl.name} = {catalog.get(decl.name).codec}")

    order = graph.topological_order(early_types)
    logger.debug("Custom codec emission order: %s", order)

    for name in order:
        statements.append(emit_codec(schema.get_declaration(name), resolver))
    return statements, order
