"""Assemble the generated module and its barrel file."""

from typing import List, Sequence, Tuple

from .catalog import FoundationCatalog
from .emit_codecs import emit_codecs
from .emit_serialize import emit_serializers
from .emit_types import emit_types
from .graph import TypeGraph
from .resolve import serializer_name, type_name
from .schema import MoleculeSchema

HEADER_TEMPLATE = '''"""Generated molecule codecs for the {stem} schema.

Source: {source}

Do not edit by hand. Regenerate with `molgen`.
"""

from typing import List, Optional, TypedDict

from molgen.runtime import ckb, mol

SCHEMA_DIGEST = "{digest}"'''


def _docstring_text(text: str) -> str:
    """Escape text for a line inside a triple-quoted docstring."""
    escaped = text.encode("unicode_escape").decode("ascii")
    return escaped.replace('"', '\\"')


def render_statements(statements: Sequence[str]) -> str:
    """Join statements with PEP 8 spacing.

    Two blank lines around class/def blocks, one around other multi-line
    statements, none between consecutive one-liners.
    """
    out: List[str] = []
    prev_def = False
    prev_multi = False
    for stmt in statements:
        is_def = stmt.startswith(("class ", "def "))
        is_multi = "\n" in stmt
        if out:
            if is_def or prev_def:
                out.append("\n\n\n")
            elif is_multi or prev_multi:
                out.append("\n\n")
            else:
                out.append("\n")
        out.append(stmt)
        prev_def, prev_multi = is_def, is_multi
    return "".join(out)


def render_module(
    schema: MoleculeSchema,
    catalog: FoundationCatalog,
    graph: TypeGraph,
    *,
    stem: str,
    source_name: str,
    digest: str,
    early_types: Sequence[str] = (),
) -> Tuple[str, List[str]]:
    """Render the generated module source.

    Returns (source, custom codec emission order). The output contains no
    timestamps or unordered iteration, so identical inputs give identical
    bytes.
    """
    source = source_name if not schema.namespace else f"{source_name} (namespace: {schema.namespace})"
    header = HEADER_TEMPLATE.format(stem=stem, source=_docstring_text(source), digest=digest)

    codecs, order = emit_codecs(schema, catalog, graph, early_types)

    names = schema.names()
    exported = sorted(
        ["SCHEMA_DIGEST"]
        + names
        + [type_name(n) for n in names]
        + [serializer_name(n) for n in names]
    )
    all_block = "__all__ = [\n" + "".join(f'    "{n}",\n' for n in exported) + "]"

    sections = [
        header,
        "# Semantic types\n" + render_statements(emit_types(schema, catalog)),
        "# Codecs\n" + render_statements(codecs),
        "# Serialize wrappers\n" + render_statements(emit_serializers(schema, catalog)),
        all_block,
    ]
    return "\n\n\n".join(sections) + "\n", order


def render_index(stem: str) -> str:
    """Barrel module re-exporting the generated module."""
    return (
        f'"""Generated exports for the {stem} schema. Do not edit by hand."""\n'
        "\n"
        f"from .{stem} import *  # noqa: F401,F403\n"
        f"from .{stem} import __all__  # noqa: F401\n"
    )
