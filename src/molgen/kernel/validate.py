"""Schema validation run before any code is emitted."""

import builtins
import keyword
from collections import Counter

from .catalog import Bucket, FoundationCatalog
from .errors import DuplicateDeclarationError, InvalidDeclarationError
from .graph import TypeGraph
from .resolve import Resolver, serializer_name, type_name
from .schema import Kind, MoleculeSchema

# Names the generated module binds itself or calls as builtins
RESERVED_NAMES = frozenset(
    {"mol", "ckb", "List", "Optional", "TypedDict", "SCHEMA_DIGEST"} | set(dir(builtins))
)


def _check_shape(schema: MoleculeSchema) -> None:
    for decl in schema.declarations:
        if not decl.name.isidentifier() or keyword.iskeyword(decl.name):
            raise InvalidDeclarationError(decl.name, "name is not a valid Python identifier")
        if decl.name in RESERVED_NAMES:
            raise InvalidDeclarationError(decl.name, "name is reserved in generated modules")

        if decl.kind.is_record:
            if decl.fields is None:
                raise InvalidDeclarationError(decl.name, f"{decl.kind.value} requires 'fields'")
            if decl.item is not None:
                raise InvalidDeclarationError(decl.name, f"{decl.kind.value} cannot have 'item'")
            counts = Counter(f.name for f in decl.fields)
            repeated = sorted(n for n, c in counts.items() if c > 1)
            if repeated:
                raise InvalidDeclarationError(decl.name, f"duplicate fields {repeated}")
        else:
            if decl.item is None:
                raise InvalidDeclarationError(decl.name, f"{decl.kind.value} requires 'item'")
            if decl.fields is not None:
                raise InvalidDeclarationError(decl.name, f"{decl.kind.value} cannot have 'fields'")

        if decl.item_count is not None and decl.kind != Kind.ARRAY:
            raise InvalidDeclarationError(decl.name, "'item_count' is only valid on arrays")


def _check_collisions(schema: MoleculeSchema) -> None:
    counts = Counter(schema.names())
    duplicates = [name for name, c in counts.items() if c > 1]
    if duplicates:
        raise DuplicateDeclarationError(duplicates)

    # Codec constants, type aliases and wrappers share one module namespace
    generated = Counter()
    for name in schema.names():
        generated[name] += 1
        generated[type_name(name)] += 1
        generated[serializer_name(name)] += 1
    clashes = [name for name, c in generated.items() if c > 1]
    if clashes:
        raise DuplicateDeclarationError(clashes)


def _check_fixed_sizes(schema: MoleculeSchema, catalog: FoundationCatalog) -> None:
    resolver = Resolver(schema, catalog)
    for decl in schema.declarations:
        if catalog.classify(decl.name) != Bucket.CUSTOM:
            continue
        if decl.kind == Kind.STRUCT:
            for f in decl.fields or ():
                if resolver.fixed_size(f.type) is None:
                    raise InvalidDeclarationError(
                        decl.name, f"struct field '{f.name}' has dynamic type '{f.type}'"
                    )
        elif decl.kind == Kind.FIXVEC and resolver.fixed_size(decl.item) is None:
            raise InvalidDeclarationError(decl.name, f"fixvec item '{decl.item}' has dynamic size")


def validate_schema(schema: MoleculeSchema, catalog: FoundationCatalog) -> TypeGraph:
    """Validate a schema and return its reference graph.

    Raises:
        InvalidDeclarationError: a declaration's shape does not match its kind.
        DuplicateDeclarationError: names (or generated names) collide.
        UnresolvedReferenceError: a referenced type is neither declared nor in the catalog.
        CycleDetectedError: custom declarations embed each other.
    """
    _check_shape(schema)
    _check_collisions(schema)
    graph = TypeGraph(schema, catalog)
    _check_fixed_sizes(schema, catalog)
    return graph
