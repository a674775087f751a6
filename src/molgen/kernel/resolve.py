"""Name resolution shared by the emitters."""

import re
from typing import Dict, Optional

from .catalog import Bucket, FoundationCatalog
from .schema import Declaration, Kind, MoleculeSchema

_CAMEL_BOUNDARY_1 = re.compile(r"(.)([A-Z][a-z]+)")
_CAMEL_BOUNDARY_2 = re.compile(r"([a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """CamelCase -> snake_case ("UDTAssetVec" -> "udt_asset_vec")."""
    s = _CAMEL_BOUNDARY_1.sub(r"\1_\2", name)
    return _CAMEL_BOUNDARY_2.sub(r"\1_\2", s).lower()


def type_name(name: str) -> str:
    """Name of the semantic type alias for a declaration."""
    return f"{name}Type"


def serializer_name(name: str) -> str:
    """Name of the serialize wrapper for a declaration."""
    return f"serialize_{snake_case(name)}"


class Resolver:
    """Resolves type names to Python expressions for one schema."""

    def __init__(self, schema: MoleculeSchema, catalog: FoundationCatalog):
        self.schema = schema
        self.catalog = catalog
        self.declared = set(schema.names())
        self._sizes: Dict[str, Optional[int]] = {}

    def bucket(self, name: str) -> Bucket:
        return self.catalog.classify(name)

    def semantic(self, name: str) -> str:
        """Type expression for decoded values of ``name``.

        Custom types are quoted forward references, so type definitions
        do not depend on emission order.
        """
        entry = self.catalog.get(name)
        if entry is not None:
            return entry.semantic
        return f'"{type_name(name)}"'

    def like(self, name: str) -> str:
        """Type expression accepted by ``encode`` for ``name``."""
        entry = self.catalog.get(name)
        if entry is not None:
            return entry.like or entry.semantic
        return f'"{type_name(name)}"'

    def codec_ref(self, name: str) -> str:
        """Expression referencing the codec of ``name`` in generated code.

        Declared names are referenced by their module-level constant;
        foundation names the schema does not declare are inlined.
        """
        if name in self.declared:
            return name
        entry = self.catalog.get(name)
        if entry is not None:
            return entry.codec
        # Unreachable after validation: dangling names are rejected by TypeGraph
        return name

    def fixed_size(self, name: str) -> Optional[int]:
        """Byte length of a fixed-size type, or None for dynamic ones."""
        if name in self._sizes:
            return self._sizes[name]
        entry = self.catalog.get(name)
        decl = self.schema.get_declaration(name)
        size: Optional[int] = None
        if entry is not None:
            size = entry.byte_length
        elif decl is not None:
            if decl.kind == Kind.ARRAY:
                size = self.array_size(decl)
            elif decl.kind == Kind.STRUCT:
                sizes = [self.fixed_size(f.type) for f in decl.fields or ()]
                size = None if any(s is None for s in sizes) else sum(sizes)
        self._sizes[name] = size
        return size

    def array_size(self, decl: Declaration) -> int:
        """Byte length of an array declaration.

        Well-known names use the catalog size table; otherwise item_count
        times the item size when both are known; otherwise the default.
        """
        if decl.name in self.catalog.array_sizes:
            return self.catalog.array_sizes[decl.name]
        if decl.item_count is not None and decl.item is not None:
            item_size = self.fixed_size(decl.item)
            if item_size is not None:
                return decl.item_count * item_size
        return self.catalog.default_array_size
