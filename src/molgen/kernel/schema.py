"""Pydantic models for the molecule schema IR (moleculec JSON output)."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Kind(str, Enum):
    """Structural kind of a declaration."""
    ARRAY = "array"
    STRUCT = "struct"
    TABLE = "table"
    FIXVEC = "fixvec"
    DYNVEC = "dynvec"
    OPTION = "option"

    @property
    def is_record(self) -> bool:
        return self in (Kind.STRUCT, Kind.TABLE)

    @property
    def is_vector(self) -> bool:
        return self in (Kind.FIXVEC, Kind.DYNVEC)


class SchemaField(BaseModel):
    """A named, typed field of a struct or table."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: str  # Declaration name or the primitive "byte"


class Declaration(BaseModel):
    """One named type definition.

    ``type`` in the JSON is the structural kind; it is exposed as ``kind``
    here to keep it apart from field types.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str
    kind: Kind = Field(alias="type")
    fields: Optional[tuple[SchemaField, ...]] = None
    item: Optional[str] = None
    item_count: Optional[int] = Field(None, ge=1, description="Array length in items (arrays only)")

    def references(self) -> tuple[str, ...]:
        """Type names this declaration refers to, in declared order."""
        if self.fields is not None:
            return tuple(f.type for f in self.fields)
        if self.item is not None:
            return (self.item,)
        return ()


class MoleculeSchema(BaseModel):
    """A parsed schema: namespace, imports, ordered declarations."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: str = ""
    imports: tuple[Any, ...] = ()
    syntax_version: Optional[Dict[str, Any]] = None
    declarations: tuple[Declaration, ...]

    def names(self) -> List[str]:
        """Declaration names in schema order."""
        return [d.name for d in self.declarations]

    def get_declaration(self, name: str) -> Declaration | None:
        """Get a declaration by name (last one wins on duplicates)."""
        found = None
        for d in self.declarations:
            if d.name == name:
                found = d
        return found

    def position(self) -> Dict[str, int]:
        """Map declaration name -> index in schema order."""
        return {d.name: i for i, d in enumerate(self.declarations)}
