"""Foundation codec catalog and type classification.

The catalog is a closed-world allow-list of names the runtime already
provides, split into generic primitives and CKB domain objects. Every other
name is a custom declaration emitted by the generator.
"""

from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator


class Bucket(str, Enum):
    """Provenance of a type name."""
    FOUNDATION_PRIMITIVE = "foundation_primitive"
    FOUNDATION_DOMAIN = "foundation_domain"
    CUSTOM = "custom"


class FoundationType(BaseModel):
    """A catalog entry: how a foundation type is referenced in generated code."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    bucket: Literal["primitive", "domain"]
    codec: str  # Python expression evaluating to a mol.Codec
    semantic: str  # Python type expression of decoded values
    like: Optional[str] = None  # Python type expression accepted by encode
    byte_length: Optional[int] = None


class FoundationCatalog(BaseModel):
    """Allow-list of foundation types plus generator tables."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    catalog_version: str
    types: tuple[FoundationType, ...]
    array_sizes: Dict[str, int]
    default_array_size: int = 32
    early_types: tuple[str, ...] = ()
    legacy_artifacts: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_unique(self) -> "FoundationCatalog":
        seen = set()
        duplicates = set()
        for t in self.types:
            if t.name in seen:
                duplicates.add(t.name)
            seen.add(t.name)
        if duplicates:
            raise ValueError(f"Catalog types listed more than once: {sorted(duplicates)}")
        return self

    def get(self, name: str) -> FoundationType | None:
        for t in self.types:
            if t.name == name:
                return t
        return None

    @property
    def primitive_names(self) -> frozenset[str]:
        return frozenset(t.name for t in self.types if t.bucket == "primitive")

    @property
    def domain_names(self) -> frozenset[str]:
        return frozenset(t.name for t in self.types if t.bucket == "domain")

    def classify(self, name: str) -> Bucket:
        """Total classification: unknown names are custom."""
        if name in self.primitive_names:
            return Bucket.FOUNDATION_PRIMITIVE
        if name in self.domain_names:
            return Bucket.FOUNDATION_DOMAIN
        return Bucket.CUSTOM


def load_catalog(path: Union[str, Path, None] = None) -> FoundationCatalog:
    """Load a catalog from a JSON file, or the packaged one when path is None."""
    if path is None:
        data = resources.files("molgen").joinpath("data/foundation_catalog.json").read_bytes()
    else:
        data = Path(path).read_bytes()
    return FoundationCatalog.model_validate_json(data)


@lru_cache(maxsize=1)
def default_catalog() -> FoundationCatalog:
    """The packaged catalog, loaded once per process."""
    return load_catalog()


def classify(name: str, catalog: Optional[FoundationCatalog] = None) -> Bucket:
    """Classify a type name into exactly one bucket."""
    return (catalog or default_catalog()).classify(name)


def partition(names: Iterable[str], catalog: Optional[FoundationCatalog] = None) -> Dict[Bucket, List[str]]:
    """Split names into buckets, preserving input order within each bucket."""
    result: Dict[Bucket, List[str]] = {bucket: [] for bucket in Bucket}
    for name in names:
        result[classify(name, catalog)].append(name)
    return result
