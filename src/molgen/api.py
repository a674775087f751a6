"""Public API for molgen.

High-level functions that return complete, structured results. The CLI is a
thin wrapper over ``generate``.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from molgen._internal.canonical_json import sha256_digest
from molgen.config import DEFAULT_OUTPUT_DIR, DEFAULT_SCHEMA_PATH, GeneratorConfig
from molgen.kernel.catalog import FoundationCatalog, default_catalog, partition
from molgen.kernel.errors import SchemaStructureError
from molgen.kernel.graph import TypeGraph
from molgen.kernel.loader import load_schema
from molgen.kernel.module import render_index, render_module
from molgen.kernel.schema import MoleculeSchema
from molgen.kernel.validate import validate_schema

logger = logging.getLogger(__name__)


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


class GenerationResult(BaseModel):
    """Stable result model for one generator run."""
    schema_path: str
    module_path: str
    index_path: str
    namespace: str
    schema_digest: str
    buckets: Dict[str, List[str]]  # bucket -> declaration names, schema order
    emission_order: List[str]  # custom codec order in the generated module
    stale: List[str] = Field(default_factory=list)  # outputs that differed from the rendered content
    written: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)  # legacy artifacts deleted

    @property
    def up_to_date(self) -> bool:
        return not self.stale


def schema_digest(schema: MoleculeSchema) -> str:
    """Digest of the canonical schema IR, embedded in generated modules."""
    return sha256_digest(schema.model_dump(mode="json", by_alias=True, exclude_none=True))


def build_module(
    schema: MoleculeSchema,
    *,
    stem: str,
    source_name: str,
    catalog: Optional[FoundationCatalog] = None,
    early_types: Optional[Sequence[str]] = None,
) -> Tuple[str, List[str], TypeGraph]:
    """Validate a schema and render its module source.

    Returns (source, custom emission order, reference graph).
    """
    catalog = catalog or default_catalog()
    graph = validate_schema(schema, catalog)
    source, order = render_module(
        schema,
        catalog,
        graph,
        stem=stem,
        source_name=source_name,
        digest=schema_digest(schema),
        early_types=catalog.early_types if early_types is None else early_types,
    )
    return source, order, graph


def _read_existing(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def generate(
    schema_path: Union[str, os.PathLike, Path] = DEFAULT_SCHEMA_PATH,
    output_dir: Union[str, os.PathLike, Path] = DEFAULT_OUTPUT_DIR,
    *,
    catalog: Optional[FoundationCatalog] = None,
    early_types: Optional[Sequence[str]] = None,
    check: bool = False,
) -> GenerationResult:
    """Run the generator: load, validate, emit, write.

    Outputs are only rewritten when their content changes. With ``check=True``
    nothing is written or removed; ``result.stale`` lists what would change.

    Raises:
        GeneratorError: any loader or validation failure. Nothing is
        written in that case.
    """
    config = GeneratorConfig(
        schema_path=_normalize_path(schema_path),
        output_dir=_normalize_path(output_dir),
        early_types=tuple(early_types) if early_types is not None else None,
    )
    catalog = catalog or default_catalog()

    schema = load_schema(config.schema_path)
    if not config.stem.isidentifier():
        raise SchemaStructureError(
            f"Schema file name '{config.schema_path.name}' is not a valid Python module name"
        )

    source, order, _ = build_module(
        schema,
        stem=config.stem,
        source_name=config.schema_path.name,
        catalog=catalog,
        early_types=config.resolve_early_types(catalog),
    )
    outputs = [
        (config.module_path, source),
        (config.index_path, render_index(config.stem)),
    ]

    stale = [path for path, content in outputs if _read_existing(path) != content]
    legacy = [path for path in config.legacy_paths(catalog) if path.exists()]

    written: List[str] = []
    removed: List[str] = []
    if not check:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        for path, content in outputs:
            if path in stale:
                path.write_text(content, encoding="utf-8")
                written.append(str(path))
                logger.debug("Wrote %s", path)
        for path in legacy:
            path.unlink()
            removed.append(str(path))
            logger.debug("Removed legacy artifact %s", path)

    buckets = partition(schema.names(), catalog)
    return GenerationResult(
        schema_path=str(config.schema_path),
        module_path=str(config.module_path),
        index_path=str(config.index_path),
        namespace=schema.namespace,
        schema_digest=schema_digest(schema),
        buckets={bucket.value: names for bucket, names in buckets.items()},
        emission_order=order,
        stale=[str(p) for p in stale + legacy],
        written=written,
        removed=removed,
    )
