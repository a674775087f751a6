"""Generator configuration: input/output locations and emission options."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from molgen.kernel.catalog import FoundationCatalog

DEFAULT_SCHEMA_PATH = Path("schemas") / "ckboost.json"
DEFAULT_OUTPUT_DIR = Path("generated")
INDEX_FILENAME = "__init__.py"


class GeneratorConfig(BaseModel):
    """Resolved settings for one generator run."""
    model_config = ConfigDict(frozen=True)

    schema_path: Path = DEFAULT_SCHEMA_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    early_types: Optional[tuple[str, ...]] = None  # None: use the catalog's list

    @property
    def stem(self) -> str:
        """Generated module name, taken from the schema file name."""
        return self.schema_path.stem

    @property
    def module_path(self) -> Path:
        return self.output_dir / f"{self.stem}.py"

    @property
    def index_path(self) -> Path:
        return self.output_dir / INDEX_FILENAME

    def resolve_early_types(self, catalog: FoundationCatalog) -> tuple[str, ...]:
        return catalog.early_types if self.early_types is None else self.early_types

    def legacy_paths(self, catalog: FoundationCatalog) -> List[Path]:
        """Artifacts left by earlier generator versions."""
        return [self.output_dir / pattern.format(stem=self.stem) for pattern in catalog.legacy_artifacts]
