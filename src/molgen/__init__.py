"""molgen: schema-driven molecule codec generator."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("molgen")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from molgen.api import generate, build_module, GenerationResult
from molgen.codes import GenerationCode
from molgen.kernel.catalog import Bucket, classify, load_catalog
from molgen.kernel.errors import GeneratorError
from molgen.kernel.loader import load_schema

__all__ = [
    "__version__",
    "generate",
    "build_module",
    "GenerationResult",
    "GenerationCode",
    "Bucket",
    "classify",
    "load_catalog",
    "load_schema",
    "GeneratorError",
]
