"""Pytest configuration for tests.

No sys.path hacks - tests import from the installed molgen package. Generated
modules are written under tmp_path and imported by file location.
"""

import importlib.util
import itertools
import json
import os
import pytest
from pathlib import Path

from molgen.api import generate

_module_ids = itertools.count()


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance sentinel benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


def import_module_from(path: Path):
    """Import a generated module under a unique name."""
    spec = importlib.util.spec_from_file_location(f"_molgen_generated_{next(_module_ids)}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_schema(path: Path, declarations, namespace: str = "test") -> Path:
    path.write_text(
        json.dumps({"namespace": namespace, "imports": [], "declarations": declarations}, indent=2),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def generated(tmp_path):
    """Generate a module from declarations and import it."""
    def _generate(declarations, stem: str = "schema"):
        schema_path = write_schema(tmp_path / f"{stem}.json", declarations)
        result = generate(schema_path, tmp_path / "out")
        return import_module_from(Path(result.module_path))
    return _generate


def pytest_sessionfinish(session, exitstatus):
    """Best-effort cleanup for basetemp on Windows without patching pytest internals."""
    if os.name != "nt":
        return
    basetemp = getattr(session.config.option, "basetemp", None)
    if not basetemp:
        return
    basetemp_path = Path(basetemp)
    if not basetemp_path.exists():
        return
    try:
        import shutil
        shutil.rmtree(basetemp_path)
    except (PermissionError, OSError):
        # If cleanup fails, let it surface as a warning rather than masking errors.
        import warnings
        warnings.warn(f"Could not remove basetemp: {basetemp_path}")
