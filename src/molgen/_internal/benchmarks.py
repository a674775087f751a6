"""Performance sentinel benchmarks for code generation."""

from __future__ import annotations

import os
from time import perf_counter
from typing import Any, Dict, List, Tuple

from molgen.api import build_module
from molgen.kernel.loader import load_schema_from_dict


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_LINEAR_CHAIN_MS = _budget_from_env("MOLGEN_MAX_LINEAR_CHAIN_MS", 1000.0)
MAX_WIDE_FANOUT_MS = _budget_from_env("MOLGEN_MAX_WIDE_FANOUT_MS", 1000.0)
MAX_REVERSED_SCHEMA_MS = _budget_from_env("MOLGEN_MAX_REVERSED_SCHEMA_MS", 1000.0)


def linear_chain(length: int) -> Dict[str, Any]:
    """T0 <- T1 <- ... : each table embeds the previous one."""
    declarations: List[Dict[str, Any]] = [
        {"type": "table", "name": "T0", "fields": [{"name": "value", "type": "Uint64"}]}
    ]
    for i in range(1, length):
        declarations.append({
            "type": "table",
            "name": f"T{i}",
            "fields": [{"name": "prev", "type": f"T{i - 1}"}, {"name": "tag", "type": "Bytes"}],
        })
    return {"namespace": "linear_chain", "declarations": declarations}


def wide_fanout(width: int) -> Dict[str, Any]:
    """One root table with ``width`` dependent tables and one vector each."""
    declarations: List[Dict[str, Any]] = [
        {"type": "table", "name": "Root", "fields": [{"name": "owner", "type": "Script"}]}
    ]
    for i in range(width):
        declarations.append({
            "type": "table",
            "name": f"Leaf{i}",
            "fields": [{"name": "root", "type": "Root"}, {"name": "amount", "type": "Uint128"}],
        })
        declarations.append({"type": "dynvec", "name": f"Leaf{i}Vec", "item": f"Leaf{i}"})
    return {"namespace": "wide_fanout", "declarations": declarations}


def reversed_schema(length: int) -> Dict[str, Any]:
    """Linear chain declared dependents-first, so every reference is forward."""
    schema = linear_chain(length)
    schema["declarations"] = list(reversed(schema["declarations"]))
    return schema


def run_sentinel_case(schema_data: Dict[str, Any]) -> Tuple[float, str, List[str]]:
    """Render one schema; return elapsed ms, source and custom emission order."""
    start = perf_counter()
    schema = load_schema_from_dict(schema_data)
    source, order, _ = build_module(schema, stem=schema.namespace, source_name=f"{schema.namespace}.json")
    elapsed_ms = (perf_counter() - start) * 1000.0
    return elapsed_ms, source, order
