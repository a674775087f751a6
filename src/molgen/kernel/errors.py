"""Generator exceptions."""

from pathlib import Path
from typing import Iterable

from molgen.codes import GenerationCode


class GeneratorError(Exception):
    """Base exception for fatal generation errors."""

    code: GenerationCode = GenerationCode.INVALID_STRUCTURE


class MissingInputError(GeneratorError):
    """Raised when the schema file does not exist."""

    code = GenerationCode.MISSING_INPUT

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Schema file not found: {path}")


class EmptySchemaError(GeneratorError):
    """Raised when the schema file has no usable content."""

    code = GenerationCode.EMPTY_SCHEMA

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Schema file is empty: {path}")


class SchemaStructureError(GeneratorError):
    """Raised when the schema is not valid JSON or does not match the IR model."""

    code = GenerationCode.INVALID_STRUCTURE


class DuplicateDeclarationError(GeneratorError):
    """Raised when two declarations (or their generated names) collide."""

    code = GenerationCode.DUPLICATE_DECLARATION

    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        super().__init__(f"Duplicate declarations: {', '.join(self.names)}")


class InvalidDeclarationError(GeneratorError):
    """Raised when a declaration's shape does not match its kind."""

    code = GenerationCode.INVALID_DECLARATION

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid declaration '{name}': {reason}")


class UnresolvedReferenceError(GeneratorError):
    """Raised when types are referenced but neither declared nor in the catalog."""

    code = GenerationCode.UNRESOLVED_REFERENCE

    def __init__(self, missing: dict[str, set[str]]):
        # missing: referenced name -> declarations that reference it
        self.missing = missing
        parts = [
            f"{name} (referenced by {', '.join(sorted(users))})"
            for name, users in sorted(missing.items())
        ]
        super().__init__(f"Types referenced but not defined: {'; '.join(parts)}")


class CycleDetectedError(GeneratorError):
    """Raised when custom declarations reference each other in a cycle."""

    code = GenerationCode.CYCLE_DETECTED

    def __init__(self, cycle: list[str]):
        # Format cycle for message (remove duplicate final node)
        if len(cycle) > 1 and cycle[0] == cycle[-1]:
            cycle = cycle[:-1]
        self.cycle = cycle
        cycle_str = " -> ".join(cycle) + f" -> {cycle[0]}"
        super().__init__(f"Cycle detected in type references:\n  Cycle: {cycle_str}")
