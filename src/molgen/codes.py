"""Generation error codes for molgen.

These constants prevent stringly-typed error codes and let callers
branch on the failure class without parsing messages.
"""

from enum import Enum


class GenerationCode(str, Enum):
    """Codes carried by every GeneratorError."""

    # Loader (fatal before any emission)
    MISSING_INPUT = "MISSING_INPUT"
    EMPTY_SCHEMA = "EMPTY_SCHEMA"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"

    # Validation (fatal before any emission)
    DUPLICATE_DECLARATION = "DUPLICATE_DECLARATION"
    INVALID_DECLARATION = "INVALID_DECLARATION"
    UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"
    CYCLE_DETECTED = "CYCLE_DETECTED"
