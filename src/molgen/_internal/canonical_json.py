"""Centralized canonical JSON serialization.

Used for the schema digest embedded in generated modules, so that the
digest (and therefore the generated output) is byte-stable across platforms.
"""

import hashlib
import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization for byte-stable digests.

    Rules:
    - UTF-8 encoding
    - Sorted keys
    - Stable separators (",", ":")
    - Lists keep their order (declaration order is significant)
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False  # UTF-8 encoding
    )


def sha256_digest(obj: Any) -> str:
    """Return "sha256:<hex>" of the canonical JSON form of obj."""
    payload = canonical_dumps(obj).encode("utf-8")
    return "sha256:" + hashlib.sha256(payload).hexdigest()
