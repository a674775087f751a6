"""Foundation codecs imported by generated modules.

``mol`` holds the generic molecule primitives and combinators; ``ckb`` holds
CKB domain objects (scripts, outpoints, cells, transactions, witnesses).
"""

from . import ckb, mol

__all__ = ["ckb", "mol"]
