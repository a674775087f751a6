"""CKB domain objects with molecule serialization.

Each class accepts its "like" form through ``from_`` (an instance or a plain
mapping, snake_case or camelCase keys), serializes with ``to_bytes`` and
parses with ``from_bytes``. ``mol.entity(cls)`` adapts any of them to the
plain codec shape.
"""

import hashlib
from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from . import mol

CKB_HASH_PERSONALIZATION = b"ckb-default-hash"

HASH_TYPES = {"data": 0, "type": 1, "data1": 2, "data2": 4}
DEP_TYPES = {"code": 0, "dep_group": 1}

HexField = Annotated[str, BeforeValidator(mol.hex_from)]
NumField = Annotated[int, BeforeValidator(mol.num_from)]


def ckb_hash(data: mol.BytesLike) -> mol.Hex:
    """blake2b-256 with the CKB personalization."""
    digest = hashlib.blake2b(mol.bytes_from(data), digest_size=32, person=CKB_HASH_PERSONALIZATION)
    return "0x" + digest.hexdigest()


def _hash_type_from(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        for name, code in HASH_TYPES.items():
            if code == value:
                return name
    return value


def _dep_type_from(value: Any) -> Any:
    if value == "depGroup":
        return "dep_group"
    if isinstance(value, int) and not isinstance(value, bool):
        for name, code in DEP_TYPES.items():
            if code == value:
                return name
    return value


def _lookup_encoder(table: Dict[str, int], kind: str):
    def encode(value: str) -> int:
        try:
            return table[value]
        except KeyError as e:
            raise mol.CodecError(f"Unknown {kind}: {value!r}") from e
    return encode


def _lookup_decoder(table: Dict[str, int], kind: str):
    reverse = {code: name for name, code in table.items()}

    def decode(code: int) -> str:
        try:
            return reverse[code]
        except KeyError as e:
            raise mol.CodecError(f"Unknown {kind} byte: {code}") from e
    return decode


HashTypeCodec = mol.Byte.map(
    in_map=_lookup_encoder(HASH_TYPES, "hash type"),
    out_map=_lookup_decoder(HASH_TYPES, "hash type"),
)
DepTypeCodec = mol.Byte.map(
    in_map=_lookup_encoder(DEP_TYPES, "dep type"),
    out_map=_lookup_decoder(DEP_TYPES, "dep type"),
)


class Entity(BaseModel):
    """Base class for CKB domain objects."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    BYTE_LENGTH: ClassVar[Optional[int]] = None

    @classmethod
    def layout(cls) -> mol.Codec:
        raise NotImplementedError

    @classmethod
    def from_(cls, value: Any) -> "Entity":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(f"Cannot build {cls.__name__} from {type(value).__name__}")

    def _to_layout(self) -> Dict[str, Any]:
        return {
            (info.alias or name): getattr(self, name)
            for name, info in type(self).model_fields.items()
        }

    def to_bytes(self) -> bytes:
        return self.layout().encode(self._to_layout())

    @classmethod
    def from_bytes(cls, data: mol.BytesLike) -> "Entity":
        return cls.model_validate(cls.layout().decode(data))

    def hash(self) -> mol.Hex:
        return ckb_hash(self.to_bytes())


class Script(Entity):
    code_hash: HexField = Field(validation_alias=AliasChoices("code_hash", "codeHash"))
    hash_type: Annotated[Literal["data", "type", "data1", "data2"], BeforeValidator(_hash_type_from)] = Field(
        validation_alias=AliasChoices("hash_type", "hashType")
    )
    args: HexField = "0x"

    @classmethod
    def layout(cls) -> mol.Codec:
        return SCRIPT_LAYOUT


class OutPoint(Entity):
    BYTE_LENGTH: ClassVar[Optional[int]] = 36

    tx_hash: HexField = Field(validation_alias=AliasChoices("tx_hash", "txHash"))
    index: NumField

    @classmethod
    def layout(cls) -> mol.Codec:
        return OUT_POINT_LAYOUT


class CellInput(Entity):
    BYTE_LENGTH: ClassVar[Optional[int]] = 44

    since: NumField = 0
    previous_output: OutPoint = Field(validation_alias=AliasChoices("previous_output", "previousOutput"))

    @classmethod
    def layout(cls) -> mol.Codec:
        return CELL_INPUT_LAYOUT


class CellOutput(Entity):
    capacity: NumField
    lock: Script
    type_: Optional[Script] = Field(default=None, alias="type")

    @classmethod
    def layout(cls) -> mol.Codec:
        return CELL_OUTPUT_LAYOUT


class CellDep(Entity):
    BYTE_LENGTH: ClassVar[Optional[int]] = 37

    out_point: OutPoint = Field(validation_alias=AliasChoices("out_point", "outPoint"))
    dep_type: Annotated[Literal["code", "dep_group"], BeforeValidator(_dep_type_from)] = Field(
        validation_alias=AliasChoices("dep_type", "depType")
    )

    @classmethod
    def layout(cls) -> mol.Codec:
        return CELL_DEP_LAYOUT


class WitnessArgs(Entity):
    lock: Optional[HexField] = None
    input_type: Optional[HexField] = Field(default=None, validation_alias=AliasChoices("input_type", "inputType"))
    output_type: Optional[HexField] = Field(default=None, validation_alias=AliasChoices("output_type", "outputType"))

    @classmethod
    def layout(cls) -> mol.Codec:
        return WITNESS_ARGS_LAYOUT


class Transaction(Entity):
    """Flattened transaction; serialized as ``table { raw, witnesses }``."""

    version: NumField = 0
    cell_deps: List[CellDep] = Field(default_factory=list, validation_alias=AliasChoices("cell_deps", "cellDeps"))
    header_deps: List[HexField] = Field(default_factory=list, validation_alias=AliasChoices("header_deps", "headerDeps"))
    inputs: List[CellInput] = Field(default_factory=list)
    outputs: List[CellOutput] = Field(default_factory=list)
    outputs_data: List[HexField] = Field(default_factory=list, validation_alias=AliasChoices("outputs_data", "outputsData"))
    witnesses: List[HexField] = Field(default_factory=list)

    @classmethod
    def layout(cls) -> mol.Codec:
        return TRANSACTION_LAYOUT

    def _raw_layout(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "cell_deps": self.cell_deps,
            "header_deps": self.header_deps,
            "inputs": self.inputs,
            "outputs": self.outputs,
            "outputs_data": self.outputs_data,
        }

    def _to_layout(self) -> Dict[str, Any]:
        return {"raw": self._raw_layout(), "witnesses": self.witnesses}

    @classmethod
    def from_bytes(cls, data: mol.BytesLike) -> "Transaction":
        decoded = TRANSACTION_LAYOUT.decode(data)
        return cls.model_validate({**decoded["raw"], "witnesses": decoded["witnesses"]})

    def hash(self) -> mol.Hex:
        """Transaction hash: hash of the raw part only."""
        return ckb_hash(RAW_TRANSACTION_LAYOUT.encode(self._raw_layout()))


ScriptLike = Union[Script, Mapping]
OutPointLike = Union[OutPoint, Mapping]
CellInputLike = Union[CellInput, Mapping]
CellOutputLike = Union[CellOutput, Mapping]
CellDepLike = Union[CellDep, Mapping]
WitnessArgsLike = Union[WitnessArgs, Mapping]
TransactionLike = Union[Transaction, Mapping]

SCRIPT_LAYOUT = mol.table({
    "code_hash": mol.Byte32,
    "hash_type": HashTypeCodec,
    "args": mol.Bytes,
})
OUT_POINT_LAYOUT = mol.struct({
    "tx_hash": mol.Byte32,
    "index": mol.Uint32,
})
CELL_INPUT_LAYOUT = mol.struct({
    "since": mol.Uint64,
    "previous_output": mol.entity(OutPoint),
})
CELL_OUTPUT_LAYOUT = mol.table({
    "capacity": mol.Uint64,
    "lock": mol.entity(Script),
    "type": mol.option(mol.entity(Script)),
})
CELL_DEP_LAYOUT = mol.struct({
    "out_point": mol.entity(OutPoint),
    "dep_type": DepTypeCodec,
})
WITNESS_ARGS_LAYOUT = mol.table({
    "lock": mol.BytesOpt,
    "input_type": mol.BytesOpt,
    "output_type": mol.BytesOpt,
})
RAW_TRANSACTION_LAYOUT = mol.table({
    "version": mol.Uint32,
    "cell_deps": mol.fixvec(mol.entity(CellDep)),
    "header_deps": mol.Byte32Vec,
    "inputs": mol.fixvec(mol.entity(CellInput)),
    "outputs": mol.dynvec(mol.entity(CellOutput)),
    "outputs_data": mol.BytesVec,
})
TRANSACTION_LAYOUT = mol.table({
    "raw": RAW_TRANSACTION_LAYOUT,
    "witnesses": mol.BytesVec,
})
