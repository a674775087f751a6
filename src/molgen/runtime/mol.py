"""Molecule codecs: primitives and combinators.

Byte layouts follow the molecule serialization format used by CKB scripts:

- array / struct: fixed-size concatenation, no header
- fixvec: item count (u32 LE) followed by fixed-size items
- dynvec / table: total size (u32 LE), one u32 LE offset per item, then items
- option: empty for None, otherwise the item bytes

Every codec exposes ``encode(value) -> bytes`` and ``decode(data) -> value``.
Fixed-size codecs also expose ``byte_length``.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar, Union

# Semantic value types
Num = int  # fixed-width integers up to 32 bits
BigNum = int  # 64-bit and wider integers
Hex = str  # "0x"-prefixed lowercase hex

BytesLike = Union[bytes, bytearray, memoryview, str]
NumLike = Union[int, str]

NUMBER_SIZE = 4

E = TypeVar("E")
D = TypeVar("D")


class CodecError(ValueError):
    """Raised when a value cannot be encoded or a buffer cannot be decoded."""
    pass


def bytes_from(value: BytesLike) -> bytes:
    """Convert bytes or a 0x-prefixed hex string to bytes."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if not value.startswith(("0x", "0X")):
            raise CodecError(f"Hex string must start with '0x': {value!r}")
        text = value[2:]
        if len(text) % 2:
            raise CodecError(f"Hex string has odd length: {value!r}")
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise CodecError(f"Invalid hex string: {value!r}") from e
    raise CodecError(f"Cannot convert {type(value).__name__} to bytes")


def hex_from(value: BytesLike) -> Hex:
    """Normalize bytes or hex to a lowercase 0x-prefixed string."""
    return "0x" + bytes_from(value).hex()


def num_from(value: NumLike) -> int:
    """Convert an int, a 0x-prefixed hex string or a decimal string to int."""
    if isinstance(value, bool):
        raise CodecError("Booleans are not numbers")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            if value.startswith(("0x", "0X")):
                return int(value[2:], 16)
            return int(value, 10)
        except ValueError as e:
            raise CodecError(f"Invalid number: {value!r}") from e
    raise CodecError(f"Cannot convert {type(value).__name__} to a number")


def _pack_number(n: int) -> bytes:
    return n.to_bytes(NUMBER_SIZE, "little")


def _unpack_number(data: bytes, offset: int = 0) -> int:
    if len(data) < offset + NUMBER_SIZE:
        raise CodecError(f"Buffer too short for header: {len(data)} bytes")
    return int.from_bytes(data[offset:offset + NUMBER_SIZE], "little")


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        try:
            return value[name]
        except KeyError as e:
            raise CodecError(f"Missing field '{name}'") from e
    try:
        return getattr(value, name)
    except AttributeError as e:
        raise CodecError(f"Missing field '{name}'") from e


class Codec(Generic[E, D]):
    """A paired encode/decode over bytes."""

    def __init__(
        self,
        encode: Callable[[E], bytes],
        decode: Callable[[bytes], D],
        byte_length: Optional[int] = None,
    ):
        self._encode = encode
        self._decode = decode
        self.byte_length = byte_length

    def encode(self, value: E) -> bytes:
        data = self._encode(value)
        if self.byte_length is not None and len(data) != self.byte_length:
            raise CodecError(f"Expected {self.byte_length} bytes, encoded {len(data)}")
        return data

    def decode(self, data: BytesLike) -> D:
        raw = bytes_from(data)
        if self.byte_length is not None and len(raw) != self.byte_length:
            raise CodecError(f"Expected {self.byte_length} bytes, got {len(raw)}")
        return self._decode(raw)

    def map(
        self,
        in_map: Optional[Callable[[Any], E]] = None,
        out_map: Optional[Callable[[D], Any]] = None,
    ) -> "Codec":
        """Derive a codec that converts values before encoding / after decoding."""
        encode = self._encode if in_map is None else (lambda v: self._encode(in_map(v)))
        decode = self._decode if out_map is None else (lambda b: out_map(self._decode(b)))
        return Codec(encode, decode, self.byte_length)

    def __repr__(self) -> str:
        return f"Codec(byte_length={self.byte_length})"


def uint(byte_length: int) -> Codec[NumLike, int]:
    """Little-endian unsigned integer of ``byte_length`` bytes."""
    limit = 1 << (8 * byte_length)

    def encode(value: NumLike) -> bytes:
        n = num_from(value)
        if n < 0 or n >= limit:
            raise CodecError(f"Value {n} out of range for Uint{8 * byte_length}")
        return n.to_bytes(byte_length, "little")

    def decode(data: bytes) -> int:
        return int.from_bytes(data, "little")

    return Codec(encode, decode, byte_length)


def byte_array(byte_length: int) -> Codec[BytesLike, Hex]:
    """Fixed-length raw bytes, decoded as hex."""
    return Codec(bytes_from, hex_from, byte_length)


def struct(fields: Mapping[str, Codec]) -> Codec[Any, Dict[str, Any]]:
    """Fixed-size record: field bytes concatenated in declared order."""
    items = list(fields.items())
    for name, codec in items:
        if codec.byte_length is None:
            raise CodecError(f"Struct field '{name}' must have a fixed size")
    total = sum(codec.byte_length for _, codec in items)

    def encode(value: Any) -> bytes:
        return b"".join(codec.encode(_field(value, name)) for name, codec in items)

    def decode(data: bytes) -> Dict[str, Any]:
        result = {}
        offset = 0
        for name, codec in items:
            end = offset + codec.byte_length
            result[name] = codec.decode(data[offset:end])
            offset = end
        return result

    return Codec(encode, decode, total)


def _pack_dynamic(parts: Sequence[bytes]) -> bytes:
    header_size = NUMBER_SIZE * (len(parts) + 1)
    offsets = []
    cursor = header_size
    for part in parts:
        offsets.append(cursor)
        cursor += len(part)
    header = _pack_number(cursor) + b"".join(_pack_number(o) for o in offsets)
    return header + b"".join(parts)


def _unpack_dynamic(data: bytes) -> List[bytes]:
    total = _unpack_number(data)
    if total != len(data):
        raise CodecError(f"Total size mismatch: header says {total}, buffer has {len(data)}")
    if total == NUMBER_SIZE:
        return []
    first = _unpack_number(data, NUMBER_SIZE)
    if first % NUMBER_SIZE or first < NUMBER_SIZE * 2 or first > total:
        raise CodecError(f"Invalid first offset: {first}")
    count = first // NUMBER_SIZE - 1
    offsets = [_unpack_number(data, NUMBER_SIZE * (i + 1)) for i in range(count)]
    offsets.append(total)
    parts = []
    for start, end in zip(offsets, offsets[1:]):
        if start > end:
            raise CodecError(f"Offsets are not monotonic: {start} > {end}")
        parts.append(data[start:end])
    return parts


def table(fields: Mapping[str, Codec]) -> Codec[Any, Dict[str, Any]]:
    """Extensible record: size header, per-field offsets, field bytes."""
    items = list(fields.items())

    def encode(value: Any) -> bytes:
        return _pack_dynamic([codec.encode(_field(value, name)) for name, codec in items])

    def decode(data: bytes) -> Dict[str, Any]:
        parts = _unpack_dynamic(data)
        if len(parts) < len(items):
            raise CodecError(f"Table has {len(parts)} fields, expected {len(items)}")
        return {name: codec.decode(part) for (name, codec), part in zip(items, parts)}

    return Codec(encode, decode)


def fixvec(item: Codec[E, D]) -> Codec[Sequence[E], List[D]]:
    """Vector of fixed-size items: count header followed by items."""
    if item.byte_length is None:
        raise CodecError("fixvec items must have a fixed size")
    size = item.byte_length

    def encode(values: Sequence[E]) -> bytes:
        return _pack_number(len(values)) + b"".join(item.encode(v) for v in values)

    def decode(data: bytes) -> List[D]:
        count = _unpack_number(data)
        if len(data) != NUMBER_SIZE + count * size:
            raise CodecError(f"fixvec of {count} items expects {NUMBER_SIZE + count * size} bytes, got {len(data)}")
        return [item.decode(data[NUMBER_SIZE + i * size:NUMBER_SIZE + (i + 1) * size]) for i in range(count)]

    return Codec(encode, decode)


def dynvec(item: Codec[E, D]) -> Codec[Sequence[E], List[D]]:
    """Vector of variable-size items: size header, offsets, items."""

    def encode(values: Sequence[E]) -> bytes:
        return _pack_dynamic([item.encode(v) for v in values])

    def decode(data: bytes) -> List[D]:
        return [item.decode(part) for part in _unpack_dynamic(data)]

    return Codec(encode, decode)


def vector(item: Codec[E, D]) -> Codec[Sequence[E], List[D]]:
    """fixvec when the item has a fixed size, dynvec otherwise."""
    return fixvec(item) if item.byte_length is not None else dynvec(item)


def option(item: Codec[E, D]) -> Codec[Optional[E], Optional[D]]:
    """Zero or one item; None encodes to empty bytes."""

    def encode(value: Optional[E]) -> bytes:
        if value is None:
            return b""
        return item.encode(value)

    def decode(data: bytes) -> Optional[D]:
        if not data:
            return None
        return item.decode(data)

    return Codec(encode, decode)


def entity(cls: Any) -> Codec:
    """Adapt a domain-object class (from_/to_bytes/from_bytes) to the codec shape."""
    return Codec(
        lambda value: cls.from_(value).to_bytes(),
        cls.from_bytes,
        getattr(cls, "BYTE_LENGTH", None),
    )


def _encode_bytes(value: BytesLike) -> bytes:
    raw = bytes_from(value)
    return _pack_number(len(raw)) + raw


def _decode_bytes(data: bytes) -> Hex:
    length = _unpack_number(data)
    if len(data) != NUMBER_SIZE + length:
        raise CodecError(f"Bytes header says {length}, buffer has {len(data) - NUMBER_SIZE}")
    return hex_from(data[NUMBER_SIZE:])


def _encode_string(value: str) -> bytes:
    if not isinstance(value, str):
        raise CodecError(f"Expected str, got {type(value).__name__}")
    return _encode_bytes(value.encode("utf-8"))


def _decode_string(data: bytes) -> str:
    try:
        return bytes_from(_decode_bytes(data)).decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodecError(f"Invalid utf-8 string: {e}") from e


Byte = uint(1)
Uint8 = uint(1)
Uint16 = uint(2)
Uint32 = uint(4)
Uint64 = uint(8)
Uint128 = uint(16)
Uint256 = uint(32)
Byte32 = byte_array(32)

Bytes: Codec[BytesLike, Hex] = Codec(_encode_bytes, _decode_bytes)
String: Codec[str, str] = Codec(_encode_string, _decode_string)

BytesOpt = option(Bytes)
BytesVec = dynvec(Bytes)
Byte32Opt = option(Byte32)
Byte32Vec = fixvec(Byte32)
Uint8Vec = fixvec(Uint8)
Uint16Vec = fixvec(Uint16)
Uint32Vec = fixvec(Uint32)
Uint64Vec = fixvec(Uint64)
Uint128Vec = fixvec(Uint128)
Uint256Vec = fixvec(Uint256)
