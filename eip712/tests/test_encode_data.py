from __future__ import annotations

import sys
from typing import Any, Dict

import pytest

from eip712.abi.values import FixedBytesValue, UIntValue
from eip712.encode_data import encode_data, encode_field, hash_struct
from eip712.encode_type import hash_type
from eip712.errors import (
    ArrayNotSupported,
    EncodingDepthExceeded,
    InvalidArgumentType,
    MalformedBytesLiteral,
    UnresolvedType,
    ValueOutOfRange,
)
from eip712.schema import SignVersion
from eip712.utils.hash import keccak256

ZERO_WORD = b"\x00" * 32
WALLET = "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"


def _word(types, raw_type: str, value: Any, version=SignVersion.V4) -> bytes:
    v = encode_field(types, "f", raw_type, value, version)
    assert v is not None
    return v.encode()


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def test_string_and_bytes_hash_utf8() -> None:
    assert _word({}, "string", "Hello, Bob!") == keccak256(b"Hello, Bob!")
    assert _word({}, "string", "Hello, Bob!").hex() == (
        "b5aadf3154a261abdd9086fc627b61efca26ae5702701d05cd2305f7c52a2fc8"
    )
    # Dynamic bytes take the string form as-is, hex prefix included.
    assert _word({}, "bytes", "0xdead") == keccak256(b"0xdead")


def test_bool_literal_only() -> None:
    assert _word({}, "bool", True)[-1] == 1
    assert encode_field({}, "f", "bool", "true") is None
    assert encode_field({}, "f", "bool", 1) is None


def test_address_decoding() -> None:
    word = _word({}, "address", WALLET)
    assert word == b"\x00" * 12 + bytes.fromhex(WALLET[2:])
    assert _word({}, "address", WALLET[2:]) == word
    with pytest.raises(MalformedBytesLiteral):
        encode_field({}, "f", "address", "0x1234")
    with pytest.raises(MalformedBytesLiteral):
        encode_field({}, "f", "address", "0x" + "zz" * 20)


def test_uint8_from_literal() -> None:
    v = encode_field({}, "f", "uint8", 255)
    assert isinstance(v, UIntValue) and v.bits == 8
    with pytest.raises(ValueOutOfRange):
        encode_field({}, "f", "uint8", 256)


@pytest.mark.parametrize("raw", [1, "1", "0x1", "0x01", 1.0])
def test_integer_sources(raw: Any) -> None:
    assert _word({}, "uint256", raw) == (1).to_bytes(32, "big")


def test_signed_integers() -> None:
    assert _word({}, "int256", -1) == b"\xff" * 32
    assert _word({}, "int16", "-2") == (-2).to_bytes(32, "big", signed=True)
    with pytest.raises(ValueOutOfRange):
        encode_field({}, "f", "int8", -129)


@pytest.mark.parametrize("raw", [True, None, "abc", 1.5, [1], {"a": 1}])
def test_non_numbers_are_absent(raw: Any) -> None:
    assert encode_field({}, "f", "uint256", raw) is None


@pytest.mark.parametrize(
    "raw", ["--5", "-+5", "+5", "1_000", "-", "0x", "-0x", "5-", "0x1g", "1e3", ""]
)
def test_malformed_integer_strings_are_absent(raw: str) -> None:
    assert encode_field({}, "f", "int256", raw) is None
    with pytest.raises(InvalidArgumentType) as ei:
        encode_data({"T": [{"name": "n", "type": "int256"}]}, "T", {"n": raw})
    assert ei.value.data["field"] == "n"


def test_signed_hex_string() -> None:
    assert _word({}, "int16", "-0x10") == (-16).to_bytes(32, "big", signed=True)
    assert _word({}, "uint16", " 0X1F ") == (31).to_bytes(32, "big")


def test_fixed_bytes_hex_and_raw() -> None:
    v = encode_field({}, "f", "bytes4", "0xdeadbeef")
    assert isinstance(v, FixedBytesValue)
    assert v.encode() == bytes.fromhex("deadbeef") + b"\x00" * 28
    assert _word({}, "bytes3", "abc") == b"abc" + b"\x00" * 29
    with pytest.raises(MalformedBytesLiteral):
        encode_field({}, "f", "bytes2", "0xdeadbeef")
    with pytest.raises(MalformedBytesLiteral):
        encode_field({}, "f", "bytes4", "0xnothex!")


def test_unknown_primitive_is_absent() -> None:
    assert encode_field({}, "f", "uint7", 1) is None
    assert encode_field({}, "f", "Mystery", 1) is None


# ---------------------------------------------------------------------------
# Structs
# ---------------------------------------------------------------------------


def test_mail_encode_data_layout(mail: Dict[str, Any]) -> None:
    types = mail["types"]
    enc = encode_data(types, "Mail", mail["message"])
    assert len(enc) == 32 * 4
    assert enc[:32] == hash_type(types, "Mail")
    assert enc[32:64] == hash_struct(types, "Person", mail["message"]["from"])
    assert enc[64:96] == hash_struct(types, "Person", mail["message"]["to"])
    assert enc[96:] == keccak256(b"Hello, Bob!")
    assert hash_struct(types, "Mail", mail["message"]).hex() == (
        "c52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e"
    )


def test_null_struct_is_zero_word_in_current_mode(mail: Dict[str, Any]) -> None:
    types = mail["types"]
    v = encode_field(types, "to", "Person", None, SignVersion.V4)
    assert v is not None and v.encode() == ZERO_WORD

    mail["message"]["to"] = None
    enc = encode_data(types, "Mail", mail["message"], SignVersion.V4)
    assert enc[64:96] == ZERO_WORD


def test_legacy_mode_null_struct_is_zero_word(mail: Dict[str, Any]) -> None:
    types = mail["types"]
    v = encode_field(types, "to", "Person", None, SignVersion.V3)
    assert v is not None and v.encode() == ZERO_WORD

    mail["message"]["to"] = None
    enc = encode_data(types, "Mail", mail["message"], SignVersion.V3)
    assert len(enc) == 32 * 4
    assert enc[64:96] == ZERO_WORD
    assert enc[96:] == keccak256(b"Hello, Bob!")

    # A missing struct key reads as null.
    del mail["message"]["to"]
    assert encode_data(types, "Mail", mail["message"], SignVersion.V3) == enc


def test_legacy_mode_omits_unencodable_primitives(mail: Dict[str, Any]) -> None:
    types = mail["types"]
    mail["message"]["contents"] = 42
    enc = encode_data(types, "Mail", mail["message"], SignVersion.V3)
    assert len(enc) == 32 * 3
    assert enc[:32] == hash_type(types, "Mail")

    del mail["message"]["contents"]
    assert encode_data(types, "Mail", mail["message"], SignVersion.V3) == enc


def test_current_mode_rejects_missing_field(mail: Dict[str, Any]) -> None:
    del mail["message"]["contents"]
    with pytest.raises(InvalidArgumentType) as ei:
        encode_data(mail["types"], "Mail", mail["message"], SignVersion.V4)
    assert ei.value.data["field"] == "contents"


def test_current_mode_unknown_field_type_is_unresolved() -> None:
    types = {"T": [{"name": "x", "type": "Ghost"}]}
    with pytest.raises(UnresolvedType) as ei:
        encode_data(types, "T", {"x": 1}, SignVersion.V4)
    assert ei.value.data["field"] == "x"
    # Legacy mode silently drops the same field.
    assert encode_data(types, "T", {"x": 1}, SignVersion.V3) == hash_type(types, "T")


def test_nested_error_carries_innermost_field(mail: Dict[str, Any]) -> None:
    mail["message"]["from"]["wallet"] = "0x12"
    with pytest.raises(MalformedBytesLiteral) as ei:
        encode_data(mail["types"], "Mail", mail["message"])
    assert ei.value.data["field"] == "wallet"


def test_struct_value_must_be_object(mail: Dict[str, Any]) -> None:
    mail["message"]["from"] = "Cow"
    with pytest.raises(InvalidArgumentType):
        encode_data(mail["types"], "Mail", mail["message"])


def test_unknown_struct_raises() -> None:
    with pytest.raises(UnresolvedType):
        encode_data({}, "Nope", {})


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------


def test_array_rejected_in_legacy_mode() -> None:
    with pytest.raises(ArrayNotSupported):
        encode_field({}, "f", "uint8[]", [1, 2], SignVersion.V3)
    types = {"T": [{"name": "xs", "type": "uint8[2]"}]}
    with pytest.raises(ArrayNotSupported) as ei:
        encode_data(types, "T", {"xs": [1, 2]}, SignVersion.V3)
    assert ei.value.data["field"] == "xs"


def test_dynamic_array_is_hash_of_packed_elements() -> None:
    expected = keccak256((1).to_bytes(32, "big") + (2).to_bytes(32, "big"))
    assert _word({}, "uint8[]", [1, 2]) == expected
    assert _word({}, "uint8[]", []) == keccak256(b"")


def test_fixed_size_is_not_enforced() -> None:
    assert _word({}, "uint8[3]", [1, 2]) == _word({}, "uint8[]", [1, 2])


def test_nested_arrays_recurse() -> None:
    """
    Multi-dimensional tokens such as uint8[][] are accepted, although a
    strict one-bracket-pair grammar would call them malformed. Each
    dimension is hashed as its own array word.
    """
    inner_a = keccak256((1).to_bytes(32, "big") + (2).to_bytes(32, "big"))
    inner_b = keccak256((3).to_bytes(32, "big"))
    assert _word({}, "uint8[][]", [[1, 2], [3]]) == keccak256(inner_a + inner_b)


def test_struct_arrays_hash_each_element(group: Dict[str, Any]) -> None:
    types = group["types"]
    members = group["message"]["members"]
    expected = keccak256(b"".join(hash_struct(types, "Person", m) for m in members))
    assert _word(types, "Person[]", members) == expected


def test_array_errors_propagate() -> None:
    with pytest.raises(ValueOutOfRange):
        encode_field({}, "f", "uint8[]", [1, 256])
    with pytest.raises(InvalidArgumentType) as ei:
        encode_field({}, "f", "uint8[]", [1, None])
    assert ei.value.data["index"] == 1


def test_array_needs_list_value() -> None:
    assert encode_field({}, "f", "uint8[]", 5) is None
    assert encode_field({}, "f", "uint8[]", None) is None


def test_malformed_array_type_raises() -> None:
    with pytest.raises(InvalidArgumentType):
        encode_field({}, "f", "uint8[x]", [1])


# ---------------------------------------------------------------------------
# Recursion guard
# ---------------------------------------------------------------------------

NODE_TYPES = {"Node": [{"name": "value", "type": "uint8"}, {"name": "next", "type": "Node"}]}


def _chain(n: int) -> Dict[str, Any]:
    node: Any = None
    for i in range(n):
        node = {"value": i, "next": node}
    return node


def test_recursive_data_within_limit() -> None:
    assert len(hash_struct(NODE_TYPES, "Node", _chain(5), max_depth=10)) == 32


def test_recursive_data_beyond_limit() -> None:
    with pytest.raises(EncodingDepthExceeded) as ei:
        hash_struct(NODE_TYPES, "Node", _chain(6), max_depth=3)
    assert ei.value.data["limit"] == 3


def test_self_reference_rejected_by_depth_guard() -> None:
    node: Dict[str, Any] = {"value": 1}
    node["next"] = node
    with pytest.raises(EncodingDepthExceeded):
        hash_struct(NODE_TYPES, "Node", node)


def test_interpreter_stack_exhaustion_is_depth_error() -> None:
    # Each struct level costs several frames, so this chain overflows the
    # interpreter stack long before reaching max_depth.
    n = sys.getrecursionlimit() + 100
    with pytest.raises(EncodingDepthExceeded) as ei:
        hash_struct(NODE_TYPES, "Node", _chain(n), max_depth=n * 2)
    assert ei.value.data["limit"] == n * 2
    assert ei.value.data["recursion_limit"] == sys.getrecursionlimit()
