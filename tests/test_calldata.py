"""
Unit tests for calldata decoding.

Parameter blocks are built with eth_abi.encode (or by hand where the layout
itself is under test) and decoded with the two-pass parameter walker.
Covers:
- Selector extraction and hex validation
- Signature type-list parsing
- Bounds-checked cursor reads
- Static, dynamic, array and tuple parameters
- Permissive bool decoding
- Truncated buffers and corrupt offsets
- Signature resolution through an injected resolver
"""

import logging

import pytest
from eth_abi import encode

from eth_decoder.calldata import (
    AddressValue,
    ArrayValue,
    BoolValue,
    BytesValue,
    FunctionCall,
    InMemoryResolver,
    IntValue,
    StringValue,
    TupleValue,
    UIntValue,
    UnparsedValue,
    decode_calldata,
    decode_parameters,
    decode_with_signature,
    extract_selector,
    function_selector,
    parse_function_name,
    parse_parameter_types,
)
from eth_decoder.calldata.cursor import CalldataCursor
from eth_decoder.calldata.types import head_size, parse_type_tag, static_size
from eth_decoder.calldata.walker import ParameterWalker
from eth_decoder.exceptions import (
    CalldataTooShortError,
    EmptyInputError,
    InvalidHexEncodingError,
    InvalidOffsetError,
    SignatureLookupError,
    TruncatedCalldataError,
    UnrecognizedAbiTypeError,
)

RECIPIENT = "0x742d35cc6634c0532925a3b844bc454e4438f44e"
RECIPIENT_BYTES = bytes.fromhex(RECIPIENT[2:])
TRANSFER_SELECTOR = bytes.fromhex("a9059cbb")


def word(value: int) -> str:
    """One 32-byte big-endian word as hex."""
    return value.to_bytes(32, byteorder="big").hex()


def transfer_calldata(amount: int = 1000) -> str:
    return "0x" + TRANSFER_SELECTOR.hex() + encode(["address", "uint256"], [RECIPIENT, amount]).hex()


class TestSelectorExtraction:
    """Test splitting calldata into selector and parameters."""

    def test_extract_selector(self):
        """Test the first four bytes are the selector."""
        selector, params = extract_selector(transfer_calldata())
        assert selector == TRANSFER_SELECTOR
        assert len(params) == 64

    def test_selector_only(self):
        """Test a bare selector is valid and has no parameters."""
        assert extract_selector("0x18160ddd") == (bytes.fromhex("18160ddd"), b"")

    def test_uppercase_without_prefix(self):
        """Test case-insensitive hex without prefix."""
        assert extract_selector("A9059CBB")[0] == TRANSFER_SELECTOR

    def test_raw_bytes(self):
        """Test raw bytes input."""
        assert extract_selector(b"\xa9\x05\x9c\xbb\x00")[1] == b"\x00"

    @pytest.mark.parametrize("calldata", ["", "0x", b""])
    def test_empty_calldata(self, calldata):
        """Test empty calldata is rejected."""
        with pytest.raises(EmptyInputError):
            extract_selector(calldata)

    @pytest.mark.parametrize("calldata", ["0xa9", "0xa9059c", b"\x01\x02\x03"])
    def test_calldata_too_short(self, calldata):
        """Test calldata shorter than a selector is rejected."""
        with pytest.raises(CalldataTooShortError):
            extract_selector(calldata)

    @pytest.mark.parametrize("calldata", ["0xa9059cb", "0xa9059cbbzz"])
    def test_invalid_hex(self, calldata):
        """Test odd-length and non-hex calldata is rejected, not padded."""
        with pytest.raises(InvalidHexEncodingError):
            extract_selector(calldata)


class TestSignatureParsing:
    """Test parameter type-list parsing from text signatures."""

    def test_simple_signature(self):
        assert parse_parameter_types("transfer(address,uint256)") == ["address", "uint256"]

    def test_zero_arguments(self):
        """Test an empty parameter list and a signature without parentheses."""
        assert parse_parameter_types("totalSupply()") == []
        assert parse_parameter_types("totalSupply") == []

    def test_tags_are_not_validated(self):
        """Test unknown tags are passed through for the walker to report."""
        assert parse_parameter_types("f(foo,uint256)") == ["foo", "uint256"]

    def test_named_parameters(self):
        """Test parameter names and spacing are dropped."""
        assert parse_parameter_types("transfer(address to, uint256 amount)") == [
            "address",
            "uint256",
        ]

    def test_tuple_parameters(self):
        """Test commas inside tuple types do not split the parameter."""
        assert parse_parameter_types("f((address,uint256)[],bool)") == [
            "(address,uint256)[]",
            "bool",
        ]
        assert parse_parameter_types("f((uint8,bytes) data, bool flag)") == [
            "(uint8,bytes)",
            "bool",
        ]

    def test_function_name(self):
        assert parse_function_name("transfer(address,uint256)") == "transfer"
        assert parse_function_name("fallback") == "fallback"

    def test_function_selector(self):
        """Test the selector is the first four bytes of keccak-256."""
        assert function_selector("transfer(address,uint256)") == TRANSFER_SELECTOR
        assert function_selector("proposeL2Output(bytes32,uint256,bytes32,uint256)") == bytes.fromhex(
            "9aaab648"
        )


class TestTypeTags:
    """Test ABI type tag recognition."""

    def test_alias_normalization(self):
        assert parse_type_tag("uint").to_type_str() == "uint256"

    @pytest.mark.parametrize("tag", ["uint7", "bytes33", "fixed128x18", "foo", "", "uint256["])
    def test_unrecognized_tags(self, tag):
        with pytest.raises(UnrecognizedAbiTypeError):
            parse_type_tag(tag)

    def test_static_sizes(self):
        """Test static composites occupy their full size inline."""
        assert static_size(parse_type_tag("uint256[2]")) == 64
        assert static_size(parse_type_tag("(address,uint256)")) == 64
        assert head_size(parse_type_tag("(address,uint256)[3]")) == 192
        assert head_size(parse_type_tag("string")) == 32
        assert head_size(parse_type_tag("uint256[]")) == 32


class TestCalldataCursor:
    """Test bounds-checked reads."""

    def test_read_word_and_uint(self):
        cursor = CalldataCursor(bytes.fromhex(word(7) + word(9)))
        assert cursor.read_uint() == 7
        assert cursor.position == 32
        assert cursor.remaining == 32
        assert cursor.read_word() == bytes.fromhex(word(9))

    def test_read_past_end(self):
        cursor = CalldataCursor(b"\x00" * 31)
        with pytest.raises(TruncatedCalldataError):
            cursor.read_word()

    def test_seek_is_relative_to_block(self):
        data = bytes.fromhex(word(1) + word(2) + word(3))
        child = CalldataCursor(data).child(32)
        assert child.start == 32
        child.seek(32)
        assert child.read_uint() == 3

    def test_seek_out_of_bounds(self):
        cursor = CalldataCursor(b"\x00" * 32)
        with pytest.raises(TruncatedCalldataError):
            cursor.seek(33)
        with pytest.raises(TruncatedCalldataError):
            cursor.child(64)


class TestStaticParameters:
    """Test values stored directly in their head word."""

    def test_transfer_scenario(self):
        """Test (address,uint256) decodes to the recipient and 1000."""
        call = decode_with_signature(transfer_calldata(), "transfer(address,uint256)")

        assert call.name == "transfer"
        assert call.parameter_types == ("address", "uint256")
        assert call.parameter_values == (
            AddressValue(RECIPIENT_BYTES),
            UIntValue(1000, width=256),
        )

    def test_uint256_beyond_64_bits(self):
        """Test large integers keep arbitrary precision."""
        values = decode_parameters(["uint256"], encode(["uint256"], [2**256 - 1]))
        assert values == [UIntValue(2**256 - 1)]

    def test_signed_integers(self):
        """Test intN is decoded as two's complement."""
        data = encode(["int256", "int8"], [-1, -5])
        assert decode_parameters(["int256", "int8"], data) == [
            IntValue(-1, width=256),
            IntValue(-5, width=8),
        ]

    def test_narrow_uint_out_of_range(self):
        """Test a uint8 word with bits above bit 8 set is not reported as a number."""
        data = bytes.fromhex(word(0x100) + word(7))

        values = decode_parameters(["uint8", "uint256"], data)

        assert isinstance(values[0], UnparsedValue)
        assert values[0].type_tag == "uint8"
        assert values[0].raw == bytes.fromhex(word(0x100))
        assert values[1] == UIntValue(7)

    def test_narrow_int_out_of_range(self):
        data = bytes.fromhex(word(0x80) + word(2**256 - 128))

        values = decode_parameters(["int8", "int8"], data)

        assert isinstance(values[0], UnparsedValue)
        assert values[1] == IntValue(-128, width=8)

    def test_fixed_bytes(self):
        """Test bytesN is left-aligned in its word."""
        values = decode_parameters(["bytes4", "bytes32"], encode(["bytes4", "bytes32"], [b"\xde\xad\xbe\xef", b"\x01" * 32]))
        assert values == [BytesValue(b"\xde\xad\xbe\xef", size=4), BytesValue(b"\x01" * 32, size=32)]

    def test_static_array_is_inline(self):
        """Test uint256[2] occupies two head words before the next parameter."""
        data = encode(["uint256[2]", "bool"], [[1, 2], True])

        values = decode_parameters(["uint256[2]", "bool"], data)

        assert values == [
            ArrayValue("uint256", (UIntValue(1), UIntValue(2)), size=2),
            BoolValue(True),
        ]

    def test_static_tuple_is_inline(self):
        data = encode(["(address,uint256)", "uint8"], [(RECIPIENT, 5), 3])
        values = decode_parameters(["(address,uint256)", "uint8"], data)
        assert values == [
            TupleValue((AddressValue(RECIPIENT_BYTES), UIntValue(5))),
            UIntValue(3, width=8),
        ]


class TestBoolDecoding:
    """
    Test bool decoding.

    Decoding is permissive: only the least-significant byte is inspected and
    any non-zero value is true, instead of requiring the word to be exactly
    0 or 1.
    """

    def test_true_and_false(self):
        data = bytes.fromhex(word(1) + word(0))
        assert decode_parameters(["bool", "bool"], data) == [BoolValue(True), BoolValue(False)]

    def test_non_canonical_low_byte_is_true(self):
        """Test a low byte of 0x02 is accepted as true."""
        assert decode_parameters(["bool"], bytes.fromhex(word(2))) == [BoolValue(True)]

    def test_high_bytes_are_ignored(self):
        """Test a word with only high bytes set decodes as false."""
        data = b"\xff" + bytes(31)
        assert decode_parameters(["bool"], data) == [BoolValue(False)]


class TestDynamicParameters:
    """Test head/tail resolution of dynamic values."""

    def test_hello_string(self):
        """Test offset 0x20, length 5, bytes 'hello'."""
        data = bytes.fromhex(word(0x20) + word(5) + "68656c6c6f".ljust(64, "0"))
        assert decode_parameters(["string"], data) == [StringValue("hello", length=5)]

    def test_unpadded_tail(self):
        """Test the tail body need not be padded to a full word."""
        data = bytes.fromhex(word(0x20) + word(5) + "68656c6c6f")
        assert decode_parameters(["string"], data) == [StringValue("hello", length=5)]

    def test_head_alignment_around_dynamic_values(self):
        """Test static parameters after a dynamic one keep their position."""
        types = ["uint256", "string", "address", "bytes"]
        data = encode(types, [42, "gm", RECIPIENT, b"\x01\x02\x03"])

        values = decode_parameters(types, data)

        assert values == [
            UIntValue(42),
            StringValue("gm", length=2),
            AddressValue(RECIPIENT_BYTES),
            BytesValue(b"\x01\x02\x03"),
        ]

    def test_empty_bytes_and_string(self):
        data = encode(["bytes", "string"], [b"", ""])
        assert decode_parameters(["bytes", "string"], data) == [
            BytesValue(b""),
            StringValue("", length=0),
        ]

    def test_invalid_utf8_is_replaced(self):
        """Test invalid UTF-8 in a string parameter is replaced, not fatal."""
        data = bytes.fromhex(word(0x20) + word(2) + "ff41".ljust(64, "0"))
        assert decode_parameters(["string"], data) == [StringValue("\ufffdA", length=2)]

    def test_address_array(self):
        """Test address[] elements are right-aligned words after the length."""
        other = "0x" + "ab" * 20
        data = encode(["address[]", "uint256"], [[RECIPIENT, other], 7])

        values = decode_parameters(["address[]", "uint256"], data)

        assert values == [
            ArrayValue(
                "address",
                (AddressValue(RECIPIENT_BYTES), AddressValue(b"\xab" * 20)),
            ),
            UIntValue(7),
        ]
        assert values[0].is_dynamic
        assert values[0].length == 2

    def test_string_array(self):
        """Test string[] elements hold offsets relative to the array body."""
        data = encode(["string[]"], [["a", "bc", ""]])

        values = decode_parameters(["string[]"], data)

        assert values == [
            ArrayValue(
                "string",
                (
                    StringValue("a", length=1),
                    StringValue("bc", length=2),
                    StringValue("", length=0),
                ),
            )
        ]

    def test_nested_dynamic_array(self):
        data = encode(["uint256[][]"], [[[1, 2], [], [3]]])

        values = decode_parameters(["uint256[][]"], data)

        assert values == [
            ArrayValue(
                "uint256[]",
                (
                    ArrayValue("uint256", (UIntValue(1), UIntValue(2))),
                    ArrayValue("uint256", ()),
                    ArrayValue("uint256", (UIntValue(3),)),
                ),
            )
        ]

    def test_fixed_array_of_strings(self):
        data = encode(["string[2]", "uint8"], [["x", "yz"], 1])
        values = decode_parameters(["string[2]", "uint8"], data)
        assert values == [
            ArrayValue("string", (StringValue("x", 1), StringValue("yz", 2)), size=2),
            UIntValue(1, width=8),
        ]

    def test_dynamic_tuple(self):
        data = encode(["(uint8,bytes)", "bool"], [(7, b"\x01\x02"), True])

        values = decode_parameters(["(uint8,bytes)", "bool"], data)

        assert values == [
            TupleValue((UIntValue(7, width=8), BytesValue(b"\x01\x02"))),
            BoolValue(True),
        ]

    def test_tuple_array(self):
        data = encode(["(address,uint256)[]"], [[(RECIPIENT, 1), (RECIPIENT, 2)]])

        values = decode_parameters(["(address,uint256)[]"], data)

        assert values == [
            ArrayValue(
                "(address,uint256)",
                (
                    TupleValue((AddressValue(RECIPIENT_BYTES), UIntValue(1))),
                    TupleValue((AddressValue(RECIPIENT_BYTES), UIntValue(2))),
                ),
            )
        ]


class TestUnrecognizedTypes:
    """Test that unknown tags degrade one parameter, not the decode."""

    def test_unknown_tag_consumes_one_word(self):
        data = bytes.fromhex(word(0xAA) + word(5))

        values = decode_parameters(["foo", "uint256"], data)

        assert isinstance(values[0], UnparsedValue)
        assert values[0].type_tag == "foo"
        assert values[0].raw == bytes.fromhex(word(0xAA))
        assert values[1] == UIntValue(5)

    def test_unsupported_family(self):
        data = bytes.fromhex(word(1) + word(1))
        values = decode_parameters(["fixed128x18", "bool"], data)
        assert isinstance(values[0], UnparsedValue)
        assert values[1] == BoolValue(True)

    def test_call_reports_unparsed(self):
        calldata = "0x" + function_selector("f(uint7,uint256)").hex() + word(1) + word(2)
        call = decode_with_signature(calldata, "f(uint7,uint256)")
        assert call.has_unparsed
        assert call.parameter_values[1] == UIntValue(2)

    def test_empty_tuple_tag(self):
        """Test "()" degrades to one unparsed word instead of aborting the call."""
        calldata = "0x" + function_selector("f((),uint256)").hex() + word(1) + word(7)

        call = decode_with_signature(calldata, "f((),uint256)")

        assert isinstance(call.parameter_values[0], UnparsedValue)
        assert call.parameter_values[0].type_tag == "()"
        assert call.parameter_values[1] == UIntValue(7)

    def test_empty_tuple_tag_parse(self):
        with pytest.raises(UnrecognizedAbiTypeError):
            parse_type_tag("()")


class TestTruncatedCalldata:
    """Test that corrupt or short buffers fail instead of being padded."""

    def test_missing_head_word(self):
        with pytest.raises(TruncatedCalldataError):
            decode_parameters(["uint256", "uint256"], bytes.fromhex(word(1)))

    def test_partial_head_word(self):
        with pytest.raises(TruncatedCalldataError):
            decode_parameters(["uint256"], b"\x00" * 31)

    def test_offset_past_end(self):
        with pytest.raises(TruncatedCalldataError):
            decode_parameters(["string"], bytes.fromhex(word(0x400)))

    def test_length_past_end(self):
        data = bytes.fromhex(word(0x20) + word(100) + "68656c6c6f")
        with pytest.raises(TruncatedCalldataError):
            decode_parameters(["string"], data)

    def test_huge_array_length(self):
        """Test a corrupt array length fails before allocating elements."""
        data = bytes.fromhex(word(0x20) + word(2**200))
        with pytest.raises(TruncatedCalldataError):
            decode_parameters(["address[]"], data)

    def test_offset_into_head_region(self):
        """Test an offset pointing back into the head is rejected."""
        data = bytes.fromhex(word(0) + word(0x40) + word(1) + "61".ljust(64, "0"))
        with pytest.raises(InvalidOffsetError):
            decode_parameters(["string", "string"], data)

    def test_invalid_offset_is_truncation(self):
        assert issubclass(InvalidOffsetError, TruncatedCalldataError)


class TestParameterWalker:
    """Test walker reuse and determinism."""

    def test_walk_is_idempotent(self):
        types = ["string[]", "uint256"]
        data = encode(types, [["a", "b"], 3])
        walker = ParameterWalker(types)
        assert walker.walk(data) == walker.walk(data)

    def test_empty_parameter_list(self):
        assert decode_parameters([], b"") == []


class TestDecodeCalldata:
    """Test signature resolution and the decoded FunctionCall."""

    def test_decode_with_known_signatures(self):
        resolver = InMemoryResolver.with_known_signatures()

        call = decode_calldata(transfer_calldata(), resolver)

        assert call.is_resolved
        assert call.signature == "transfer(address,uint256)"
        assert call.selector_hex == "0xa9059cbb"
        assert call.parameter_values[1] == UIntValue(1000)

    def test_primary_candidate_is_used(self):
        """Test the first candidate decodes, all candidates are reported."""
        candidates = ["transfer(address,uint256)", "many_msg_babbage(bytes1)"]

        call = decode_calldata(transfer_calldata(), lambda selector: list(candidates))

        assert call.signature == candidates[0]
        assert call.candidates == tuple(candidates)

    def test_no_signature_found(self):
        """Test an unknown selector yields a selector-only call."""
        call = decode_calldata("0xdeadbeef" + word(1), InMemoryResolver())

        assert call == FunctionCall(selector=bytes.fromhex("deadbeef"))
        assert not call.is_resolved
        assert call.parameter_values == ()

    def test_lookup_failure_propagates(self):
        def failing_resolver(selector: bytes) -> list[str]:
            raise SignatureLookupError("registry timed out")

        with pytest.raises(SignatureLookupError):
            decode_calldata(transfer_calldata(), failing_resolver)

    def test_selector_only_call(self):
        resolver = InMemoryResolver(["totalSupply()"])
        call = decode_calldata(function_selector("totalSupply()"), resolver)
        assert call.name == "totalSupply"
        assert call.parameter_values == ()

    def test_signature_mismatch_warns(self, caplog):
        """Test decoding with a signature of another selector still decodes."""
        with caplog.at_level(logging.WARNING):
            call = decode_with_signature(transfer_calldata(), "send(address,uint256)")

        assert call.parameter_values[1] == UIntValue(1000)
        assert "has selector" in caplog.text

    def test_in_memory_resolver(self):
        resolver = InMemoryResolver()
        selector = resolver.add("approve(address, uint256)")
        assert resolver(selector) == ["approve(address,uint256)"]
        assert resolver(b"\x00\x00\x00\x00") == []
