from decimal import Decimal

import pytest
from ethereum_types.bytes import Bytes20

import ethereum_transactions
from ethereum_transactions import InvalidPrivateKeyError
from ethereum_transactions.crypto.elliptic_curve import (
    load_private_key,
    private_key_to_address,
)
from ethereum_transactions.crypto.hash import keccak256
from ethereum_transactions.utils.hexadecimal import (
    bytes_to_hex,
    has_hex_prefix,
    hex_to_address,
    hex_to_bytes,
    hex_to_uint,
    remove_hex_prefix,
)
from ethereum_transactions.utils.units import (
    format_ether,
    format_gwei,
    parse_ether,
    parse_gwei,
)


def test_keccak256() -> None:
    assert bytes_to_hex(keccak256(b"")) == (
        "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


@pytest.mark.parametrize(
    "private_key, address",
    [
        (
            "0x" + "00" * 31 + "01",
            "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf",
        ),
        (
            "45a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8",
            "0xa94f5374fce5edbc8e2a8697c15331677e6ebf0b",
        ),
        (
            b"\x46" * 32,
            "0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f",
        ),
    ],
)
def test_private_key_to_address(private_key: object, address: str) -> None:
    assert bytes_to_hex(private_key_to_address(private_key)) == address


@pytest.mark.parametrize(
    "private_key",
    [
        "0x",
        "0x" + "ff" * 32,
        "0x" + "01" * 33,
        "not hex",
        bytearray(32),
    ],
)
def test_invalid_private_key(private_key: object) -> None:
    with pytest.raises(InvalidPrivateKeyError):
        load_private_key(private_key)  # type: ignore[arg-type]


def test_hex_prefix() -> None:
    assert has_hex_prefix("0x12")
    assert has_hex_prefix("0X12")
    assert not has_hex_prefix("12")
    assert remove_hex_prefix("0x12") == "12"
    assert remove_hex_prefix("12") == "12"


def test_hex_conversions() -> None:
    assert hex_to_bytes("0x0102") == b"\x01\x02"
    assert hex_to_bytes("0102") == b"\x01\x02"
    assert hex_to_bytes("0x") == b""
    assert hex_to_uint("0xff") == 255
    assert hex_to_address("0x" + "35" * 20) == Bytes20(b"\x35" * 20)
    assert bytes_to_hex(b"\xab\xcd") == "0xabcd"
    assert bytes_to_hex(b"") == "0x"


def test_hex_address_length() -> None:
    with pytest.raises(ValueError):
        hex_to_address("0x1234")


@pytest.mark.parametrize(
    "amount, wei",
    [
        ("1", 10**9),
        ("1.5", 1_500_000_000),
        (Decimal("0.000000001"), 1),
        (30, 30 * 10**9),
    ],
)
def test_parse_gwei(amount: object, wei: int) -> None:
    assert parse_gwei(amount) == wei  # type: ignore[arg-type]


def test_parse_ether() -> None:
    assert parse_ether("1") == 10**18
    assert parse_ether("0.01") == 10**16


@pytest.mark.parametrize("amount", ["abc", "-1", "1e80"])
def test_parse_invalid_amount(amount: str) -> None:
    with pytest.raises(ValueError):
        parse_gwei(amount)


def test_format_units() -> None:
    assert format_gwei(1_500_000_000) == "1.5"
    assert format_gwei(30 * 10**9) == "30"
    assert format_ether(10**18) == "1"
    assert format_ether(10**16) == "0.01"
    assert format_ether(0) == "0"


def test_top_level_helpers() -> None:
    assert ethereum_transactions.parse_gwei("2") == 2 * 10**9
    assert ethereum_transactions.format_ether(10**18) == "1"
    assert bytes_to_hex(
        ethereum_transactions.private_key_to_address("0x" + "00" * 31 + "01")
    ) == "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
