import pytest
from ethereum_rlp import rlp
from ethereum_types.numeric import U64, U256

from ethereum_transactions import (
    Authorization,
    AuthorizationRequest,
    InvalidFieldValueError,
    InvalidSignatureError,
    MissingFieldError,
    Transaction,
    TransactionType,
    UnexpectedFieldError,
    authorization_hash,
    recover_authority,
    sign_authorization,
)
from ethereum_transactions.crypto.elliptic_curve import SECP256K1N
from ethereum_transactions.crypto.hash import keccak256
from ethereum_transactions.fields import record_to_dict
from ethereum_transactions.utils.hexadecimal import (
    bytes_to_hex,
    hex_to_address,
)
from tests.helpers import DELEGATE, PRIVATE_KEY, SENDER, complete_fields

REQUEST = {"chain_id": 1, "address": DELEGATE, "nonce": 7}


def test_authorization_hash() -> None:
    expected = keccak256(
        b"\x05" + rlp.encode([U256(1), hex_to_address(DELEGATE), U64(7)])
    )
    request = AuthorizationRequest(
        chain_id=U256(1), address=hex_to_address(DELEGATE), nonce=U64(7)
    )

    assert authorization_hash(REQUEST) == expected
    assert authorization_hash(request) == expected


def test_sign_and_recover() -> None:
    item = sign_authorization(REQUEST, PRIVATE_KEY)

    assert isinstance(item, Authorization)
    assert item.request() == AuthorizationRequest(
        chain_id=U256(1), address=hex_to_address(DELEGATE), nonce=U64(7)
    )
    assert authorization_hash(item) == authorization_hash(REQUEST)
    assert bytes_to_hex(recover_authority(item)) == SENDER


def test_recover_from_mapping() -> None:
    item = record_to_dict(sign_authorization(REQUEST, PRIVATE_KEY))
    assert bytes_to_hex(recover_authority(item)) == SENDER


def test_any_chain_authorization() -> None:
    item = sign_authorization(dict(REQUEST, chain_id=0), PRIVATE_KEY)
    assert item.chain_id == 0
    assert bytes_to_hex(recover_authority(item)) == SENDER


def test_chain_id_is_part_of_the_message() -> None:
    item = record_to_dict(sign_authorization(REQUEST, PRIVATE_KEY))
    item["chain_id"] = 2
    try:
        authority = recover_authority(item)
    except InvalidSignatureError:
        return
    assert bytes_to_hex(authority) != SENDER


def _with(**changes: object) -> dict:
    item = record_to_dict(sign_authorization(REQUEST, PRIVATE_KEY))
    item.update(changes)
    return item


@pytest.mark.parametrize(
    "changes",
    [
        pytest.param({"y_parity": 2}, id="y_parity"),
        pytest.param({"r": 0}, id="r-zero"),
        pytest.param({"r": int(SECP256K1N)}, id="r-order"),
        pytest.param({"s": 0}, id="s-zero"),
        pytest.param({"s": int(SECP256K1N) // 2 + 1}, id="s-high"),
    ],
)
def test_invalid_signature(changes: dict) -> None:
    with pytest.raises(InvalidSignatureError):
        recover_authority(_with(**changes))


def test_high_s_rejected() -> None:
    item = sign_authorization(REQUEST, PRIVATE_KEY)
    flipped = _with(
        s=SECP256K1N - item.s, y_parity=1 - int(item.y_parity)
    )
    with pytest.raises(InvalidSignatureError):
        recover_authority(flipped)


def test_request_validation() -> None:
    with pytest.raises(MissingFieldError) as excinfo:
        sign_authorization({"chain_id": 1, "address": DELEGATE}, PRIVATE_KEY)
    assert excinfo.value.field == "authorization.nonce"

    with pytest.raises(InvalidFieldValueError):
        sign_authorization(dict(REQUEST, nonce=2**64), PRIVATE_KEY)

    with pytest.raises(InvalidFieldValueError):
        sign_authorization(dict(REQUEST, address="0x1234"), PRIVATE_KEY)

    with pytest.raises(UnexpectedFieldError):
        sign_authorization(dict(REQUEST, gas=1), PRIVATE_KEY)


def test_authorization_list_round_trip() -> None:
    fields = complete_fields(TransactionType.SET_CODE)
    second = sign_authorization(dict(REQUEST, nonce=8), PRIVATE_KEY)
    fields["authorization_list"] = [
        sign_authorization(REQUEST, PRIVATE_KEY),
        record_to_dict(second),
    ]
    signed = Transaction("eip7702", fields).sign_by(PRIVATE_KEY)
    decoded = Transaction.from_hex(signed.to_hex(), strict=True)

    assert decoded == signed
    authorities = [
        bytes_to_hex(recover_authority(item))
        for item in decoded.raw.authorization_list
    ]
    assert authorities == [SENDER, SENDER]
