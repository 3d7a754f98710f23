from typing import Any, Dict

from ethereum_transactions import TransactionType
from ethereum_transactions.authorization import sign_authorization

PRIVATE_KEY = (
    "0x45a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8"
)
SENDER = "0xa94f5374fce5edbc8e2a8697c15331677e6ebf0b"

RECIPIENT = "0x3535353535353535353535353535353535353535"
DELEGATE = "0x000000000000000000000000000000000000dead"
STORAGE_KEY = "0x" + "00" * 31 + "01"
BLOB_HASH = "0x01" + "ab" * 31

GWEI = 10**9

# Example from EIP-155.
EIP155_PRIVATE_KEY = "0x" + "46" * 32
EIP155_FIELDS: Dict[str, Any] = {
    "nonce": 9,
    "gas_price": 20 * GWEI,
    "gas_limit": 21_000,
    "to": "0x3535353535353535353535353535353535353535",
    "value": 10**18,
    "data": b"",
    "chain_id": 1,
}
EIP155_SIGNING_DATA = (
    "0xec098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a764000080018080"
)
EIP155_SIGNING_HASH = (
    "0xdaf5a779ae972f972197303d7b574746c7ef83eadac0f2791ad23db92e4c8e53"
)
EIP155_SIGNED = (
    "0xf86c098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c71"
    "ff63e1590620aa636276a067cbe9d8997f761aecb703304b3800ccf555c9f3dc6421"
    "4b297fb1966a3b6d83"
)
EIP155_SENDER = "0x9d8A62f656a8d1615C1294fd71e9CFb3E4855A4F"


def complete_fields(tx_type: TransactionType) -> Dict[str, Any]:
    """
    A complete, unsigned set of fields for a transaction of `tx_type`.
    """
    fields: Dict[str, Any] = {
        "nonce": 3,
        "gas_limit": 50_000,
        "to": RECIPIENT,
        "value": 10**17,
        "data": "0xc0ffee",
    }
    if tx_type == TransactionType.LEGACY:
        fields.update(gas_price=20 * GWEI, chain_id=1)
        return fields

    fields["chain_id"] = 1
    fields["access_list"] = [
        {"address": RECIPIENT, "storage_keys": [STORAGE_KEY]}
    ]
    if tx_type == TransactionType.ACCESS_LIST:
        fields["gas_price"] = 20 * GWEI
        return fields

    fields.update(
        max_priority_fee_per_gas=2 * GWEI,
        max_fee_per_gas=30 * GWEI,
    )
    if tx_type == TransactionType.BLOB:
        fields.update(
            max_fee_per_blob_gas=GWEI,
            blob_versioned_hashes=[BLOB_HASH],
        )
    elif tx_type == TransactionType.SET_CODE:
        fields["authorization_list"] = [
            sign_authorization(
                {"chain_id": 1, "address": DELEGATE, "nonce": 4},
                PRIVATE_KEY,
            )
        ]
    return fields
