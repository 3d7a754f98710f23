"""
Types re-used throughout the transaction records, such as addresses, access
list entries and [EIP-7702] authorizations.

[EIP-7702]: https://eips.ethereum.org/EIPS/eip-7702
"""

from dataclasses import dataclass
from typing import Tuple

from ethereum_types.bytes import Bytes20, Bytes32
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U8, U64, U256

from .crypto.hash import Hash32

Address = Bytes20
VersionedHash = Hash32

VERSIONED_HASH_VERSION_KZG = b"\x01"


@slotted_freezable
@dataclass
class Access:
    """
    A mapping from account address to storage slots that are pre-warmed as part
    of a transaction.

    #### Attributes
    - `account`: The address of the account that is accessed.
    - `slots`: A tuple of storage slots that are accessed in the account.
    """

    account: Address
    slots: Tuple[Bytes32, ...]


@slotted_freezable
@dataclass
class AuthorizationRequest:
    """
    The unsigned part of an [EIP-7702] authorization: the signer allows
    `address`'s code to run on behalf of their account on chain `chain_id`
    (zero for any chain) while their account nonce equals `nonce`.

    [EIP-7702]: https://eips.ethereum.org/EIPS/eip-7702
    """

    chain_id: U256
    address: Address
    nonce: U64


@slotted_freezable
@dataclass
class Authorization:
    """
    A signed `AuthorizationRequest`, as carried in the authorization list of
    a set code transaction.
    """

    chain_id: U256
    address: Address
    nonce: U64
    y_parity: U8
    r: U256
    s: U256

    def request(self) -> AuthorizationRequest:
        """
        The signed request, without its signature.
        """
        return AuthorizationRequest(
            chain_id=self.chain_id, address=self.address, nonce=self.nonce
        )
