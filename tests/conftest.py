import pytest

from ethereum_transactions import Transaction, TransactionType
from tests.helpers import PRIVATE_KEY, complete_fields


@pytest.fixture(params=list(TransactionType), ids=lambda t: t.label)
def tx_type(request: pytest.FixtureRequest) -> TransactionType:
    """
    Every transaction type.
    """
    return request.param


@pytest.fixture
def unsigned_tx(tx_type: TransactionType) -> Transaction:
    return Transaction(tx_type, complete_fields(tx_type))


@pytest.fixture
def signed_tx(unsigned_tx: Transaction) -> Transaction:
    return unsigned_tx.sign_by(PRIVATE_KEY)
