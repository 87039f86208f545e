import pytest
from decimal import Decimal

from accounts import Account
from ledger import Ledger
from services import TransactionService


@pytest.fixture
def account():
    """A fresh, empty account for client 1."""
    return Account(client_id=1)


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def service(ledger):
    return TransactionService(ledger)


@pytest.fixture
def funded_account(account):
    """Account holding two deposits: tx 1 = 2.0 and tx 2 = 3.0."""
    account.deposit(1, Decimal("2.0"))
    account.deposit(2, Decimal("3.0"))
    return account


@pytest.fixture
def transactions_file(tmp_path):
    """Write CSV text to a temporary transactions file and return its path."""
    def _write(text: str):
        path = tmp_path / "transactions.csv"
        path.write_text(text, encoding="utf-8")
        return path
    return _write
