from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, List

from accounts import Account
from models import ClientRecord


# Reported amounts carry four fractional digits, ties rounded away from zero.
DISPLAY_PRECISION = Decimal("0.0001")


def round_amount(amount: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize fails when the result needs more digits than the context holds
        ctx.prec = max(ctx.prec, amount.adjusted() + 6)
        return amount.quantize(DISPLAY_PRECISION, rounding=ROUND_HALF_UP)


class Ledger:
    """Registry of client accounts for a single run."""

    def __init__(self):
        self.accounts: Dict[int, Account] = {}

    def get_or_create(self, client_id: int) -> Account:
        """Get the account for a client, opening an empty one on first use."""
        account = self.accounts.get(client_id)
        if account is None:
            account = Account(client_id)
            self.accounts[client_id] = account
        return account

    def snapshot(self) -> List[ClientRecord]:
        """Project every known account into a rounded, read-only record."""
        return [
            ClientRecord(
                client=client_id,
                available=round_amount(account.available_balance),
                held=round_amount(account.held_balance),
                total=round_amount(account.total_balance),
                locked=account.is_locked,
            )
            for client_id, account in sorted(self.accounts.items())
        ]

    def __len__(self) -> int:
        return len(self.accounts)
