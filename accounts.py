from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Set, Union

from exceptions import (
    AccountLockedError,
    AlreadyDisputedError,
    DuplicateTransactionError,
    InsufficientFundsError,
    InvalidAmountError,
    NotDisputedError,
    UnknownTransactionError,
)


ZERO = Decimal("0")


@dataclass(frozen=True)
class Deposit:
    amount: Decimal


@dataclass(frozen=True)
class Withdrawal:
    """A settled withdrawal.

    The withdrawn amount is deliberately not kept: disputing a withdrawal
    holds nothing, so a client cannot dispute a deposit and a withdrawal
    together and end up with more available funds than they put in.
    """


Movement = Union[Deposit, Withdrawal]


class Account:
    """Transaction state machine for a single client.

    Every operation validates first and mutates last, so a raised
    ``TransactionError`` always leaves the account untouched.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self.total_balance: Decimal = ZERO
        self.held_balance: Decimal = ZERO
        self.is_locked = False
        self.movements: Dict[int, Movement] = {}
        self.disputed: Set[int] = set()

    @property
    def available_balance(self) -> Decimal:
        return self.total_balance - self.held_balance

    def deposit(self, tx: int, amount: Decimal) -> None:
        self._validate_new_movement(tx, amount)

        self.total_balance += amount
        self.movements[tx] = Deposit(amount)

    def withdraw(self, tx: int, amount: Decimal) -> None:
        self._validate_new_movement(tx, amount)
        if amount > self.available_balance:
            raise InsufficientFundsError(tx)

        self.total_balance -= amount
        self.movements[tx] = Withdrawal()

    def dispute(self, tx: int) -> None:
        """Freeze the funds of a past movement. Allowed on locked accounts."""
        amount = self._disputed_amount(tx)
        if tx in self.disputed:
            raise AlreadyDisputedError(tx)

        self.held_balance += amount
        self.disputed.add(tx)

    def resolve(self, tx: int) -> None:
        """Release the funds frozen by a dispute."""
        amount = self._disputed_amount(tx)
        self._validate_disputed(tx)

        self.held_balance -= amount
        self.disputed.discard(tx)

    def chargeback(self, tx: int) -> None:
        """Remove disputed funds for good and lock the account.

        The tx id stays in ``disputed`` afterwards, unlike ``resolve``.
        """
        amount = self._disputed_amount(tx)
        self._validate_disputed(tx)

        self.held_balance -= amount
        self.total_balance -= amount
        self.is_locked = True

    def _validate_new_movement(self, tx: int, amount: Decimal) -> None:
        if amount < ZERO:
            raise InvalidAmountError(tx)
        if tx in self.movements:
            raise DuplicateTransactionError(tx)
        if self.is_locked:
            raise AccountLockedError(tx)

    def _validate_disputed(self, tx: int) -> None:
        if tx not in self.disputed:
            raise NotDisputedError(tx)

    def _disputed_amount(self, tx: int) -> Decimal:
        movement = self.movements.get(tx)
        if movement is None:
            raise UnknownTransactionError(tx)
        if isinstance(movement, Deposit):
            return movement.amount
        if isinstance(movement, Withdrawal):
            return ZERO
        raise TypeError(f"Unsupported movement {movement!r}")

    def __repr__(self) -> str:
        return (
            f"Account(client_id={self.client_id}, total={self.total_balance}, "
            f"held={self.held_balance}, locked={self.is_locked})"
        )
