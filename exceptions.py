from typing import Optional


class TransactionError(Exception):
    """Base class for every per-record failure raised by an account."""

    error_code = "TRANSACTION_ERROR"
    detail = "Transaction failed"

    def __init__(self, tx: Optional[int] = None, detail: Optional[str] = None):
        self.tx = tx
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidAmountError(TransactionError):
    error_code = "INVALID_AMOUNT"
    detail = "Amount has to be positive"


class DuplicateTransactionError(TransactionError):
    error_code = "DUPLICATE_TRANSACTION"
    detail = "Account already has a transaction with this tx id"


class AccountLockedError(TransactionError):
    error_code = "ACCOUNT_LOCKED"
    detail = "Account is locked"


class InsufficientFundsError(TransactionError):
    error_code = "INSUFFICIENT_FUNDS"
    detail = "Insufficient funds"


class UnknownTransactionError(TransactionError):
    error_code = "UNKNOWN_TRANSACTION"
    detail = "Account has no transaction with this tx id"


class AlreadyDisputedError(TransactionError):
    error_code = "ALREADY_DISPUTED"
    detail = "Transaction is already disputed"


class NotDisputedError(TransactionError):
    error_code = "NOT_DISPUTED"
    detail = "Transaction is not disputed"
