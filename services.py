from typing import Iterable, List, Optional
import structlog

from exceptions import TransactionError
from ledger import Ledger
from models import ProcessingSummary, RecordFailure, TransactionRecord, TransactionType

# Configure structured logging
logger = structlog.get_logger()


class TransactionService:
    def __init__(self, ledger: Ledger, detailed_logging: bool = False):
        self.ledger = ledger
        self.detailed_logging = detailed_logging
        self.failures: List[RecordFailure] = []
        self.records_processed = 0

    def apply(self, record: TransactionRecord) -> None:
        """Apply one validated record to its client's account.

        Raises the account's ``TransactionError`` unchanged when the record
        is refused; the account is left as it was.
        """
        account = self.ledger.get_or_create(record.client)

        if record.type == TransactionType.deposit:
            account.deposit(record.tx, record.amount)
        elif record.type == TransactionType.withdrawal:
            account.withdraw(record.tx, record.amount)
        elif record.type == TransactionType.dispute:
            account.dispute(record.tx)
        elif record.type == TransactionType.resolve:
            account.resolve(record.tx)
        elif record.type == TransactionType.chargeback:
            account.chargeback(record.tx)
        else:
            raise ValueError(f"Unsupported transaction type {record.type!r}")

        if self.detailed_logging:
            logger.debug(
                "Transaction applied",
                operation=record.type.value,
                client=record.client,
                tx=record.tx,
                amount=str(record.amount) if record.amount is not None else None,
                total=str(account.total_balance),
                held=str(account.held_balance),
                locked=account.is_locked
            )

    def process_record(self, record: TransactionRecord) -> Optional[RecordFailure]:
        """Apply a record, reporting a refusal instead of raising it."""
        try:
            self.apply(record)
        except TransactionError as e:
            failure = RecordFailure(
                client=record.client,
                tx=record.tx,
                operation=record.type.value,
                detail=e.detail,
                error_code=e.error_code
            )
            self.failures.append(failure)
            logger.warning(
                "Failed to perform transaction",
                operation=record.type.value,
                client=record.client,
                tx=record.tx,
                reason=e.detail,
                error_code=e.error_code
            )
            return failure

        self.records_processed += 1
        return None

    def process(self, records: Iterable[TransactionRecord]) -> ProcessingSummary:
        """Apply records in input order; a refused record never stops the run."""
        for record in records:
            self.process_record(record)

        return self.summary()

    def summary(self, records_rejected: int = 0) -> ProcessingSummary:
        return ProcessingSummary(
            records_processed=self.records_processed,
            records_failed=len(self.failures),
            records_rejected=records_rejected,
            accounts_count=len(self.ledger)
        )
