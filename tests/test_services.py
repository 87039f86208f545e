import pytest
from decimal import Decimal
from unittest.mock import patch

from exceptions import AccountLockedError, InsufficientFundsError, UnknownTransactionError
from models import TransactionRecord, TransactionType


def record(type, client, tx, amount=None):
    return TransactionRecord(
        type=type,
        client=client,
        tx=tx,
        amount=Decimal(amount) if amount is not None else None
    )


class TestDispatch:
    """Each record kind reaches the matching account operation."""

    def test_deposit_and_withdrawal(self, service, ledger):
        service.apply(record("deposit", 1, 1, "2.0"))
        service.apply(record("withdrawal", 1, 2, "0.5"))

        assert ledger.accounts[1].total_balance == Decimal("1.5")

    def test_dispute_resolve_chargeback(self, service, ledger):
        service.apply(record("deposit", 1, 1, "2.0"))
        service.apply(record("deposit", 1, 2, "3.0"))
        service.apply(record("dispute", 1, 1))
        assert ledger.accounts[1].held_balance == Decimal("2.0")

        service.apply(record("resolve", 1, 1))
        assert ledger.accounts[1].held_balance == 0

        service.apply(record("dispute", 1, 2))
        service.apply(record("chargeback", 1, 2))

        account = ledger.accounts[1]
        assert account.total_balance == Decimal("2.0")
        assert account.is_locked

    def test_apply_raises_account_errors(self, service):
        with pytest.raises(InsufficientFundsError):
            service.apply(record("withdrawal", 1, 1, "5.0"))

    def test_any_record_creates_account(self, service, ledger):
        with pytest.raises(UnknownTransactionError):
            service.apply(record("dispute", 9, 1))

        assert 9 in ledger.accounts

    def test_accounts_do_not_share_transactions(self, service, ledger):
        service.apply(record("deposit", 1, 1, "2.0"))

        with pytest.raises(UnknownTransactionError):
            service.apply(record("dispute", 2, 1))

        assert ledger.accounts[1].held_balance == 0


class TestFailureReporting:
    """Refused records are reported and processing continues."""

    def test_failure_is_recorded(self, service):
        failure = service.process_record(record("withdrawal", 1, 2, "5.0"))

        assert failure is not None
        assert failure.client == 1
        assert failure.tx == 2
        assert failure.operation == "withdrawal"
        assert failure.error_code == InsufficientFundsError.error_code
        assert failure.detail == "Insufficient funds"
        assert service.failures == [failure]

    def test_success_returns_none(self, service):
        assert service.process_record(record("deposit", 1, 1, "1.0")) is None
        assert service.records_processed == 1

    def test_processing_continues_after_failure(self, service, ledger):
        summary = service.process([
            record("deposit", 1, 1, "2.0"),
            record("withdrawal", 1, 2, "5.0"),
            record("deposit", 1, 3, "1.0"),
            record("dispute", 2, 7),
        ])

        assert summary.records_processed == 2
        assert summary.records_failed == 2
        assert summary.accounts_count == 2
        assert ledger.accounts[1].total_balance == Decimal("3.0")

    def test_locked_account_failures(self, service):
        service.process([
            record("deposit", 1, 1, "2.0"),
            record("dispute", 1, 1),
            record("chargeback", 1, 1),
            record("deposit", 1, 2, "1.0"),
        ])

        assert [f.error_code for f in service.failures] == [AccountLockedError.error_code]

    @patch('services.logger')
    def test_logging_on_failure(self, mock_logger, service):
        service.process_record(record("resolve", 1, 1))

        mock_logger.warning.assert_called_once()
        kwargs = mock_logger.warning.call_args.kwargs
        assert kwargs["client"] == 1
        assert kwargs["tx"] == 1
        assert kwargs["operation"] == "resolve"
        assert kwargs["error_code"] == "UNKNOWN_TRANSACTION"

    @patch('services.logger')
    def test_detailed_logging(self, mock_logger, ledger):
        from services import TransactionService

        service = TransactionService(ledger, detailed_logging=True)
        service.apply(record("deposit", 1, 1, "1.0"))

        mock_logger.debug.assert_called_once()

    @patch('services.logger')
    def test_no_detailed_logging_by_default(self, mock_logger, service):
        service.apply(record("deposit", 1, 1, "1.0"))

        mock_logger.debug.assert_not_called()


class TestScenarios:
    """End-to-end scenarios through the service and snapshot."""

    def test_chargeback_scenario(self, service, ledger):
        service.process([
            record("deposit", 1, 1, "2.0"),
            record("deposit", 1, 2, "3.0"),
            record("dispute", 1, 1),
            record("chargeback", 1, 1),
        ])

        client = ledger.snapshot()[0]
        assert client.total == Decimal("3.0")
        assert client.held == Decimal("0.0")
        assert client.available == Decimal("3.0")
        assert client.locked is True

    def test_insufficient_funds_scenario(self, service, ledger):
        service.process([
            record("deposit", 1, 1, "2.0"),
            record("withdrawal", 1, 2, "5.0"),
        ])

        assert ledger.snapshot()[0].total == Decimal("2.0")
        assert service.failures[0].error_code == "INSUFFICIENT_FUNDS"

    def test_empty_account_dispute_lifecycle_scenario(self, service):
        service.process([
            record(TransactionType.dispute, 1, 1),
            record(TransactionType.resolve, 1, 1),
            record(TransactionType.chargeback, 1, 1),
        ])

        assert [f.error_code for f in service.failures] == ["UNKNOWN_TRANSACTION"] * 3
