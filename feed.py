"""
CSV edge of the ledger.

Reads transaction rows into validated ``TransactionRecord`` values and writes
the final account snapshot back out. No account logic lives here.

Input format (header required, column order free, whitespace trimmed):

    type, client, tx, amount
    deposit, 1, 1, 1.0
    dispute, 1, 1,

Rows may be ragged: columns beyond the header are ignored and a missing
trailing ``amount`` column reads as no amount.
"""

import csv
from typing import Iterable, Iterator, List, Optional, TextIO

import structlog
from pydantic import ValidationError

from models import ClientRecord, RecordFailure, TransactionRecord

logger = structlog.get_logger()

REQUIRED_COLUMNS = ("type", "client", "tx")
REPORT_COLUMNS = ("client", "available", "held", "total", "locked")


class MalformedFeedError(ValueError):
    """The input stream cannot be read as a transaction feed at all."""


class CsvTransactionFeed:
    """Iterate validated records from a CSV stream, skipping bad rows."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.rejected: List[RecordFailure] = []

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    def __iter__(self) -> Iterator[TransactionRecord]:
        reader = csv.reader(self.stream, skipinitialspace=True)
        try:
            header = next(reader)
        except StopIteration:
            raise MalformedFeedError("Transaction feed is empty, a header row is required") from None

        columns = [name.strip().lower() for name in header]
        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise MalformedFeedError(
                f"Transaction feed missing required columns {missing}. "
                f"Found columns: {columns}"
            )

        # line 1 is the header
        for line_no, row in enumerate(reader, start=2):
            if all(not value.strip() for value in row):
                continue

            fields = {
                name: value.strip()
                for name, value in zip(columns, row)
            }
            record = self._parse_row(fields, line_no)
            if record is not None:
                yield record

    def _parse_row(self, fields: dict, line_no: int) -> Optional[TransactionRecord]:
        try:
            return TransactionRecord.model_validate(fields)
        except ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
                for err in e.errors()
            )
            self.rejected.append(RecordFailure(
                client=_optional_int(fields.get("client")),
                tx=_optional_int(fields.get("tx")),
                operation=fields.get("type") or None,
                detail=reasons,
                error_code="INVALID_RECORD"
            ))
            logger.warning(
                "Failed to verify the record",
                line=line_no,
                row=fields,
                reason=reasons
            )
            return None


def _optional_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value else None
    except ValueError:
        return None


def format_client_record(record: ClientRecord) -> List[str]:
    return [
        str(record.client),
        str(record.available),
        str(record.held),
        str(record.total),
        "true" if record.locked else "false",
    ]


def write_client_records(records: Iterable[ClientRecord], stream: TextIO) -> int:
    """Write the account report with a header row; returns rows written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_COLUMNS)

    count = 0
    for record in records:
        writer.writerow(format_client_record(record))
        count += 1
    return count
