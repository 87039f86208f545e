from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
from typing import Optional
from decimal import Decimal


MAX_CLIENT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1
MAX_AMOUNT = Decimal("1e15")


class TransactionType(str, Enum):
    deposit = "deposit"
    withdrawal = "withdrawal"
    dispute = "dispute"
    resolve = "resolve"
    chargeback = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.deposit, TransactionType.withdrawal)


class TransactionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TransactionType = Field(..., description="Transaction type")
    client: int = Field(
        ...,
        ge=0,
        le=MAX_CLIENT_ID,
        description="Client identifier"
    )
    tx: int = Field(
        ...,
        ge=0,
        le=MAX_TX_ID,
        description="Transaction identifier, unique per client"
    )
    amount: Optional[Decimal] = Field(
        None,
        le=MAX_AMOUNT,
        description="Amount moved, only for deposits and withdrawals"
    )

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def blank_amount_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_amount_presence(self):
        if self.type.carries_amount and self.amount is None:
            raise ValueError(f'{self.type.value} transactions must carry an amount')
        if not self.type.carries_amount and self.amount is not None:
            raise ValueError(f'{self.type.value} transactions must not carry an amount')
        return self


class ClientRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    client: int = Field(..., description="Client identifier")
    available: Decimal = Field(..., description="Funds the client may withdraw")
    held: Decimal = Field(..., description="Funds frozen by open disputes")
    total: Decimal = Field(..., description="Available plus held funds")
    locked: bool = Field(..., description="Whether a chargeback locked the account")


class RecordFailure(BaseModel):
    client: Optional[int] = Field(None, description="Client the record addressed")
    tx: Optional[int] = Field(None, description="Transaction the record addressed")
    operation: Optional[str] = Field(None, description="Operation that was attempted")
    detail: str = Field(..., description="Failure description")
    error_code: str = Field(..., description="Machine-readable error code")


class ProcessingSummary(BaseModel):
    records_processed: int = Field(0, description="Records applied successfully")
    records_failed: int = Field(0, description="Records rejected by an account")
    records_rejected: int = Field(0, description="Rows rejected before reaching an account")
    accounts_count: int = Field(0, description="Number of accounts in the ledger")
