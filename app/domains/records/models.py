# app/domains/records/models.py

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentStatus(str, Enum):
    PAID = "paid"
    DUE = "due"


class EntryKind(str, Enum):
    """Classification derived from a record's fields, never stored."""

    MILK = "milk"
    PAYMENT = "payment"
    ABSENT = "absent"
    DUE = "due"


def classify(quantity: float, amount: float, payment_status: PaymentStatus) -> EntryKind:
    if quantity > 0:
        return EntryKind.MILK
    if amount == 0:
        return EntryKind.ABSENT
    if payment_status == PaymentStatus.PAID:
        return EntryKind.PAYMENT
    # zero quantity with an outstanding amount
    return EntryKind.DUE


class RecordCreate(BaseModel):
    date: datetime.date
    customer_name: str = Field(min_length=1)
    quantity: float = Field(default=0, ge=0)
    amount: float = Field(default=0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.DUE

    @property
    def kind(self) -> EntryKind:
        return classify(self.quantity, self.amount, self.payment_status)


class TransactionRecord(RecordCreate):
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime.datetime


class DailyTotals(BaseModel):
    date: Optional[datetime.date] = None
    record_count: int = 0
    total_milk: float = 0
    total_amount: float = 0
    paid_amount: float = 0
    due_amount: float = 0


class CustomerSummary(BaseModel):
    name: str
    total_milk: float = 0
    total_amount: float = 0
    paid_amount: float = 0
    due_amount: float = 0
    absent_days: int = 0
    transaction_count: int = 0
    last_transaction: Optional[datetime.date] = None

    @property
    def is_clear(self) -> bool:
        return self.due_amount <= 0


class LedgerView(BaseModel):
    records: List[TransactionRecord]
    summary: DailyTotals
