# app/domains/entries/models.py

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.domains.records.models import PaymentStatus


class EntryType(str, Enum):
    MILK = "milk"
    PAYMENT = "payment"
    ABSENT = "absent"


class RecordDraft(BaseModel):
    """Editable form fields, possibly pre-filled from a voice transcript."""

    customer_name: str = ""
    quantity: Optional[float] = Field(default=None, ge=0)
    amount: Optional[float] = Field(default=None, ge=0)
    payment_status: PaymentStatus = PaymentStatus.DUE


class EntrySubmission(BaseModel):
    date: datetime.date
    entry_type: EntryType = EntryType.MILK
    draft: RecordDraft
    confirmed: bool = False
