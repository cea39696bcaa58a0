# app/domains/voice/models.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domains.customers.models import CreateOutcome
from app.domains.entries.models import EntryType, RecordDraft
from app.domains.records.models import EntryKind, PaymentStatus, classify


class ParsedTranscript(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str
    quantity: float = 0
    amount: float = 0
    payment_status: PaymentStatus = PaymentStatus.DUE

    @property
    def kind(self) -> EntryKind:
        return classify(self.quantity, self.amount, self.payment_status)


class TranscriptIn(BaseModel):
    text: str = Field(min_length=1)


class ParseResponse(BaseModel):
    matched: bool
    message: str
    transcript: str
    parsed: Optional[ParsedTranscript] = None
    kind: Optional[EntryKind] = None
    draft: Optional[RecordDraft] = None
    entry_type: Optional[EntryType] = None
    customer_outcome: Optional[CreateOutcome] = None
