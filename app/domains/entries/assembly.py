"""Turn a draft into a record for the selected entry type.

* ``milk``: quantity and amount are required, status comes from the toggle.
* ``payment``: only the amount is required; quantity 0, status ``paid``.
* ``absent``: quantity and amount 0, status ``due``. This marks a day with
  no delivery, not a real balance.

Amounts above the large-amount threshold need an explicit confirmation unless
the entry is a payment. Quantity is never checked against a threshold.
"""

import datetime

from app.config.setting import settings
from app.domains.entries.models import EntryType, RecordDraft
from app.domains.records.models import PaymentStatus, RecordCreate
from app.domains.voice.models import ParsedTranscript
from app.domains.voice.parser import mentions_absent, mentions_paid
from app.shared import messages
from app.shared.errors import ConfirmationRequired, ValidationFailure


def _present(value) -> bool:
    return value is not None and value > 0


def finalize_entry(draft: RecordDraft, entry_type: EntryType, day: datetime.date) -> RecordCreate:
    customer_name = draft.customer_name.strip()
    if not customer_name:
        raise ValidationFailure(messages.NAME_REQUIRED)

    if entry_type == EntryType.MILK:
        if not (_present(draft.quantity) and _present(draft.amount)):
            raise ValidationFailure(messages.MILK_FIELDS_REQUIRED)
        quantity = draft.quantity
        amount = draft.amount
        payment_status = draft.payment_status
    elif entry_type == EntryType.PAYMENT:
        if not _present(draft.amount):
            raise ValidationFailure(messages.PAYMENT_AMOUNT_REQUIRED)
        quantity = 0
        amount = draft.amount
        payment_status = PaymentStatus.PAID
    else:
        quantity = 0
        amount = 0
        payment_status = PaymentStatus.DUE

    return RecordCreate(
        date=day,
        customer_name=customer_name,
        quantity=quantity,
        amount=amount,
        payment_status=payment_status,
    )


def needs_confirmation(record: RecordCreate, entry_type: EntryType, threshold: float = None) -> bool:
    if threshold is None:
        threshold = settings.large_amount_threshold
    return entry_type != EntryType.PAYMENT and record.amount > threshold


def assemble(
    draft: RecordDraft,
    entry_type: EntryType,
    day: datetime.date,
    confirmed: bool = False,
    threshold: float = None,
) -> RecordCreate:
    """Finalize a draft, raising ``ConfirmationRequired`` for an unconfirmed large amount."""
    record = finalize_entry(draft, entry_type, day)
    if not confirmed and needs_confirmation(record, entry_type, threshold):
        raise ConfirmationRequired(record.amount, messages.large_amount(record.amount))
    return record


def infer_entry_type(transcript: str) -> EntryType:
    if mentions_absent(transcript):
        return EntryType.ABSENT
    if mentions_paid(transcript):
        return EntryType.PAYMENT
    return EntryType.MILK


def draft_from_parse(parsed: ParsedTranscript) -> RecordDraft:
    return RecordDraft(
        customer_name=parsed.customer_name,
        quantity=parsed.quantity,
        amount=parsed.amount,
        payment_status=parsed.payment_status,
    )
