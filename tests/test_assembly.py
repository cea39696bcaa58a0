import datetime

import pytest

from app.domains.entries.assembly import (
    assemble,
    draft_from_parse,
    finalize_entry,
    infer_entry_type,
    needs_confirmation,
)
from app.domains.entries.models import EntryType, RecordDraft
from app.domains.records.models import PaymentStatus
from app.domains.voice.parser import parse_transcript
from app.shared import messages
from app.shared.errors import ConfirmationRequired, ValidationFailure

DAY = datetime.date(2024, 10, 19)


def test_absent_ignores_draft_values():
    draft = RecordDraft(customer_name="Mohan", quantity=4, amount=300, payment_status=PaymentStatus.PAID)

    record = finalize_entry(draft, EntryType.ABSENT, DAY)

    assert record.customer_name == "Mohan"
    assert record.quantity == 0
    assert record.amount == 0
    assert record.payment_status == PaymentStatus.DUE


def test_payment_forces_zero_quantity_and_paid():
    draft = RecordDraft(customer_name="Sita", quantity=3, amount=300, payment_status=PaymentStatus.DUE)

    record = finalize_entry(draft, EntryType.PAYMENT, DAY)

    assert record.quantity == 0
    assert record.amount == 300
    assert record.payment_status == PaymentStatus.PAID


def test_milk_keeps_status_toggle():
    draft = RecordDraft(customer_name="Ram", quantity=5, amount=200, payment_status=PaymentStatus.PAID)

    record = finalize_entry(draft, EntryType.MILK, DAY)

    assert (record.quantity, record.amount, record.payment_status) == (5, 200, PaymentStatus.PAID)
    assert record.date == DAY


@pytest.mark.parametrize(
    "draft, entry_type, message",
    [
        (RecordDraft(customer_name="  ", quantity=5, amount=200), EntryType.MILK, messages.NAME_REQUIRED),
        (RecordDraft(customer_name="", quantity=None, amount=None), EntryType.ABSENT, messages.NAME_REQUIRED),
        (RecordDraft(customer_name="Ram", quantity=5), EntryType.MILK, messages.MILK_FIELDS_REQUIRED),
        (RecordDraft(customer_name="Ram", amount=200), EntryType.MILK, messages.MILK_FIELDS_REQUIRED),
        (RecordDraft(customer_name="Ram", quantity=0, amount=200), EntryType.MILK, messages.MILK_FIELDS_REQUIRED),
        (RecordDraft(customer_name="Sita"), EntryType.PAYMENT, messages.PAYMENT_AMOUNT_REQUIRED),
    ],
)
def test_missing_fields_fail_validation(draft, entry_type, message):
    with pytest.raises(ValidationFailure) as excinfo:
        finalize_entry(draft, entry_type, DAY)
    assert str(excinfo.value) == message


def test_large_milk_amount_needs_confirmation():
    draft = RecordDraft(customer_name="Ram", quantity=30, amount=1500)

    with pytest.raises(ConfirmationRequired) as excinfo:
        assemble(draft, EntryType.MILK, DAY, threshold=1000)
    assert excinfo.value.amount == 1500

    record = assemble(draft, EntryType.MILK, DAY, confirmed=True, threshold=1000)
    assert record.amount == 1500


def test_payment_never_needs_confirmation():
    draft = RecordDraft(customer_name="Sita", amount=50000)

    record = assemble(draft, EntryType.PAYMENT, DAY, threshold=1000)

    assert record.amount == 50000


def test_threshold_is_exclusive_and_ignores_quantity():
    at_threshold = finalize_entry(RecordDraft(customer_name="Ram", quantity=25, amount=1000), EntryType.MILK, DAY)
    many_litres = finalize_entry(RecordDraft(customer_name="Ram", quantity=500, amount=900), EntryType.MILK, DAY)

    assert not needs_confirmation(at_threshold, EntryType.MILK, threshold=1000)
    assert not needs_confirmation(many_litres, EntryType.MILK, threshold=1000)


@pytest.mark.parametrize(
    "transcript, expected",
    [
        ("Mohan absent", EntryType.ABSENT),
        ("mohan गैरहाजिर", EntryType.ABSENT),
        ("sita 300 paid", EntryType.PAYMENT),
        ("mohan ₹500 दिया", EntryType.PAYMENT),
        ("ram ko 5 litre 200", EntryType.MILK),
        ("radha 200 baaki", EntryType.MILK),
    ],
)
def test_infer_entry_type(transcript, expected):
    assert infer_entry_type(transcript) == expected


def test_parsed_payment_prefills_a_submittable_draft():
    parsed = parse_transcript("mohan 500 paid")
    draft = draft_from_parse(parsed)

    record = assemble(draft, infer_entry_type("mohan 500 paid"), DAY)

    assert draft.customer_name == "Mohan"
    assert record.amount == 500
    assert record.payment_status == PaymentStatus.PAID
