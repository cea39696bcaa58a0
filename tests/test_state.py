import datetime

import pytest

from app.domains.entries.models import EntryType, RecordDraft
from app.domains.entries.session import EntrySession, UnknownMessage, decode_client_message
from app.domains.entries.state import (
    AppState,
    DateSelected,
    DraftEdited,
    EntryTypeSelected,
    SubmitCancelled,
    SubmitConfirmed,
    SubmitRequested,
    reduce,
)
from app.domains.records.models import PaymentStatus
from app.shared import messages
from app.shared.errors import CaptureErrorKind
from app.shared.speech_capture import (
    CaptureFailed,
    ListeningChanged,
    TranscriptReceived,
    capture_config,
    decode_capture_message,
    error_kind,
)

DAY = datetime.date(2024, 10, 19)


@pytest.fixture
def state() -> AppState:
    return AppState(selected_date=DAY)


def test_start_and_stop_listening(state):
    listening = reduce(state, ListeningChanged(listening=True))
    stopped = reduce(listening, ListeningChanged(listening=False))

    assert listening.is_listening
    assert listening.notice.message == messages.START_SPEAKING
    assert not stopped.is_listening


@pytest.mark.parametrize(
    "kind, message",
    [
        (CaptureErrorKind.NO_SPEECH, messages.NO_SPEECH),
        (CaptureErrorKind.PERMISSION_DENIED, messages.MIC_PERMISSION),
        (CaptureErrorKind.OTHER, messages.SPEECH_ERROR),
    ],
)
def test_capture_failure_resets_listening(state, kind, message):
    listening = reduce(state, ListeningChanged(listening=True))

    failed = reduce(listening, CaptureFailed(kind=kind))

    assert not failed.is_listening
    assert failed.notice.level == "error"
    assert failed.notice.message == message


def test_interim_transcript_only_updates_display(state):
    updated = reduce(state, TranscriptReceived(text="ram ko 5 litre 200", is_final=False))

    assert updated.transcript == "ram ko 5 litre 200"
    assert updated.draft == state.draft
    assert updated.customer_to_register is None


def test_final_transcript_after_stop_still_prefills(state):
    current = reduce(state, ListeningChanged(listening=True))
    current = reduce(current, ListeningChanged(listening=False))

    current = reduce(current, TranscriptReceived(text="ram ko 5 litre doodh 200 rupees", is_final=True))

    assert current.draft == RecordDraft(customer_name="Ram", quantity=5, amount=200)
    assert current.entry_type == EntryType.MILK
    assert current.customer_to_register == "Ram"
    assert current.notice.message == messages.PARSE_OK


def test_unmatched_transcript_asks_to_retry(state):
    current = reduce(state, TranscriptReceived(text="hello there", is_final=True))

    assert current.notice.message == messages.PARSE_NO_MATCH
    assert current.draft == state.draft
    assert current.customer_to_register is None


def test_large_amount_waits_for_confirmation(state):
    current = reduce(state, DraftEdited(draft=RecordDraft(customer_name="Ram", quantity=40, amount=1600)))

    current = reduce(current, SubmitRequested(), threshold=1000)
    assert current.pending_confirmation == 1600
    assert current.ready_record is None

    current = reduce(current, SubmitConfirmed(), threshold=1000)
    assert current.pending_confirmation is None
    assert current.ready_record.amount == 1600


def test_cancel_drops_pending_confirmation(state):
    current = reduce(state, DraftEdited(draft=RecordDraft(customer_name="Ram", quantity=40, amount=1600)))
    current = reduce(current, SubmitRequested(), threshold=1000)

    current = reduce(current, SubmitCancelled())

    assert current.pending_confirmation is None
    assert current.ready_record is None


def test_confirm_without_pending_is_ignored(state):
    assert reduce(state, SubmitConfirmed()) is state


def test_submit_absent_uses_selected_date(state):
    current = reduce(state, DraftEdited(draft=RecordDraft(customer_name="Mohan", quantity=3, amount=90)))
    current = reduce(current, EntryTypeSelected(entry_type=EntryType.ABSENT))
    current = reduce(current, DateSelected(day=datetime.date(2024, 10, 18)))

    current = reduce(current, SubmitRequested())

    assert current.ready_record.date == datetime.date(2024, 10, 18)
    assert current.ready_record.quantity == 0
    assert current.ready_record.amount == 0
    assert current.ready_record.payment_status == PaymentStatus.DUE


def test_submit_with_missing_fields_sets_error(state):
    current = reduce(state, DraftEdited(draft=RecordDraft(customer_name="Ram", quantity=5)))

    current = reduce(current, SubmitRequested())

    assert current.ready_record is None
    assert current.notice.message == messages.MILK_FIELDS_REQUIRED


def test_decode_capture_messages():
    assert decode_capture_message({"type": "start"}) == ListeningChanged(listening=True)
    assert decode_capture_message({"type": "end"}) == ListeningChanged(listening=False)
    assert decode_capture_message({"type": "final", "text": "x"}) == TranscriptReceived(text="x", is_final=True)
    assert decode_capture_message({"type": "interim", "text": "x"}) == TranscriptReceived(text="x", is_final=False)
    assert decode_capture_message({"type": "error", "error": "not-allowed"}) == CaptureFailed(
        kind=CaptureErrorKind.PERMISSION_DENIED
    )
    assert decode_capture_message({"type": "submit"}) is None


def test_error_kind_defaults_to_other():
    assert error_kind("no-speech") == CaptureErrorKind.NO_SPEECH
    assert error_kind("network") == CaptureErrorKind.OTHER
    assert error_kind(None) == CaptureErrorKind.OTHER


def test_capture_config_is_hindi_first():
    config = capture_config("hi-IN")

    assert config == {"lang": "hi-IN", "continuous": False, "interimResults": True}


def test_decode_client_edit_merges_into_draft(state):
    current = reduce(state, DraftEdited(draft=RecordDraft(customer_name="Ram", quantity=5)))

    event = decode_client_message({"type": "edit", "draft": {"amount": 200}}, current)

    assert event.draft == RecordDraft(customer_name="Ram", quantity=5, amount=200)


@pytest.mark.parametrize(
    "message",
    [
        {"type": "bogus"},
        {"type": "entry_type", "entry_type": "loan"},
        {"type": "date", "date": "19/10/2024"},
        {"type": "edit", "draft": {"amount": -5}},
        ["start"],
    ],
)
def test_decode_client_rejects_bad_messages(state, message):
    with pytest.raises(UnknownMessage):
        decode_client_message(message, state)


async def test_session_registers_customer_and_saves(entry_service, customer_service, record_service):
    session = EntrySession(entry_service, today=DAY, threshold=1000)

    await session.dispatch(TranscriptReceived(text="mohan ₹500 दिया", is_final=True))
    assert [c.name for c in await customer_service.list_customers()] == ["Mohan"]
    assert session.state.entry_type == EntryType.PAYMENT
    assert session.state.customer_to_register is None

    await session.dispatch(SubmitRequested())

    saved = session.state.last_saved
    assert saved is not None
    assert saved.amount == 500
    assert saved.payment_status == PaymentStatus.PAID
    assert session.state.draft == RecordDraft()
    assert session.state.notice.message == messages.RECORD_SAVED
    assert [r.id for r in await record_service.list_records()] == [saved.id]

    snapshot = session.snapshot()
    assert "ready_record" not in snapshot
    assert snapshot["last_saved"]["customer_name"] == "Mohan"
