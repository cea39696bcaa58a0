"""State of one entry screen, updated one event at a time.

:func:`reduce` is pure: it never touches the database. Work that needs I/O is
left on the state (``customer_to_register``, ``ready_record``) for
:class:`~app.domains.entries.session.EntrySession` to carry out, which then
feeds the outcome back in as another event.
"""

import datetime
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from app.config.setting import settings
from app.domains.entries.assembly import assemble, draft_from_parse, infer_entry_type
from app.domains.entries.models import EntryType, RecordDraft
from app.domains.records.models import RecordCreate, TransactionRecord
from app.domains.voice.parser import parse_transcript
from app.shared import messages
from app.shared.errors import CaptureErrorKind, ConfirmationRequired, ValidationFailure
from app.shared.speech_capture import CaptureEvent, CaptureFailed, ListeningChanged, TranscriptReceived

_CAPTURE_NOTICES = {
    CaptureErrorKind.NO_SPEECH: messages.NO_SPEECH,
    CaptureErrorKind.PERMISSION_DENIED: messages.MIC_PERMISSION,
    CaptureErrorKind.OTHER: messages.SPEECH_ERROR,
}


@dataclass(frozen=True)
class Notice:
    level: str  # success | error | info
    message: str


@dataclass(frozen=True)
class AppState:
    selected_date: datetime.date
    draft: RecordDraft = field(default_factory=RecordDraft)
    entry_type: EntryType = EntryType.MILK
    is_listening: bool = False
    transcript: str = ""
    notice: Optional[Notice] = None
    pending_confirmation: Optional[float] = None
    customer_to_register: Optional[str] = None
    ready_record: Optional[RecordCreate] = None
    last_saved: Optional[TransactionRecord] = None


@dataclass(frozen=True)
class DraftEdited:
    draft: RecordDraft


@dataclass(frozen=True)
class EntryTypeSelected:
    entry_type: EntryType


@dataclass(frozen=True)
class DateSelected:
    day: datetime.date


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class SubmitConfirmed:
    pass


@dataclass(frozen=True)
class SubmitCancelled:
    pass


@dataclass(frozen=True)
class CustomerRegistered:
    name: str


@dataclass(frozen=True)
class RecordSaved:
    record: TransactionRecord


@dataclass(frozen=True)
class StoreFailed:
    message: str


Event = Union[
    CaptureEvent,
    DraftEdited,
    EntryTypeSelected,
    DateSelected,
    SubmitRequested,
    SubmitConfirmed,
    SubmitCancelled,
    CustomerRegistered,
    RecordSaved,
    StoreFailed,
]


def _on_final_transcript(state: AppState, text: str) -> AppState:
    parsed = parse_transcript(text)
    if parsed is None:
        return replace(state, transcript=text, notice=Notice("error", messages.PARSE_NO_MATCH))
    return replace(
        state,
        transcript=text,
        draft=draft_from_parse(parsed),
        entry_type=infer_entry_type(text),
        customer_to_register=parsed.customer_name,
        pending_confirmation=None,
        notice=Notice("success", messages.PARSE_OK),
    )


def _on_submit(state: AppState, confirmed: bool, threshold: float) -> AppState:
    try:
        record = assemble(
            state.draft,
            state.entry_type,
            state.selected_date,
            confirmed=confirmed,
            threshold=threshold,
        )
    except ValidationFailure as e:
        return replace(state, notice=Notice("error", str(e)))
    except ConfirmationRequired as e:
        return replace(state, pending_confirmation=e.amount, notice=Notice("info", str(e)))
    return replace(state, ready_record=record, pending_confirmation=None, notice=None)


def reduce(state: AppState, event: Event, threshold: float = None) -> AppState:
    if threshold is None:
        threshold = settings.large_amount_threshold

    if isinstance(event, ListeningChanged):
        if event.listening:
            return replace(state, is_listening=True, transcript="", notice=Notice("info", messages.START_SPEAKING))
        return replace(state, is_listening=False)

    if isinstance(event, TranscriptReceived):
        if not event.is_final:
            return replace(state, transcript=event.text)
        # a transcript delivered after stop still counts
        return _on_final_transcript(state, event.text)

    if isinstance(event, CaptureFailed):
        return replace(state, is_listening=False, notice=Notice("error", _CAPTURE_NOTICES[event.kind]))

    if isinstance(event, DraftEdited):
        return replace(state, draft=event.draft, pending_confirmation=None)

    if isinstance(event, EntryTypeSelected):
        return replace(state, entry_type=event.entry_type, pending_confirmation=None)

    if isinstance(event, DateSelected):
        return replace(state, selected_date=event.day)

    if isinstance(event, SubmitRequested):
        return _on_submit(state, confirmed=False, threshold=threshold)

    if isinstance(event, SubmitConfirmed):
        if state.pending_confirmation is None:
            return state
        return _on_submit(state, confirmed=True, threshold=threshold)

    if isinstance(event, SubmitCancelled):
        return replace(state, pending_confirmation=None, notice=None)

    if isinstance(event, CustomerRegistered):
        return replace(state, customer_to_register=None)

    if isinstance(event, RecordSaved):
        return replace(
            state,
            draft=RecordDraft(),
            ready_record=None,
            last_saved=event.record,
            notice=Notice("success", messages.RECORD_SAVED),
        )

    if isinstance(event, StoreFailed):
        return replace(
            state,
            ready_record=None,
            customer_to_register=None,
            notice=Notice("error", event.message),
        )

    raise TypeError(f"Unknown event: {event!r}")
