import datetime
import logging
from typing import Optional

from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from app.domains.entries.models import EntryType, RecordDraft
from app.domains.entries.service import EntryService
from app.domains.entries.state import (
    AppState,
    CustomerRegistered,
    DateSelected,
    DraftEdited,
    EntryTypeSelected,
    Event,
    RecordSaved,
    StoreFailed,
    SubmitCancelled,
    SubmitConfirmed,
    SubmitRequested,
    reduce,
)
from app.shared.errors import StoreFailure
from app.shared.speech_capture import decode_capture_message

logger = logging.getLogger(__name__)


class UnknownMessage(ValueError):
    pass


def decode_client_message(message: dict, state: AppState) -> Event:
    """Map one client message to an event.

    Raises ``UnknownMessage`` for anything that is not understood, including
    a draft edit with invalid field values.
    """
    if not isinstance(message, dict):
        raise UnknownMessage("Messages must be JSON objects")

    event = decode_capture_message(message)
    if event is not None:
        return event

    message_type = message.get("type")
    try:
        if message_type == "edit":
            fields = {**state.draft.model_dump(), **(message.get("draft") or {})}
            return DraftEdited(draft=RecordDraft.model_validate(fields))
        if message_type == "entry_type":
            return EntryTypeSelected(entry_type=EntryType(message.get("entry_type")))
        if message_type == "date":
            return DateSelected(day=datetime.date.fromisoformat(str(message.get("date"))))
    except (ValidationError, ValueError) as e:
        raise UnknownMessage(f"Invalid '{message_type}' message: {e}") from e

    if message_type == "submit":
        return SubmitRequested()
    if message_type == "confirm":
        return SubmitConfirmed()
    if message_type == "cancel":
        return SubmitCancelled()

    raise UnknownMessage(f"Unknown message type: {message_type!r}")


class EntrySession:
    """Owns the state of one connected client and runs its side effects."""

    def __init__(
        self,
        entry_service: EntryService,
        today: Optional[datetime.date] = None,
        threshold: Optional[float] = None,
    ):
        self.entries = entry_service
        self.threshold = threshold
        self.state = AppState(selected_date=today or datetime.date.today())

    def _apply(self, event: Event) -> AppState:
        self.state = reduce(self.state, event, threshold=self.threshold)
        return self.state

    async def dispatch(self, event: Event) -> AppState:
        self._apply(event)

        if self.state.customer_to_register:
            name = self.state.customer_to_register
            try:
                await self.entries.customers.create_customer(name)
            except StoreFailure as e:
                logger.error(f"Could not register customer {name}: {e}")
                return self._apply(StoreFailed(message=str(e)))
            self._apply(CustomerRegistered(name=name))

        if self.state.ready_record is not None:
            try:
                record = await self.entries.save(self.state.ready_record)
            except StoreFailure as e:
                logger.error(f"Could not save record: {e}")
                return self._apply(StoreFailed(message=str(e)))
            self._apply(RecordSaved(record=record))

        return self.state

    def snapshot(self) -> dict:
        state = jsonable_encoder(self.state)
        # internal hand-off fields, not part of the client view
        state.pop("ready_record", None)
        state.pop("customer_to_register", None)
        return state
