import logging

from app.domains.customers.service import CustomerService
from app.domains.entries.assembly import draft_from_parse, infer_entry_type
from app.domains.voice.models import ParseResponse
from app.domains.voice.parser import parse_transcript
from app.shared import messages

logger = logging.getLogger(__name__)


class VoiceService:
    def __init__(self, customer_service: CustomerService):
        self.customers = customer_service

    async def handle_transcript(self, transcript: str) -> ParseResponse:
        """Parse one final transcript into a pre-filled draft.

        An unseen customer name is registered right away, the same as when
        the user adds it by hand. A transcript no rule understands is not an
        error: the response carries ``matched=False`` and a retry prompt.
        """
        logger.info(f"Parsing voice input: {transcript}")
        parsed = parse_transcript(transcript)
        if parsed is None:
            logger.info("No rule matched the transcript")
            return ParseResponse(matched=False, message=messages.PARSE_NO_MATCH, transcript=transcript)

        result = await self.customers.create_customer(parsed.customer_name)
        return ParseResponse(
            matched=True,
            message=messages.PARSE_OK,
            transcript=transcript,
            parsed=parsed,
            kind=parsed.kind,
            draft=draft_from_parse(parsed),
            entry_type=infer_entry_type(transcript),
            customer_outcome=result.outcome,
        )
