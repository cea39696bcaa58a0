from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect
import logging
from app.config.setting import settings
from app.domains.entries.service import EntryService
from app.domains.entries.session import EntrySession, UnknownMessage, decode_client_message
from app.domains.voice.models import ParseResponse, TranscriptIn
from app.domains.voice.service import VoiceService
from app.shared.errors import StoreFailure
from app.shared.speech_capture import capture_config

logger = logging.getLogger(__name__)

router = APIRouter()


def get_voice_service(request: Request) -> VoiceService:
    return request.app.state.voice_service


@router.post("/parse", response_model=ParseResponse)
async def parse_voice_input(
    payload: TranscriptIn,
    voice_service: VoiceService = Depends(get_voice_service),
):
    try:
        return await voice_service.handle_transcript(payload.text)
    except StoreFailure as e:
        logger.error(f"Error registering customer from voice input: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.websocket("/session")
async def voice_session(websocket: WebSocket):
    entry_service: EntryService = websocket.app.state.entry_service
    session = EntrySession(entry_service, threshold=settings.large_amount_threshold)

    await websocket.accept()
    await websocket.send_json({"type": "config", "config": capture_config(settings.speech_language)})
    await websocket.send_json({"type": "state", "state": session.snapshot()})

    try:
        while True:
            message = await websocket.receive_json()
            try:
                event = decode_client_message(message, session.state)
            except UnknownMessage as e:
                logger.warning(str(e))
                await websocket.send_json({"type": "error", "detail": str(e)})
                continue

            await session.dispatch(event)
            await websocket.send_json({"type": "state", "state": session.snapshot()})
    except WebSocketDisconnect:
        logger.info("Voice session closed")
