"""Message boundary to the client's speech recognition engine.

Speech-to-text runs in the browser (Web Speech API). The client forwards the
engine's callbacks as JSON messages over a WebSocket::

    {"type": "start"}
    {"type": "interim", "text": "ram ko 5"}
    {"type": "final", "text": "ram ko 5 litre 200"}
    {"type": "error", "error": "no-speech"}
    {"type": "end"}

and :func:`decode_capture_message` turns each one into a typed event.
"""

from dataclasses import dataclass
from typing import Optional, Union

from app.shared.errors import CaptureErrorKind

CAPTURE_MESSAGE_TYPES = ("start", "interim", "final", "error", "end")

_ERROR_KINDS = {
    "no-speech": CaptureErrorKind.NO_SPEECH,
    "not-allowed": CaptureErrorKind.PERMISSION_DENIED,
    "permission-denied": CaptureErrorKind.PERMISSION_DENIED,
    "service-not-allowed": CaptureErrorKind.PERMISSION_DENIED,
}


@dataclass(frozen=True)
class ListeningChanged:
    listening: bool


@dataclass(frozen=True)
class TranscriptReceived:
    text: str
    is_final: bool


@dataclass(frozen=True)
class CaptureFailed:
    kind: CaptureErrorKind


CaptureEvent = Union[ListeningChanged, TranscriptReceived, CaptureFailed]


def capture_config(language: str) -> dict:
    """Recognizer settings sent to the client when a session opens."""
    # Hindi first; the recognizer still copes with English words
    return {"lang": language, "continuous": False, "interimResults": True}


def error_kind(raw: Optional[str]) -> CaptureErrorKind:
    return _ERROR_KINDS.get((raw or "").strip().lower(), CaptureErrorKind.OTHER)


def decode_capture_message(message: dict) -> Optional[CaptureEvent]:
    """Return the capture event for a client message, or ``None`` if it is not one."""
    message_type = message.get("type")
    if message_type == "start":
        return ListeningChanged(listening=True)
    if message_type == "end":
        return ListeningChanged(listening=False)
    if message_type in ("interim", "final"):
        return TranscriptReceived(text=str(message.get("text") or ""), is_final=message_type == "final")
    if message_type == "error":
        return CaptureFailed(kind=error_kind(message.get("error")))
    return None
