"""Rule-based parser for spoken dairy entries.

Turns one final speech transcript (Hindi transliteration, English and
Devanagari mixed freely) into a :class:`ParsedTranscript`. Examples of
utterances it understands::

    "ram ko 5 litre doodh 200 rupees"   -> Ram, 5 L, ₹200, due
    "mohan ₹500 दिया"                   -> Mohan, payment of ₹500
    "radha 200 baaki"                   -> Radha, ₹200 due
    "mohan absent"                      -> Mohan, absent

Patterns are tried in order and the first match wins. The payment status is
then decided from keywords anywhere in the transcript, paid before litre.
Anything else returns ``None`` so the caller can ask the user to repeat.
"""

import re
from typing import Optional

from app.domains.records.models import PaymentStatus
from app.domains.voice.models import ParsedTranscript

# \w misses Devanagari vowel signs, so the whole block is added explicitly
_WORD_CHARS = r"\w\u0900-\u097f"

_CONNECTOR = r"(?:ko|को)"
_UNIT = r"(?:litres?|liters?|ltr|लीटर)"
_MILK = r"(?:doodh|दूध|milk)"
_CURRENCY = r"(?:₹|rupees|रुपए|rs)"
_PAID = r"(?:paid|pay|दे दिया|दिया|de diya|diya)"
_DUE = r"(?:remaining|बाकी|baaki|baki|due)"
_ABSENT = r"(?:absent|गैरहाजिर|nahi aaya)"

# A name is a whole word starting with a letter, and never a connector or
# currency word, so "500 paid" and "rs 500 paid" have no name.
_NAME = (
    rf"(?<![{_WORD_CHARS}])"
    rf"(?!(?:{_CONNECTOR}|{_CURRENCY})(?![{_WORD_CHARS}]))"
    rf"(?P<name>[^\W\d_][{_WORD_CHARS}]*)"
)
_QUANTITY = r"(?<![\d.])(?P<quantity>\d+(?:\.\d+)?)"
_AMOUNT = r"(?<![\d.])(?P<amount>\d+)"

# "1,500" as written by the speech engine, Indian grouping included
_DIGIT_GROUPING = re.compile(r"(?<=\d),(?=\d)")

PATTERNS = [
    # ram ko 5 litre doodh ₹200
    re.compile(
        rf"{_NAME}\s*{_CONNECTOR}?\s*{_QUANTITY}\s*{_UNIT}\s*{_MILK}?\s*{_CURRENCY}?\s*{_AMOUNT}"
    ),
    # ram 5 litre 200
    re.compile(rf"{_NAME}\s*{_QUANTITY}\s*{_UNIT}\s*{_CURRENCY}?\s*{_AMOUNT}"),
    # mohan ₹500 paid
    re.compile(rf"{_NAME}\s*{_CURRENCY}?\s*{_AMOUNT}\s*{_PAID}"),
    # radha 200 baaki
    re.compile(rf"{_NAME}\s*{_CURRENCY}?\s*{_AMOUNT}\s*{_DUE}"),
    # mohan absent
    re.compile(rf"{_NAME}\s+{_ABSENT}"),
]

PAID_KEYWORDS = ("paid", "pay", "दे दिया", "दिया", "de diya", "diya")
ABSENT_KEYWORDS = ("absent", "गैरहाजिर", "nahi aaya")


def _keyword_pattern(keywords) -> re.Pattern:
    # A keyword must start a word, so "nadiya" never reads as "diya"
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"(?<![a-z\u0900-\u097f])(?:{alternatives})")


_PAID_RE = _keyword_pattern(PAID_KEYWORDS)
_ABSENT_RE = _keyword_pattern(ABSENT_KEYWORDS)


def normalize(transcript: str) -> str:
    return _DIGIT_GROUPING.sub("", transcript.lower().strip())


def mentions_paid(transcript: str) -> bool:
    return _PAID_RE.search(normalize(transcript)) is not None


def mentions_absent(transcript: str) -> bool:
    return _ABSENT_RE.search(normalize(transcript)) is not None


def capitalize_name(name: str) -> str:
    return name[:1].upper() + name[1:]


def _number(value: Optional[str]) -> float:
    if value is None:
        return 0
    try:
        return float(value)
    except ValueError:
        return 0


def parse_transcript(transcript: str) -> Optional[ParsedTranscript]:
    """Parse a final transcript, returning ``None`` when no rule applies."""
    text = normalize(transcript)
    if not text:
        return None

    for pattern in PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        groups = match.groupdict()
        name = capitalize_name(groups["name"])
        quantity = _number(groups.get("quantity"))
        amount = _number(groups.get("amount"))

        if _PAID_RE.search(text):
            # paid wins over litre: the first number heard is the payment,
            # so "ram 5 litre 200 paid" is a payment of 5
            first = groups.get("quantity") or groups.get("amount")
            return ParsedTranscript(
                customer_name=name,
                quantity=0,
                amount=int(_number(first)),
                payment_status=PaymentStatus.PAID,
            )

        # A litre sale and the fallback read the same groups; a rule
        # without a quantity group leaves it at 0.
        return ParsedTranscript(
            customer_name=name,
            quantity=quantity,
            amount=amount,
            payment_status=PaymentStatus.DUE,
        )

    return None
