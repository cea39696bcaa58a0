from enum import Enum


class StoreFailure(Exception):
    """A record or customer persistence call failed.

    The message is meant to be shown to the user as-is.
    """


class ValidationFailure(Exception):
    """A required field is missing for the chosen entry type."""


class ConfirmationRequired(Exception):
    """A large amount needs an explicit confirmation before it is saved."""

    def __init__(self, amount: float, message: str):
        super().__init__(message)
        self.amount = amount


class CaptureErrorKind(str, Enum):
    NO_SPEECH = "no_speech"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"
