# quiz_editor/exceptions.py
from typing import Optional


class QuizEditorError(Exception):
    """Base class for every error raised by the quiz editor."""


class IndexOutOfRange(QuizEditorError, IndexError):
    """A question or option index does not address an existing element."""


class InvalidSelection(QuizEditorError, ValueError):
    """A correct-option selection is not a valid option position."""


class InvalidEnum(QuizEditorError, ValueError):
    """A value is not one of the recognized tags (option language, metadata field)."""


class InvalidValue(QuizEditorError, ValueError):
    """A metadata value cannot be coerced to the field's type."""


class QuizValidationError(QuizEditorError):
    """Raised when a document fails the pre-submit check."""

    def __init__(self, result):
        super().__init__(result.message)
        self.result = result


class TransportError(QuizEditorError):
    """Network or server failure while talking to the quiz API."""

    def __init__(self, message: str, reason: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code
