# quiz_editor/validation.py
from typing import Optional

from pydantic import BaseModel

from quiz_editor.exceptions import QuizValidationError
from quiz_editor.quiz_document import QuizDocument

MISSING_QUIZ_INFO = "missing quiz info"
MISSING_QUESTION_TEXT = "missing question text"
MISSING_OPTION_TEXT = "missing option text"
INVALID_CORRECT_OPTION = "invalid correct option"

MESSAGES = {
    MISSING_QUIZ_INFO: "Please fill in all quiz information fields.",
    MISSING_QUESTION_TEXT: "Please fill in all question texts.",
    MISSING_OPTION_TEXT: "Please fill in all options for each question.",
    INVALID_CORRECT_OPTION: "Please choose a correct option for each question.",
}


class ValidationResult(BaseModel):
    valid: bool
    reason: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason, message=MESSAGES[reason])


def validate(doc: QuizDocument) -> ValidationResult:
    """
    Pre-submit check. Returns the first failure in this order: quiz info,
    then each question's text, then its options, then its correct option.
    """
    info = doc.quiz_info
    if not info.title or not info.date or not info.description:
        return ValidationResult.invalid(MISSING_QUIZ_INFO)

    for question in doc.quiz_questions:
        if not question.question_text:
            return ValidationResult.invalid(MISSING_QUESTION_TEXT)
        for option in question.options:
            if not option:
                return ValidationResult.invalid(MISSING_OPTION_TEXT)
        # Only reachable for fetched quizzes whose options were truncated
        if not 0 <= question.correct_index < len(question.options):
            return ValidationResult.invalid(INVALID_CORRECT_OPTION)

    return ValidationResult.ok()


def require_valid(doc: QuizDocument) -> None:
    """Raise QuizValidationError with the first failure, if any."""
    result = validate(doc)
    if not result.valid:
        raise QuizValidationError(result)
