# quiz_editor/quiz_document.py
import logging
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quiz_editor.exceptions import IndexOutOfRange, InvalidEnum, InvalidSelection, InvalidValue
from quiz_editor.schemas import OptionLang, Question, QuizInfo, create_question, relabel

logger = logging.getLogger(__name__)

# Metadata fields addressable by the editor, by wire name and by attribute name
_METADATA_FIELDS = {
    "title": "title",
    "date": "date",
    "description": "description",
    "seedExtension": "seed_extension",
    "seed_extension": "seed_extension",
    "version": "version",
}


def _require_text(value: Any) -> None:
    if not isinstance(value, str):
        raise InvalidValue(f"expected text, got {type(value).__name__}")


class QuizDocument(BaseModel):
    """
    The quiz being edited: metadata plus the ordered questions.

    Structure only changes through add_question/remove_question, both of which
    leave every question's id and questionName matching its position. Every
    mutator checks its arguments before touching anything, so a call that
    raises leaves the document as it was.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    quiz_info: QuizInfo = Field(default_factory=QuizInfo, alias="quizInfo")
    quiz_questions: List[Question] = Field(default_factory=list, alias="quizQuestions")

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "QuizDocument":
        """Hydrate from the `{quizInfo, quizQuestions}` shape and normalize labels."""
        doc = cls.model_validate(data)
        relabel(doc.quiz_questions)
        return doc

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def _question(self, index: int) -> Question:
        if not isinstance(index, int) or not 0 <= index < len(self.quiz_questions):
            raise IndexOutOfRange(
                f"question index {index!r} out of range for {len(self.quiz_questions)} questions"
            )
        return self.quiz_questions[index]

    def set_metadata_field(self, field: str, value: Any) -> None:
        name = _METADATA_FIELDS.get(field)
        if name is None:
            raise InvalidEnum(f"unknown quiz info field: {field!r}")
        try:
            setattr(self.quiz_info, name, value)
        except ValidationError as e:
            raise InvalidValue(f"invalid value for {field}: {value!r}") from e
        logger.debug("Set quiz info %s", name)

    def add_question(self) -> Question:
        question = create_question(len(self.quiz_questions))
        self.quiz_questions.append(question)
        logger.debug("Added question %s", question.question_name)
        return question

    def update_question_text(self, index: int, text: str) -> None:
        question = self._question(index)
        _require_text(text)
        question.question_text = text

    def update_option(self, q_index: int, o_index: int, text: str) -> None:
        question = self._question(q_index)
        if not isinstance(o_index, int) or not 0 <= o_index < len(question.options):
            raise IndexOutOfRange(
                f"option index {o_index!r} out of range for question {question.question_name}"
            )
        _require_text(text)
        question.options[o_index] = text

    def set_correct_index(self, q_index: int, value: Any) -> None:
        """Accepts an int or the string a select element posts ("2")."""
        question = self._question(q_index)
        # int() would truncate 1.9 and accept True
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise InvalidSelection(f"correct option must be an integer, got {value!r}")
        try:
            selection = int(value)
        except (TypeError, ValueError):
            raise InvalidSelection(f"correct option must be an integer, got {value!r}") from None
        if not 0 <= selection < len(question.options):
            raise InvalidSelection(
                f"correct option {selection} outside 0..{len(question.options) - 1}"
            )
        question.correct_index = selection

    def set_option_language(self, q_index: int, lang: Any) -> None:
        question = self._question(q_index)
        try:
            option_lang = OptionLang(lang)
        except ValueError:
            raise InvalidEnum(f"unrecognized option language: {lang!r}") from None
        question.option_lang = option_lang

    def remove_question(self, index: int) -> Question:
        removed = self._question(index)
        del self.quiz_questions[index]
        relabel(self.quiz_questions)
        logger.debug("Removed question at %d, %d left", index, len(self.quiz_questions))
        return removed
