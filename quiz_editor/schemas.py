# quiz_editor/schemas.py
import datetime
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

OPTION_COUNT = 4
DEFAULT_SEED_EXTENSION = "default_seed"
DEFAULT_VERSION = "A"
VERSIONS = ("A", "B")

_LANG_LABELS = {"js": "JavaScript", "html": "HTML", "css": "CSS", "text": "Text"}


class OptionLang(str, Enum):
    """Rendering hint for option text. Values are the tags the quiz server stores."""
    JS = "language-js"
    HTML = "language-html"
    CSS = "language-css"
    TEXT = "language-text"

    @property
    def tag(self) -> str:
        return self.value[len("language-"):]

    @property
    def label(self) -> str:
        return _LANG_LABELS[self.tag]

    @classmethod
    def _missing_(cls, value):
        # Accept the short form ("js") as well as the stored form ("language-js")
        if isinstance(value, str):
            for member in cls:
                if member.tag == value:
                    return member
        return None


class QuizInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="allow")

    title: str = ""
    date: Optional[datetime.date] = None
    description: str = ""
    seed_extension: str = Field(DEFAULT_SEED_EXTENSION, alias="seedExtension")
    version: str = Field(DEFAULT_VERSION, pattern=r"^[A-Z]+$")

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_unset(cls, value):
        # Date inputs post "" until the user picks a day
        if value == "":
            return None
        return value


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="allow")

    id: int = Field(..., ge=1, description="1-based position in the quiz")
    question_name: str = Field(..., alias="questionName", description="position-derived label")
    question_text: str = Field(
        "",
        alias="question",
        validation_alias=AliasChoices("question", "questionText", "question_text"),
    )
    options: List[str] = Field(default_factory=lambda: [""] * OPTION_COUNT, min_length=1)
    option_lang: OptionLang = Field(OptionLang.TEXT, alias="optionLang")
    correct_index: int = Field(0, ge=0, alias="correctIndex")

    @field_validator("option_lang", mode="before")
    @classmethod
    def normalize_option_lang(cls, value):
        if isinstance(value, str) and not isinstance(value, OptionLang):
            try:
                return OptionLang(value)
            except ValueError:
                return value
        return value


def question_label(position: int) -> str:
    """
    Letter label for a 0-based position: A..Z, then AA, AB, ... (bijective base 26).
    """
    if position < 0:
        raise ValueError(f"position must be non-negative, got {position}")
    label = ""
    n = position + 1
    while n:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def create_question(position: int) -> Question:
    """Blank question labeled for `position`. The caller inserts it."""
    return Question(
        id=position + 1,
        question_name=question_label(position),
        question_text="",
        options=[""] * OPTION_COUNT,
        option_lang=OptionLang.TEXT,
        correct_index=0,
    )


def relabel(questions: List[Question]) -> List[Question]:
    """Recompute id and questionName of every question from its position, in place."""
    for i, question in enumerate(questions):
        question.id = i + 1
        question.question_name = question_label(i)
    return questions
