# quiz_editor/editor_session.py
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from quiz_editor.exceptions import QuizValidationError, TransportError
from quiz_editor.quiz_client import QuizApiClient
from quiz_editor.quiz_document import QuizDocument
from quiz_editor.validation import require_valid

logger = logging.getLogger(__name__)

QUIZ_LIST_ROUTE = "/quizzes"

LOAD_FAILED = "Failed to fetch quiz for editing."
SAVE_FAILED_GENERIC = "Failed to save quiz. Please check the server logs for more details."
SAVE_IN_PROGRESS = "A save is already in progress."
CREATED = "Quiz saved successfully!"
UPDATED = "Quiz updated successfully!"


class EditorMode(str, Enum):
    CREATING = "creating"
    EDITING = "editing"


class SaveState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class EditorOutcome(BaseModel):
    """What the presentation layer should show after a load or save."""
    ok: bool
    message: Optional[str] = None
    redirect_to: Optional[str] = None


class EditorSession:
    """
    One open editor: the document being edited, the mode it was opened in
    and the state of the last save. Creating when opened without a quiz
    name, editing the quiz stored under `quiz_name` otherwise.
    """
    def __init__(self, client: QuizApiClient, quiz_name: Optional[str] = None):
        self.client = client
        self.quiz_name = quiz_name or None
        self.mode = EditorMode.EDITING if self.quiz_name else EditorMode.CREATING
        self.document = QuizDocument()
        self.state = SaveState.IDLE
        self._loaded = False

    @property
    def is_editing(self) -> bool:
        return self.mode is EditorMode.EDITING

    async def load(self) -> EditorOutcome:
        """Fetch the quiz being edited. Runs once; a no-op when creating."""
        if not self.is_editing or self._loaded:
            return EditorOutcome(ok=True)
        self._loaded = True
        try:
            self.document = await self.client.fetch_quiz(self.quiz_name)
        except TransportError:
            logger.error(f"Error fetching quiz for editing: {self.quiz_name}", exc_info=True)
            return EditorOutcome(ok=False, message=LOAD_FAILED)
        logger.info(
            f"Loaded quiz {self.quiz_name} with {len(self.document.quiz_questions)} questions"
        )
        return EditorOutcome(ok=True)

    async def save(self) -> EditorOutcome:
        """
        Validate, then create or update the quiz. The document itself is never
        touched, so a failed save leaves everything editable for a retry.
        """
        if self.state is SaveState.SUBMITTING:
            logger.warning("Save requested while a save is in progress; ignoring.")
            return EditorOutcome(ok=False, message=SAVE_IN_PROGRESS)

        try:
            require_valid(self.document)
        except QuizValidationError as e:
            self.state = SaveState.FAILED
            logger.info(f"Save blocked by validation: {e.result.reason}")
            return EditorOutcome(ok=False, message=e.result.message)

        self.state = SaveState.SUBMITTING
        try:
            if self.is_editing:
                await self.client.update_quiz(self.quiz_name, self.document)
                message = UPDATED
            else:
                await self.client.create_quiz(self.document)
                message = CREATED
            self.state = SaveState.SUCCESS
        except TransportError as e:
            logger.error("Error saving quiz.", exc_info=True)
            if e.reason:
                return EditorOutcome(ok=False, message=f"Failed to save quiz: {e.reason}")
            return EditorOutcome(ok=False, message=SAVE_FAILED_GENERIC)
        finally:
            # Cancellation or an unexpected error must not leave the guard stuck
            if self.state is SaveState.SUBMITTING:
                self.state = SaveState.FAILED

        logger.info(f"{message} ({self.document.quiz_info.title})")
        return EditorOutcome(ok=True, message=message, redirect_to=QUIZ_LIST_ROUTE)
