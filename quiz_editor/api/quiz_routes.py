# quiz_editor/api/quiz_routes.py
import logging
import os
import time
from typing import Callable, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from quiz_editor.editor_session import EditorSession
from quiz_editor.exceptions import QuizEditorError
from quiz_editor.quiz_client import QuizApiClient
from quiz_editor.quiz_document import QuizDocument
from quiz_editor.schemas import VERSIONS, OptionLang

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)


# Editors untouched for this long are dropped
EDITOR_SESSION_TTL = float(os.environ.get("EDITOR_SESSION_TTL", "3600"))


class EditorRegistry:
    """
    Open editor sessions, keyed by session id. Held in memory only; a session
    idle for longer than `idle_timeout` seconds is evicted on the next
    open or lookup.
    """
    def __init__(
        self,
        client_factory: Callable[[], QuizApiClient] = QuizApiClient,
        idle_timeout: float = EDITOR_SESSION_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client_factory = client_factory
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.sessions: Dict[str, EditorSession] = {}
        self.last_used: Dict[str, float] = {}

    def _evict_idle(self) -> None:
        cutoff = self.clock() - self.idle_timeout
        for session_id in [sid for sid, used in self.last_used.items() if used < cutoff]:
            logger.info(f"Evicting idle editor session {session_id}")
            self.close(session_id)

    async def open(self, quiz_name: Optional[str] = None):
        self._evict_idle()
        session = EditorSession(self.client_factory(), quiz_name)
        outcome = await session.load()
        session_id = str(uuid4())
        self.sessions[session_id] = session
        self.last_used[session_id] = self.clock()
        logger.info(f"Opened editor session {session_id} ({session.mode.value}). Open sessions: {len(self.sessions)}")
        return session_id, session, outcome

    def get(self, session_id: str) -> EditorSession:
        self._evict_idle()
        session = self.sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="editor session not found")
        self.last_used[session_id] = self.clock()
        return session

    def close(self, session_id: str) -> None:
        self.last_used.pop(session_id, None)
        if self.sessions.pop(session_id, None) is not None:
            logger.info(f"Closed editor session {session_id}. Open sessions: {len(self.sessions)}")


registry = EditorRegistry()


def get_registry() -> EditorRegistry:
    return registry


router = APIRouter(prefix="/editor")


def _heading(session: EditorSession) -> str:
    return "Edit Quiz" if session.is_editing else "Create a New Quiz"


def _state(session_id: str, session: EditorSession) -> dict:
    return {
        "sessionId": session_id,
        "mode": session.mode.value,
        "heading": _heading(session),
        "saveState": session.state.value,
        "document": session.document.to_wire(),
    }


def _apply(session_id: str, registry: EditorRegistry, action: Callable[[QuizDocument], object]) -> dict:
    """
    Run an edit against a copy of the document and keep it only if every
    step succeeds. Invariant violations become 400s.
    """
    session = registry.get(session_id)
    draft = session.document.model_copy(deep=True)
    try:
        action(draft)
    except QuizEditorError as e:
        logger.warning(f"Rejected edit on session {session_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    session.document = draft
    return _state(session_id, session)


@router.post("/sessions")
async def open_session(payload: dict, registry: EditorRegistry = Depends(get_registry)):
    session_id, session, outcome = await registry.open(payload.get("quizName"))
    body = _state(session_id, session)
    body["notice"] = outcome.message
    return JSONResponse(content=body, status_code=201)


@router.get("/sessions/{session_id}")
async def read_session(session_id: str, registry: EditorRegistry = Depends(get_registry)):
    return _state(session_id, registry.get(session_id))


@router.get("/sessions/{session_id}/view", response_class=HTMLResponse)
async def view_session(request: Request, session_id: str, registry: EditorRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    return templates.TemplateResponse(
        request,
        "editor.html",
        {
            "session_id": session_id,
            "heading": _heading(session),
            "save_label": "Update Quiz" if session.is_editing else "Save Quiz",
            "info": session.document.quiz_info,
            "questions": session.document.quiz_questions,
            "versions": VERSIONS,
            "languages": list(OptionLang),
        },
    )


@router.patch("/sessions/{session_id}/info")
async def update_info(session_id: str, payload: dict, registry: EditorRegistry = Depends(get_registry)):
    field = payload.get("field")
    if not field:
        raise HTTPException(status_code=400, detail="field required")
    return _apply(
        session_id, registry,
        lambda doc: doc.set_metadata_field(field, payload.get("value")),
    )


@router.post("/sessions/{session_id}/questions")
async def add_question(session_id: str, registry: EditorRegistry = Depends(get_registry)):
    return _apply(session_id, registry, lambda doc: doc.add_question())


@router.patch("/sessions/{session_id}/questions/{q_index}")
async def update_question(
    session_id: str, q_index: int, payload: dict, registry: EditorRegistry = Depends(get_registry)
):
    def edit(doc: QuizDocument):
        if "questionText" in payload:
            doc.update_question_text(q_index, payload["questionText"])
        if "correctIndex" in payload:
            doc.set_correct_index(q_index, payload["correctIndex"])
        if "optionLang" in payload:
            doc.set_option_language(q_index, payload["optionLang"])

    return _apply(session_id, registry, edit)


@router.put("/sessions/{session_id}/questions/{q_index}/options/{o_index}")
async def update_option(
    session_id: str, q_index: int, o_index: int, payload: dict,
    registry: EditorRegistry = Depends(get_registry),
):
    return _apply(
        session_id, registry,
        lambda doc: doc.update_option(q_index, o_index, payload.get("value", "")),
    )


@router.delete("/sessions/{session_id}/questions/{q_index}")
async def remove_question(session_id: str, q_index: int, registry: EditorRegistry = Depends(get_registry)):
    return _apply(session_id, registry, lambda doc: doc.remove_question(q_index))


@router.post("/sessions/{session_id}/save")
async def save_session(session_id: str, registry: EditorRegistry = Depends(get_registry)):
    session = registry.get(session_id)
    outcome = await session.save()
    if not outcome.ok:
        raise HTTPException(status_code=400, detail=outcome.message)
    # Navigating away discards the editor
    registry.close(session_id)
    return {"message": outcome.message, "redirectTo": outcome.redirect_to}


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, registry: EditorRegistry = Depends(get_registry)):
    registry.get(session_id)
    registry.close(session_id)
