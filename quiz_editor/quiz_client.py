# quiz_editor/quiz_client.py
import logging
import os
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from quiz_editor.exceptions import TransportError
from quiz_editor.quiz_document import QuizDocument

logger = logging.getLogger(__name__)

# Read from the environment; constructor arguments win
QUIZ_API_URL = os.environ.get("QUIZ_API_URL", "http://localhost:5000")
QUIZ_API_TIMEOUT = float(os.environ.get("QUIZ_API_TIMEOUT", "10"))

QUIZZES_PATH = "/api/quizzes"


def quiz_path(quiz_name: str) -> str:
    # Same escaping as encodeURIComponent: "/" and spaces must not survive
    return f"{QUIZZES_PATH}/{quote(quiz_name, safe='')}"


def _error_reason(response: httpx.Response) -> Optional[str]:
    """The server's `{"error": ...}` text, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


class QuizApiClient:
    """
    Async client for the quiz persistence API.

    Every failure (connection error, timeout, non-2xx status, unusable body)
    comes out as a TransportError.
    """
    def __init__(
        self,
        base_url: str = QUIZ_API_URL,
        timeout: float = QUIZ_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        logger.info(f"QuizApiClient initialized with base URL: {self.base_url}")

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        logger.info("Sending %s %s", method, path)
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                resp = await client.request(method, path, json=json)
                resp.raise_for_status()
                return resp
            except httpx.TimeoutException as e:
                logger.warning("%s %s timed out after %ss", method, path, self.timeout, exc_info=True)
                raise TransportError(f"Request timed out: {method} {path}") from e
            except httpx.HTTPStatusError as e:
                reason = _error_reason(e.response)
                logger.warning(
                    "%s %s failed with status %s (reason: %s)",
                    method, path, e.response.status_code, reason,
                )
                raise TransportError(
                    f"Server returned {e.response.status_code} for {method} {path}",
                    reason=reason,
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                logger.warning("%s %s failed", method, path, exc_info=True)
                raise TransportError(f"Request failed: {method} {path}") from e

    async def fetch_quiz(self, quiz_name: str) -> QuizDocument:
        """GET the quiz stored under `quiz_name` and hydrate it."""
        resp = await self._request("GET", quiz_path(quiz_name))
        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Quiz %s came back as invalid JSON", quiz_name, exc_info=True)
            raise TransportError(f"Invalid JSON for quiz {quiz_name!r}") from e
        try:
            return QuizDocument.from_wire(data)
        except ValidationError as e:
            logger.error("Quiz %s does not match the document shape", quiz_name, exc_info=True)
            raise TransportError(f"Malformed quiz data for {quiz_name!r}") from e

    async def create_quiz(self, doc: QuizDocument) -> None:
        await self._request("POST", QUIZZES_PATH, json=doc.to_wire())

    async def update_quiz(self, quiz_name: str, doc: QuizDocument) -> None:
        await self._request("PUT", quiz_path(quiz_name), json=doc.to_wire())
