import json
from urllib.parse import unquote

import httpx
import pytest

from quiz_editor.quiz_client import QuizApiClient
from quiz_editor.quiz_document import QuizDocument


def wire_quiz(title="midterm-1"):
    """A quiz as the server stores it."""
    return {
        "quizInfo": {
            "title": title,
            "date": "2024-10-01",
            "description": "HTML and CSS basics",
            "seedExtension": "default_seed",
            "version": "A",
        },
        "quizQuestions": [
            {
                "id": 1,
                "question": "Which tag makes an unordered list?",
                "questionName": "A",
                "options": ["<ul>", "<ol>", "<li>", "<dl>"],
                "optionLang": "language-html",
                "correctIndex": 0,
            },
            {
                "id": 2,
                "question": "Which property sets text color?",
                "questionName": "B",
                "options": ["color", "font", "background", "fill"],
                "optionLang": "language-css",
                "correctIndex": 0,
            },
        ],
    }


class FakeQuizApi:
    """In-memory stand-in for the quiz server, served through httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.quizzes = {}
        self.error = None  # (status, body) returned for every request when set
        self.exception = None  # callable(request) -> httpx exception to raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception(request)
        if self.error is not None:
            status, body = self.error
            if isinstance(body, dict):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=body or "")

        path = request.url.raw_path.decode()
        if request.method == "POST" and path == "/api/quizzes":
            body = json.loads(request.content)
            self.quizzes[body["quizInfo"]["title"]] = body
            return httpx.Response(201, json={"message": "Quiz saved"})

        name = unquote(path.rsplit("/", 1)[1])
        if request.method == "GET":
            if name in self.quizzes:
                return httpx.Response(200, json=self.quizzes[name])
            return httpx.Response(404, json={"error": "Quiz not found"})
        if request.method == "PUT":
            self.quizzes[name] = json.loads(request.content)
            return httpx.Response(200, json={"message": "Quiz updated"})
        return httpx.Response(405)

    def client(self, timeout=5.0) -> QuizApiClient:
        return QuizApiClient(
            base_url="http://quiz.test", timeout=timeout, transport=httpx.MockTransport(self.handler)
        )


@pytest.fixture
def fake_api():
    return FakeQuizApi()


@pytest.fixture
def complete_document():
    doc = QuizDocument()
    doc.set_metadata_field("title", "midterm-1")
    doc.set_metadata_field("date", "2024-10-01")
    doc.set_metadata_field("description", "HTML and CSS basics")
    for i in range(2):
        doc.add_question()
        doc.update_question_text(i, f"Question text {i + 1}")
        for o in range(4):
            doc.update_option(i, o, f"option {o + 1}")
    return doc


@pytest.fixture
def server_quiz():
    return wire_quiz()
