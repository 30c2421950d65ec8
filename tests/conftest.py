# tests/conftest.py
from __future__ import annotations
import copy
import json
from typing import Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from acrolinx_bridge.main import app
from acrolinx_bridge.services.buffer import DocumentBuffer
from acrolinx_bridge.services.check import AcrolinxSession
from acrolinx_bridge.services.http import AcrolinxHttp
from acrolinx_bridge.utils.storage import BufferStore

BASE = "https://acrolinx.example.com"
RESULT_URL = f"{BASE}/api/v1/checking/checks/42"

SAMPLE_TEXT = "Teh tool lets you utilize the editor."

# --------------------------------------------------------------------
# A result as the service sends it: unsorted, nested positions,
# suggestion objects, one issue without any position.
# --------------------------------------------------------------------
RESULT_DATA = {
    "quality": {"score": 72, "status": "yellow"},
    "goals": [
        {"id": "spelling", "displayName": "Spelling", "color": "#d0021b"},
        {"id": "clarity", "displayName": "Clarity"},
    ],
    "issues": [
        {
            "goalId": "clarity",
            "displayNameHtml": "Avoid <b>utilize</b>",
            "guidanceHtml": "<p>Prefer plain words.</p><p>Say <i>use</i>.</p>",
            "positionalInformation": {
                "matches": [{"originalBegin": 18, "originalEnd": 25, "originalPart": "utilize"}]
            },
            "suggestions": [{"surface": "use"}],
        },
        {
            "goalId": "spelling",
            "displayNameHtml": "Teh",
            "guidanceHtml": None,
            "subIssues": [
                {"displayNameHtml": "Misspelled word"},
                {"displayNameHtml": "Possible transposition"},
            ],
            "positionalInformation": {
                "matches": [{"originalBegin": 0, "originalEnd": 3, "originalPart": "Teh"}]
            },
            "suggestions": [{"surface": "The"}, {"surface": "Ten"}],
        },
        {
            "displayNameHtml": "Text is very short",
            "guidanceHtml": "",
            "positionalInformation": {"matches": []},
            "suggestions": [],
        },
    ],
}

TARGETS = [
    {"id": "en-tech", "displayName": "Technical English"},
    {"id": "en-mkt", "displayName": "Marketing"},
]


class FakeAcrolinx:
    """Stands in for the Acrolinx server behind an httpx.MockTransport."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.targets = copy.deepcopy(TARGETS)
        self.result = copy.deepcopy(RESULT_DATA)
        self.not_ready = 0
        self.polls = 0
        self.check_links: Dict[str, str] = {"result": RESULT_URL, "cancel": RESULT_URL}
        self.poll_body = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/api/v1/checking/capabilities":
            return httpx.Response(200, json={"data": {"guidanceProfiles": self.targets}})
        if request.method == "POST" and path == "/api/v1/checking/checks":
            return httpx.Response(201, json={"id": "42", "links": self.check_links})
        if request.method == "GET" and str(request.url) == RESULT_URL:
            self.polls += 1
            if self.poll_body is not None:
                return httpx.Response(200, content=self.poll_body)
            if self.polls <= self.not_ready:
                return httpx.Response(200, json={"progress": {"percent": 10, "retryAfter": 1}})
            return httpx.Response(200, json={"data": self.result})
        if request.method == "DELETE" and str(request.url) == RESULT_URL:
            return httpx.Response(200, json={"data": {"id": "42"}})
        return httpx.Response(404, json={"error": "not found"})

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def submitted(self) -> dict:
        posts = [r for r in self.requests if r.method == "POST"]
        return json.loads(posts[-1].content)


async def no_sleep(_seconds):
    return None


@pytest.fixture
def fake() -> FakeAcrolinx:
    return FakeAcrolinx()


@pytest.fixture
def http(fake) -> AcrolinxHttp:
    return AcrolinxHttp(BASE, "test-signature", api_token="secret-token",
                        transport=httpx.MockTransport(fake.handler))


@pytest.fixture
def session(http) -> AcrolinxSession:
    return AcrolinxSession(http, max_attempts=5, poll_interval=0.0, sleep=no_sleep)


@pytest.fixture
def buffer() -> DocumentBuffer:
    return DocumentBuffer(SAMPLE_TEXT, "notes.txt", path="/home/me/notes.txt", mode="text-mode")


# --------------------------------------------------------------------
# FastAPI test client wired to the fake server
# --------------------------------------------------------------------
@pytest.fixture
def client(session) -> TestClient:
    app.state.session = session
    app.state.buffers = BufferStore()
    return TestClient(app)
