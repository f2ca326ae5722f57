import threading

import pytest
from fastapi.testclient import TestClient

from resume_summary.config import Settings
from resume_summary.job_store import ResumeJobStore
from resume_summary.main import create_app
from resume_summary.models import ResumeSummary

JANE_DOE_REPLY = {
    "name": "Jane Doe",
    "currentRole": "Software Engineer",
    "experienceYears": 5,
    "skills": [],
    "education": [],
    "summary": "Backend engineer with five years of experience building APIs.",
}


class StubSummarizer:
    """Returns a canned reply (or raises) instead of calling Gemini.

    With a ``gate`` the call blocks until the test sets it, so a job can be
    observed while still processing.
    """

    def __init__(self, reply=None, error=None, gate=None):
        self.reply = reply if reply is not None else JANE_DOE_REPLY
        self.error = error
        self.gate = gate
        self.calls = []

    def summarize(self, resume_text, resume_id):
        self.calls.append((resume_text, resume_id))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return ResumeSummary.model_validate({**self.reply, "id": resume_id})


@pytest.fixture
def store():
    return ResumeJobStore()


@pytest.fixture
def gate():
    return threading.Event()


@pytest.fixture
def make_client(store):
    """Build a TestClient around a fresh app; background tasks live as long as the client."""
    clients = []

    def _make(summarizer, **settings):
        app = create_app(settings=Settings(gemini_api_key="", **settings), store=store, summarizer=summarizer)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def drain():
    """Block until every background task started through ``client`` has finished."""

    def _drain(client):
        client.portal.call(client.app.state.processor.drain)

    return _drain
