# tests/conftest.py
import os

# Must be set before app.config is first imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADVISOR_DASHBOARD_PASSWORD"] = "advisor-pass"
os.environ.pop("OPENAI_API_KEY", None)

import json
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.db import Base, engine
from app.llm import LLMClient
from app.main import app
from app.api.routes import get_service
from app.services import AdvisorSessionService


class FakeLLMClient(LLMClient):
    """Scripted stand-in for the model. Replies are consumed in order."""

    default_reply = "Thanks. Could you tell me a bit more?"

    def __init__(self):
        self.replies: List[str] = []
        self.calls: List[Dict] = []
        self.fail = False

    def queue(self, *replies) -> None:
        for r in replies:
            self.replies.append(r if isinstance(r, str) else json.dumps(r))

    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.3,
        model: Optional[str] = None,
        json_mode: bool = False,
    ) -> str:
        self.calls.append({"messages": messages, "json_mode": json_mode})
        if self.fail:
            raise RuntimeError("model unavailable")
        if self.replies:
            return self.replies.pop(0)
        return self.default_reply


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def service(llm):
    return AdvisorSessionService(llm_client=llm)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
