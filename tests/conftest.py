import random
import time

import jwt
import pytest

from chatsync.application.common.context import AppContext, AssistantSettings
from chatsync.config.settings import Config
from chatsync.domain.ports.generative_client import (
    GenerationRequest,
    GenerationResult,
    GenerativeClient,
)
from chatsync.infrastructure.persistence import (
    CollectionPaths,
    InMemoryDocumentStore,
    StoreIdentityRepository,
    StoreMessageRepository,
    StoreRoomRepository,
    StoreThreadRepository,
)

SERVICE_AUTH_SECRET = "test-secret"
AUD = "test-audience"
ISS = "test-issuer"


def _service_token(sub="user-alice", name="Alice", email="alice@example.com", ttl=300):
    now = int(time.time())
    claims = {
        "sub": sub,
        "iat": now,
        "exp": now + ttl,
        "iss": ISS,
        "aud": AUD,
    }
    if name:
        claims["name"] = name
    if email:
        claims["email"] = email
    return jwt.encode(claims, SERVICE_AUTH_SECRET, algorithm="HS256")


class FakeGenerativeClient(GenerativeClient):
    """
    Scripted stand-in for the generative service.

    Each call pops the next outcome: a str/None becomes the reply text, an
    exception is raised. With the script exhausted every call answers "ok".
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[GenerationRequest] = []
        self.closed = False

    def script(self, *outcomes):
        self.outcomes.extend(outcomes)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if self.outcomes else "ok"
        if isinstance(outcome, Exception):
            raise outcome
        return GenerationResult(text=outcome)

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture()
def store():
    return InMemoryDocumentStore()


@pytest.fixture()
def paths():
    return CollectionPaths("test-app")


@pytest.fixture()
def llm():
    return FakeGenerativeClient()


@pytest.fixture()
def sleeper():
    return RecordingSleep()


@pytest.fixture()
def ctx(store, paths, llm, sleeper):
    return AppContext(
        store=store,
        llm=llm,
        identities=StoreIdentityRepository(store, paths),
        rooms=StoreRoomRepository(store, paths),
        threads=StoreThreadRepository(store, paths),
        messages=StoreMessageRepository(store, paths),
        settings=AssistantSettings(),
        sleep=sleeper,
        rng=random.Random(7),
    )


@pytest.fixture()
def auth_config(monkeypatch):
    monkeypatch.setattr(Config, "SERVICE_AUTH_SECRET", SERVICE_AUTH_SECRET)
    monkeypatch.setattr(Config, "SERVICE_AUTH_AUDIENCE", AUD)
    monkeypatch.setattr(Config, "SERVICE_AUTH_ISSUER", ISS)


@pytest.fixture()
def auth_headers(auth_config):
    """Authentication headers with valid JWT token."""
    return {"Authorization": f"Bearer {_service_token()}"}
