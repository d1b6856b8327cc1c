# tests/conftest.py
import asyncio
from typing import List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from cep_service.adapters.interfaces.provider import ProviderAdapter
from cep_service.api.dependencies import get_race_coordinator
from cep_service.domain.models import NormalizedRecord, ProviderName
from cep_service.main import app
from cep_service.services.race_coordinator import RaceCoordinator


class FakeAdapter(ProviderAdapter):
    """Adaptor double that answers after `delay` seconds, or raises `error`."""

    def __init__(self, provider: ProviderName, delay: float = 0.0, error: Optional[Exception] = None):
        super().__init__("http://fake.invalid")
        self._provider = provider
        self.delay = delay
        self.error = error
        self.calls: List[str] = []
        self.finished = False

    @property
    def name(self) -> ProviderName:
        return self._provider

    async def fetch(self, code: str, client: httpx.AsyncClient) -> NormalizedRecord:
        self.calls.append(code)
        await asyncio.sleep(self.delay)
        self.finished = True
        if self.error is not None:
            raise self.error
        return NormalizedRecord(
            code=code,
            street="Praça da Sé",
            neighborhood="Sé",
            city="São Paulo",
            region="SP",
            source_provider=self._provider,
        )


def _refuse(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected upstream call: {request.url}")


@pytest.fixture
def offline_client():
    """AsyncClient that fails the test if anything reaches the network."""
    return httpx.AsyncClient(transport=httpx.MockTransport(_refuse))


@pytest.fixture
def make_adapter():
    def _make(provider=ProviderName.VIACEP, delay=0.0, error=None):
        return FakeAdapter(provider, delay=delay, error=error)
    return _make


# --- Override the coordinator dependency with one built from fakes ---
@pytest.fixture
def override_coordinator(client, offline_client):
    installed: List[RaceCoordinator] = []

    def _install(*adapters, deadline=1.0):
        coordinator = RaceCoordinator(adapters, offline_client, deadline=deadline)
        app.dependency_overrides[get_race_coordinator] = lambda: coordinator
        installed.append(coordinator)
        return coordinator
    yield _install
    # Drain detached adaptor tasks on the app's loop before it shuts down
    for coordinator in installed:
        client.portal.call(coordinator.aclose)
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
