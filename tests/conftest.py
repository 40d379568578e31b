"""Shared fixtures for LeadMaps tests."""

import os

import pytest
from fastapi.testclient import TestClient

# Keep tests independent of a developer's real credential
os.environ.setdefault("LLM_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from lead_scoring.models import RawLead  # noqa: E402
from llm.orchestrator import LeadMapsAssistant  # noqa: E402


def make_lead(lead_id="lead-1", **overrides):
    """RawLead with sensible defaults; every optional field absent."""
    fields = {
        "id": lead_id,
        "name": f"Negócio {lead_id}",
        "category": "Serviços Gerais",
        "address": "Rua Exemplo, 100",
        "city": "Campinas",
        "state": "SP",
        "keyword": "negócios",
        "extracted_at": "2024-05-01T12:00:00Z",
    }
    fields.update(overrides)
    return RawLead(**fields)


class FakeProvider:
    """Completion provider double that records every call."""

    def __init__(self, reply="Análise concluída.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_with_history(self, messages, system=None):
        self.calls.append({"messages": messages, "system": system})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def sao_paulo_leads():
    """Three pizzarias in São Paulo plus two other businesses elsewhere."""
    return [
        make_lead(
            "sp-1", name="Pizzaria Bella Napoli", category="Pizzaria",
            city="São Paulo", neighborhood="Moema",
            whatsapp="+5511999990001", rating=4.8, reviews=620,
        ),
        make_lead(
            "sp-2", name="Pizzaria do Bairro", category="Pizzaria",
            city="São Paulo", neighborhood="Pinheiros",
            phone="+551133330002", website="https://pizzariadobairro.com.br",
            rating=4.2, reviews=85,
        ),
        make_lead(
            "sp-3", name="Forno a Lenha", category="Pizzaria",
            city="São Paulo", rating=3.6, reviews=12,
        ),
        make_lead(
            "rj-1", name="Academia Corpo Forte", category="Academia",
            city="Rio de Janeiro", neighborhood="Copacabana",
            whatsapp="+5521988880001", instagram="@corpoforte", rating=4.6, reviews=210,
        ),
        make_lead(
            "bh-1", name="Oficina Mecânica Silva", category="Oficina Mecânica",
            city="Belo Horizonte", phone="+553132220001", rating=3.9, reviews=40,
        ),
    ]


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def assistant(fake_provider):
    return LeadMapsAssistant(provider=fake_provider)


@pytest.fixture
def client(fake_provider):
    """FastAPI test client whose assistant talks to the fake provider."""
    from api.main import app
    from api.services import get_services

    with TestClient(app) as test_client:
        services = get_services()
        services.assistant = LeadMapsAssistant(
            lead_scorer=services.lead_scorer,
            market_analyzer=services.market_analyzer,
            script_generator=services.script_generator,
            provider=fake_provider,
        )
        yield test_client
