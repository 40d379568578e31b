"""Tests for the LeadMaps analytics assistant."""

from datetime import timedelta

import pytest

from lead_scoring.models import AnalysisType
from llm.orchestrator import LeadMapsAssistant
from llm.prompt_templates import PromptTemplates

from conftest import FakeProvider


@pytest.fixture
def loaded_assistant(assistant, sao_paulo_leads):
    assistant.ingest(sao_paulo_leads)
    return assistant


class TestStandby:
    def test_standby_before_ingest(self, assistant, fake_provider):
        response = assistant.respond("Quais leads têm o melhor score?")

        assert response.message == PromptTemplates.STANDBY_MESSAGE
        assert response.error is None
        assert fake_provider.calls == []

    def test_standby_wins_over_missing_credential(self):
        response = LeadMapsAssistant(provider=None).respond("Resumo")
        assert response.message.startswith("🟡 **MODO STANDBY**")
        assert response.error is None

    def test_empty_batch_stays_in_standby(self, assistant, fake_provider):
        summary = assistant.ingest([])

        assert summary.total_leads == 0
        assert summary.breakdown.to_dict() == {"hot": 0, "warm": 0, "cold": 0}
        assert summary.top_opportunities == []
        assert assistant.respond("Resumo").message == PromptTemplates.STANDBY_MESSAGE
        assert fake_provider.calls == []


class TestIngest:
    def test_summary(self, assistant, sao_paulo_leads):
        summary = assistant.ingest(sao_paulo_leads)

        assert summary.extraction_id.startswith("ext_")
        assert summary.total_leads == 5
        assert summary.breakdown.to_dict() == {"hot": 2, "warm": 1, "cold": 2}
        assert summary.top_opportunities[0].id == "rj-1"
        assert "Score médio: 62/100" in summary.market_insights
        assert summary.next_actions[0] == "Priorizar contato com os 2 leads quentes"
        assert summary.comparison_with_previous is None
        assert summary.timestamp.utcoffset() == timedelta(0)

    def test_comparison_with_previous(self, assistant, sao_paulo_leads):
        assistant.ingest(sao_paulo_leads)
        summary = assistant.ingest(sao_paulo_leads[:3])

        comparison = summary.comparison_with_previous
        assert comparison.previous_total == 5
        assert comparison.growth == -2
        assert comparison.quality_improvement == -6
        assert len(assistant.context.extraction_history) == 2
        assert assistant.context.last_extraction is summary

    def test_summary_to_dict(self, loaded_assistant):
        data = loaded_assistant.context.last_extraction.to_dict()
        assert data["qualified_leads"] == {"hot": 2, "warm": 1, "cold": 2}
        assert data["comparison_with_previous"] is None

    def test_analyze_region_is_kept(self, loaded_assistant):
        analysis = loaded_assistant.analyze_region("São Paulo")
        assert analysis.total_leads == 3
        assert loaded_assistant.context.market_analyses == [analysis]

    def test_reset(self, loaded_assistant):
        loaded_assistant.analyze_region("São Paulo")
        loaded_assistant.reset()

        context = loaded_assistant.context
        assert context.current_leads == []
        assert context.extraction_history == []
        assert context.market_analyses == []
        assert context.last_extraction is None

    def test_find_lead(self, loaded_assistant):
        assert loaded_assistant.find_lead("sp-2").name == "Pizzaria do Bairro"
        assert loaded_assistant.find_lead("missing") is None


class TestRespond:
    def test_missing_credential(self, sao_paulo_leads):
        assistant = LeadMapsAssistant(provider=None)
        assistant.ingest(sao_paulo_leads)

        response = assistant.respond("Resumo")
        assert response.message == ""
        assert response.error == "LLM_API_KEY não configurada"

    def test_provider_failure_becomes_error(self, sao_paulo_leads):
        assistant = LeadMapsAssistant(provider=FakeProvider(error=RuntimeError("rate limited")))
        assistant.ingest(sao_paulo_leads)

        response = assistant.respond("Resumo")
        assert response.message == ""
        assert response.error == "rate limited"
        assert response.analysis_type == AnalysisType.SUMMARY

    def test_qualification(self, loaded_assistant):
        response = loaded_assistant.respond("Quais são os leads quentes?")

        assert response.message == "Análise concluída."
        assert response.analysis_type == AnalysisType.QUALIFICATION
        assert response.insights[0] == "2 leads quentes identificados"
        assert [lead["id"] for lead in response.data["leads"]][:2] == ["rj-1", "sp-1"]

    def test_copywriting(self, loaded_assistant):
        response = loaded_assistant.respond("Gere mensagens de prospecção")

        assert response.analysis_type == AnalysisType.COPYWRITING
        assert len(response.data["scripts"]) == 5
        assert all(s["channel"] == "chat" for s in response.data["scripts"])
        assert len(response.recommendations) == 2

    def test_whatsapp_request_is_filtering(self, loaded_assistant):
        response = loaded_assistant.respond("Separe apenas pizzarias com WhatsApp")

        assert response.analysis_type == AnalysisType.FILTERING
        assert [lead["id"] for lead in response.data["leads"]] == ["sp-1"]
        assert response.insights[0] == "1 de 5 leads atendem aos critérios"
        assert loaded_assistant.context.active_filters.categories == ["Pizzaria"]

    def test_filtering_without_criteria(self, loaded_assistant):
        response = loaded_assistant.respond("Separe apenas os melhores")
        assert len(response.data["leads"]) == 5
        assert response.insights[0].startswith("Nenhum critério de filtro reconhecido")

    def test_market_strategy(self, loaded_assistant):
        response = loaded_assistant.respond("Qual região tem mais oportunidade?")

        assert response.analysis_type == AnalysisType.MARKET_STRATEGY
        assert response.insights[0] == (
            "Belo Horizonte: 75/100 - baixa concorrência, concorrentes com avaliações baixas, "
            "alto gap de digitalização"
        )

    def test_summary(self, loaded_assistant):
        response = loaded_assistant.respond("Me dê um resumo")
        assert response.data["summary"]["total_leads"] == 5

    def test_comparison(self, assistant, sao_paulo_leads):
        assistant.ingest(sao_paulo_leads)
        assert assistant.respond("Comparar extrações").insights == [
            "Nenhuma extração anterior para comparar"
        ]

        assistant.ingest(sao_paulo_leads[:3])
        assert assistant.respond("Comparar extrações").insights == [
            "Extração anterior: 5 leads",
            "Crescimento: -2 leads",
            "Variação do melhor score: -6 pontos",
        ]

    def test_general_request_sends_context_and_history(self, loaded_assistant, fake_provider):
        history = [
            {"role": "user", "content": "Olá"},
            {"role": "assistant", "content": "Olá! Como posso ajudar?"},
        ]
        response = loaded_assistant.respond("O que você acha desses dados?", history)

        assert response.analysis_type == AnalysisType.GENERAL
        assert response.data is None

        call = fake_provider.calls[-1]
        assert call["messages"][:2] == history
        assert call["messages"][-1] == {"role": "user", "content": "O que você acha desses dados?"}
        assert "Total de leads: 5" in call["system"]
        assert "1. Academia Corpo Forte | Academia | Score: 86/100 | HOT | Rio de Janeiro" in call["system"]

    def test_to_dict_hides_timing(self, loaded_assistant):
        data = loaded_assistant.respond("Resumo").to_dict()
        assert "completion_seconds" not in data
        assert data["analysis_type"] == "summary"
