"""Tests for request classification and filter extraction."""

import pytest

from lead_scoring.filter_extractor import FilterExtractor
from lead_scoring.models import AnalysisType, Temperature
from lead_scoring.request_classifier import RequestClassifier


@pytest.fixture
def classifier():
    return RequestClassifier()


@pytest.fixture
def extractor():
    return FilterExtractor()


# ── Request Classifier ────────────────────────────────

class TestRequestClassifier:
    @pytest.mark.parametrize("message,expected", [
        ("Separe apenas pizzarias com WhatsApp", AnalysisType.FILTERING),
        ("Quais leads têm o melhor score?", AnalysisType.QUALIFICATION),
        ("Mostre os leads quentes", AnalysisType.QUALIFICATION),
        ("Gere mensagens de prospecção", AnalysisType.COPYWRITING),
        ("Crie um script para cold call", AnalysisType.COPYWRITING),
        ("Liste os leads de Campinas", AnalysisType.FILTERING),
        ("Qual bairro tem menos concorrência?", AnalysisType.MARKET_STRATEGY),
        ("Onde está a melhor oportunidade?", AnalysisType.MARKET_STRATEGY),
        ("Me dê um resumo da extração", AnalysisType.SUMMARY),
        ("Quero uma visão geral", AnalysisType.SUMMARY),
        ("Comparar com a extração anterior", AnalysisType.COMPARISON),
        ("Olá, tudo bem?", AnalysisType.GENERAL),
        ("", AnalysisType.GENERAL),
    ])
    def test_classification(self, classifier, message, expected):
        assert classifier.classify(message) == expected

    def test_priority_order(self, classifier):
        # qualification outranks copywriting, which outranks filtering
        assert classifier.classify("Script para os leads de maior score") == AnalysisType.QUALIFICATION
        assert classifier.classify("Separe apenas os scripts") == AnalysisType.COPYWRITING

    def test_case_insensitive(self, classifier):
        assert classifier.classify("RESUMO") == AnalysisType.SUMMARY


# ── Filter Extractor ──────────────────────────────────

class TestFilterExtractor:
    def test_category_and_whatsapp(self, extractor, sao_paulo_leads):
        filters = extractor.extract("Separe apenas pizzarias com WhatsApp", sao_paulo_leads)

        assert filters.categories == ["Pizzaria"]
        assert filters.has_whatsapp is True
        assert filters.has_website is None
        assert filters.cities == []

    def test_without_channels(self, extractor, sao_paulo_leads):
        filters = extractor.extract("Liste academias sem site e sem WhatsApp", sao_paulo_leads)
        assert filters.categories == ["Academia"]
        assert filters.has_website is False
        assert filters.has_whatsapp is False

    def test_cities_and_neighborhoods(self, extractor, sao_paulo_leads):
        filters = extractor.extract("Filtrar leads de São Paulo e Copacabana", sao_paulo_leads)
        assert filters.cities == ["São Paulo", "Copacabana"]

    def test_only_known_categories(self, extractor, sao_paulo_leads):
        filters = extractor.extract("Separe apenas hamburguerias", sao_paulo_leads)
        assert filters.categories == []
        assert filters.is_empty()

    def test_temperatures(self, extractor):
        filters = extractor.extract("Filtrar leads mornos e frios")
        assert filters.temperatures == [Temperature.WARM, Temperature.COLD]

    def test_thresholds(self, extractor):
        filters = extractor.extract("Liste com score acima de 60 e nota acima de 4,5")
        assert filters.min_score == 60
        assert filters.min_rating == 4.5

    def test_describe(self, extractor, sao_paulo_leads):
        filters = extractor.extract("Separe apenas pizzarias com WhatsApp", sao_paulo_leads)
        assert filters.describe() == ["categorias: Pizzaria", "com WhatsApp"]
