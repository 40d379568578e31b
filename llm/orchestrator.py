"""
LeadMaps Analytics Assistant.

Holds the session context (current batch, qualified leads, extraction
history) and routes analyst requests through the local pipeline before
handing them to the completion provider.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from lead_scoring.copywriting import ScriptGenerator
from lead_scoring.filter_extractor import FilterExtractor
from lead_scoring.market_strategy import MarketStrategyAnalyzer
from lead_scoring.models import (
    AnalysisType,
    Channel,
    ExtractionComparison,
    ExtractionSummary,
    LeadFilters,
    MarketAnalysis,
    QualifiedLead,
    RawLead,
    TemperatureBreakdown,
)
from lead_scoring.request_classifier import RequestClassifier
from lead_scoring.scoring_model import LeadScorer, apply_filters, qualification_stats

from .prompt_templates import PromptTemplates

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    """Anything that can answer a chat history, e.g. OpenAIProvider."""

    def generate_with_history(
        self,
        messages: List[Dict[str, str]],
        system: Optional[str] = None,
    ) -> str:
        ...


@dataclass
class SessionContext:
    """Mutable state of one analytics session."""
    current_leads: List[RawLead] = field(default_factory=list)
    qualified_leads: List[QualifiedLead] = field(default_factory=list)
    extraction_history: List[ExtractionSummary] = field(default_factory=list)
    market_analyses: List[MarketAnalysis] = field(default_factory=list)
    last_extraction: Optional[ExtractionSummary] = None
    active_filters: Optional[LeadFilters] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_leads": len(self.current_leads),
            "qualified_leads": len(self.qualified_leads),
            "extractions": len(self.extraction_history),
            "market_analyses": [a.to_dict() for a in self.market_analyses],
            "last_extraction": self.last_extraction.to_dict() if self.last_extraction else None,
            "active_filters": self.active_filters.to_dict() if self.active_filters else None,
        }


@dataclass
class AssistantResponse:
    """Response from the analytics assistant."""
    message: str
    data: Optional[Dict[str, Any]] = None
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    error: Optional[str] = None
    analysis_type: Optional[AnalysisType] = None
    completion_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "message": self.message,
            "data": self.data,
            "insights": self.insights,
            "recommendations": self.recommendations,
            "error": self.error,
            "analysis_type": self.analysis_type.value if self.analysis_type else None,
        }


def _serialize(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Turn the local stage payload into plain JSON-ready structures."""
    if data is None:
        return None

    result = {}
    for key, value in data.items():
        if isinstance(value, list):
            result[key] = [item.to_dict() if hasattr(item, "to_dict") else item for item in value]
        elif hasattr(value, "to_dict"):
            result[key] = value.to_dict()
        else:
            result[key] = value
    return result


class LeadMapsAssistant:
    """
    Routes analyst requests over the session context.

    Pipeline for respond():
    1. Standby when no batch has been ingested
    2. Fail fast when no completion provider is configured
    3. Classify the request
    4. Run the matching local stage (qualification, scripts, filters, ...)
    5. Render the data context into the system prompt
    6. Ask the completion provider and merge its reply with local data
    """

    QUALIFICATION_LIMIT = 20
    SCRIPT_LEADS = 10
    CONTEXT_PREVIEW = 5
    OPPORTUNITY_REGIONS = 5

    def __init__(
        self,
        lead_scorer: Optional[LeadScorer] = None,
        market_analyzer: Optional[MarketStrategyAnalyzer] = None,
        script_generator: Optional[ScriptGenerator] = None,
        request_classifier: Optional[RequestClassifier] = None,
        filter_extractor: Optional[FilterExtractor] = None,
        provider: Optional[CompletionProvider] = None,
        top_opportunities: int = 10,
    ):
        """
        Initialize the assistant.

        Args:
            lead_scorer: Scorer used for every ingested batch
            market_analyzer: Region and category analyzer
            script_generator: Prospecting script generator
            request_classifier: Maps requests to analysis types
            filter_extractor: Natural-language filter extraction
            provider: Completion provider; None means no credential configured
            top_opportunities: Leads kept in each extraction summary
        """
        self.lead_scorer = lead_scorer or LeadScorer()
        self.market_analyzer = market_analyzer or MarketStrategyAnalyzer()
        self.script_generator = script_generator or ScriptGenerator()
        self.request_classifier = request_classifier or RequestClassifier()
        self.filter_extractor = filter_extractor or FilterExtractor()
        self.provider = provider
        self.top_opportunities = top_opportunities

        self.context = SessionContext()

    # ── Context ────────────────────────────────────────

    def ingest(self, leads: Sequence[RawLead]) -> ExtractionSummary:
        """
        Qualify a new batch and make it the current context.

        The previous batch is replaced; its summary stays in the history and
        feeds the comparison block of the new summary.
        """
        leads = list(leads)
        qualified = self.lead_scorer.qualify_batch(leads)
        stats = qualification_stats(qualified)
        distribution = stats["distribution"]
        digital = stats["digital_presence"]

        summary = ExtractionSummary(
            extraction_id=f"ext_{uuid.uuid4().hex[:12]}",
            total_leads=len(leads),
            breakdown=TemperatureBreakdown(
                hot=distribution["hot"],
                warm=distribution["warm"],
                cold=distribution["cold"],
            ),
            top_opportunities=qualified[:self.top_opportunities],
            market_insights=[
                f"Score médio: {stats['averages']['score']}/100",
                f"{distribution['hot_percent']}% são leads quentes",
                f"{digital['whatsapp_percent']}% possuem WhatsApp",
                f"{digital['website_percent']}% possuem website",
            ],
            next_actions=[
                f"Priorizar contato com os {distribution['hot']} leads quentes",
                "Gerar scripts personalizados de prospecção",
                "Analisar densidade competitiva por região",
            ],
        )

        previous = self.context.last_extraction
        if previous is not None:
            summary.comparison_with_previous = ExtractionComparison(
                previous_total=previous.total_leads,
                growth=summary.total_leads - previous.total_leads,
                quality_improvement=summary.top_score - previous.top_score,
            )

        self.context.current_leads = leads
        self.context.qualified_leads = qualified
        self.context.extraction_history.append(summary)
        self.context.last_extraction = summary
        self.context.active_filters = None

        logger.info(
            f"Ingested extraction {summary.extraction_id}: {summary.total_leads} leads "
            f"({summary.breakdown.hot} hot, {summary.breakdown.warm} warm, {summary.breakdown.cold} cold)"
        )
        return summary

    def reset(self):
        """Drop every batch, analysis and summary of the session."""
        self.context = SessionContext()
        logger.info("Session context reset")

    def classify_request(self, message: str) -> AnalysisType:
        return self.request_classifier.classify(message)

    def analyze_region(self, region: str) -> MarketAnalysis:
        """Analyze a region of the current batch and keep the result."""
        analysis = self.market_analyzer.analyze_market_by_region(self.context.current_leads, region)
        self.context.market_analyses.append(analysis)
        return analysis

    def find_lead(self, lead_id: str) -> Optional[QualifiedLead]:
        for qualified in self.context.qualified_leads:
            if qualified.id == lead_id:
                return qualified
        return None

    def filter_leads(self, message: str) -> List[QualifiedLead]:
        """Extract filters from ``message``, store them and return the matches."""
        filters = self.filter_extractor.extract(message, self.context.current_leads)
        self.context.active_filters = filters
        return apply_filters(self.context.qualified_leads, filters)

    # ── Local stages ───────────────────────────────────

    def _run_local_stage(self, analysis_type: AnalysisType, message: str) -> AssistantResponse:
        response = AssistantResponse(message="", analysis_type=analysis_type)
        qualified = self.context.qualified_leads

        if analysis_type == AnalysisType.QUALIFICATION:
            stats = qualification_stats(qualified)
            response.data = {"leads": qualified[:self.QUALIFICATION_LIMIT]}
            response.insights = [
                f"{stats['distribution']['hot']} leads quentes identificados",
                f"Score médio: {stats['averages']['score']}/100",
                f"{stats['digital_presence']['whatsapp_percent']}% possuem WhatsApp",
            ]

        elif analysis_type == AnalysisType.COPYWRITING:
            scripts = self.script_generator.generate_top_leads_scripts(
                qualified, self.SCRIPT_LEADS, Channel.CHAT
            )
            response.data = {"scripts": scripts}
            response.recommendations = [
                "Iniciar prospecção pelos leads de maior score",
                "Personalizar abordagem baseada nos pain points",
            ]

        elif analysis_type == AnalysisType.FILTERING:
            matches = self.filter_leads(message)
            filters = self.context.active_filters
            response.data = {"leads": matches, "filters": filters}
            if filters.is_empty():
                response.insights = ["Nenhum critério de filtro reconhecido — exibindo todos os leads"]
            else:
                response.insights = [
                    f"{len(matches)} de {len(qualified)} leads atendem aos critérios",
                    "Critérios: " + "; ".join(filters.describe()),
                ]

        elif analysis_type == AnalysisType.MARKET_STRATEGY:
            regions = self.market_analyzer.find_best_opportunity_regions(
                self.context.current_leads, self.OPPORTUNITY_REGIONS
            )
            response.data = {"regions": regions}
            response.insights = [
                f"{r.region}: {r.score}/100 - {r.reasoning}" for r in regions
            ]

        elif analysis_type == AnalysisType.SUMMARY:
            response.data = {"summary": self.context.last_extraction}

        elif analysis_type == AnalysisType.COMPARISON:
            summary = self.context.last_extraction
            response.data = {"summary": summary}
            comparison = summary.comparison_with_previous if summary else None
            if comparison is None:
                response.insights = ["Nenhuma extração anterior para comparar"]
            else:
                response.insights = [
                    f"Extração anterior: {comparison.previous_total} leads",
                    f"Crescimento: {comparison.growth:+d} leads",
                    f"Variação do melhor score: {comparison.quality_improvement:+d} pontos",
                ]

        return response

    # ── Respond ────────────────────────────────────────

    def build_system_prompt(self) -> str:
        stats = qualification_stats(self.context.qualified_leads)
        data_context = PromptTemplates.build_data_context(
            total_leads=len(self.context.current_leads),
            stats=stats,
            top_leads=self.context.qualified_leads[:self.CONTEXT_PREVIEW],
        )
        return PromptTemplates.get_system_prompt(data_context)

    def respond(
        self,
        message: str,
        history: Optional[List[Dict[str, str]]] = None,
    ) -> AssistantResponse:
        """
        Answer an analyst request.

        Args:
            message: Analyst request
            history: Previous {"role", "content"} turns, oldest first

        Returns:
            AssistantResponse; collaborator failures are reported in ``error``
        """
        if not self.context.current_leads:
            return AssistantResponse(message=PromptTemplates.STANDBY_MESSAGE)

        if self.provider is None:
            logger.error("Completion request rejected: no LLM credential configured")
            return AssistantResponse(message="", error=PromptTemplates.MISSING_CREDENTIAL)

        analysis_type = self.classify_request(message)
        local = self._run_local_stage(analysis_type, message)

        logger.info(
            f"Processing {analysis_type.value} request over "
            f"{len(self.context.current_leads)} active leads"
        )

        messages = list(history or [])
        messages.append({"role": "user", "content": message})

        start = time.time()
        try:
            reply = self.provider.generate_with_history(messages, system=self.build_system_prompt())
        except Exception as e:
            logger.error(f"Assistant completion failed: {e}")
            return AssistantResponse(
                message="",
                error=str(e) or "Erro desconhecido",
                analysis_type=analysis_type,
                completion_seconds=time.time() - start,
            )

        return AssistantResponse(
            message=reply,
            data=_serialize(local.data),
            insights=local.insights,
            recommendations=local.recommendations,
            analysis_type=analysis_type,
            completion_seconds=time.time() - start,
        )
