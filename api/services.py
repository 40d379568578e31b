"""
Service initialization and dependency injection for the LeadMaps API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Optional

from fastapi import HTTPException

from config.settings import get_settings, Settings
from ingest_leads.lead_loader import LeadLoader
from lead_scoring.copywriting import ScriptGenerator
from lead_scoring.filter_extractor import FilterExtractor
from lead_scoring.market_strategy import MarketStrategyAnalyzer
from lead_scoring.request_classifier import RequestClassifier
from lead_scoring.scoring_model import LeadScorer
from llm.orchestrator import LeadMapsAssistant
from llm.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.lead_loader: Optional[LeadLoader] = None
        self.lead_scorer: Optional[LeadScorer] = None
        self.market_analyzer: Optional[MarketStrategyAnalyzer] = None
        self.script_generator: Optional[ScriptGenerator] = None
        self.llm_provider: Optional[OpenAIProvider] = None
        self.assistant: Optional[LeadMapsAssistant] = None
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services with model: {self.settings.llm_model}")

        self._init_lead_scoring()
        self._init_llm()
        self._init_assistant()
        self._initialized = True
        logger.info("All services initialized successfully")

    def _init_lead_scoring(self):
        """Initialize lead scoring components."""
        self.lead_loader = LeadLoader()
        self.lead_scorer = LeadScorer()
        self.lead_scorer.adjust_thresholds(
            hot=self.settings.lead_score_threshold_hot,
            warm=self.settings.lead_score_threshold_warm,
        )
        self.market_analyzer = MarketStrategyAnalyzer()
        self.script_generator = ScriptGenerator()
        logger.info("Lead scoring services ready")

    def _init_llm(self):
        """Initialize the completion provider when a credential is configured."""
        s = self.settings

        if not s.llm_configured:
            logger.warning("LLM_API_KEY not set, assistant completions disabled")
            return

        self.llm_provider = OpenAIProvider(
            api_key=s.llm_api_key,
            base_url=s.llm_base_url,
            model_id=s.llm_model,
            max_tokens=s.max_tokens,
            temperature=s.temperature,
            top_p=s.top_p,
        )

    def _init_assistant(self):
        self.assistant = LeadMapsAssistant(
            lead_scorer=self.lead_scorer,
            market_analyzer=self.market_analyzer,
            script_generator=self.script_generator,
            request_classifier=RequestClassifier(),
            filter_extractor=FilterExtractor(),
            provider=self.llm_provider,
            top_opportunities=self.settings.top_opportunities,
        )
        logger.info("LeadMaps assistant ready")

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.assistant is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "lead_scoring": self.lead_scorer is not None,
            "llm": self.llm_provider is not None,
            "assistant": self.assistant is not None,
            "active_leads": len(self.assistant.context.current_leads) if self.assistant else 0,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def get_assistant() -> LeadMapsAssistant:
    """Route dependency: the session assistant, or 503 before startup."""
    if not _services.is_ready:
        raise HTTPException(status_code=503, detail="Services not initialized")
    return _services.assistant


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()
