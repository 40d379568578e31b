"""
Lead Scoring Module for LeadMaps.

This module provides the deterministic half of the pipeline:
- Lead scoring (0-100 scale) and temperature classification
- Batch qualification, filtering and statistics
- Market strategy analysis by region and category
- Prospecting script generation (chat, call, email)
- Request classification and natural-language filter extraction
"""

from .models import (
    AnalysisType,
    Channel,
    CompetitionDensity,
    ExtractionSummary,
    LeadFilters,
    MarketAnalysis,
    ProspectingScript,
    QualifiedLead,
    RawLead,
    Temperature,
)
from .scoring_model import LeadScorer, apply_filters, qualification_stats
from .market_strategy import MarketStrategyAnalyzer
from .copywriting import ScriptGenerator
from .request_classifier import RequestClassifier
from .filter_extractor import FilterExtractor

__all__ = [
    "AnalysisType",
    "Channel",
    "CompetitionDensity",
    "ExtractionSummary",
    "LeadFilters",
    "MarketAnalysis",
    "ProspectingScript",
    "QualifiedLead",
    "RawLead",
    "Temperature",
    "LeadScorer",
    "apply_filters",
    "qualification_stats",
    "MarketStrategyAnalyzer",
    "ScriptGenerator",
    "RequestClassifier",
    "FilterExtractor",
]
