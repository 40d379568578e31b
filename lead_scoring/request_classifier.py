"""
Request Classification for LeadMaps.

Maps a free-text analyst request to the analysis it asks for.
"""

import logging
from typing import Dict, List

from .models import AnalysisType

logger = logging.getLogger(__name__)


class RequestClassifier:
    """
    Rule-based request classifier.

    Keyword sets are checked in insertion order and the first set with a
    substring hit wins, so a request mentioning both "score" and "script"
    is a qualification request.
    """

    ANALYSIS_KEYWORDS: Dict[AnalysisType, List[str]] = {
        AnalysisType.QUALIFICATION: ["qualif", "score", "quente"],
        # "whatsapp" alone is a filter criterion, not a script request
        AnalysisType.COPYWRITING: ["script", "mensagem", "prospecção", "copy"],
        AnalysisType.FILTERING: ["filtrar", "separe", "apenas", "liste"],
        AnalysisType.MARKET_STRATEGY: [
            "mercado", "região", "bairro", "saturação", "oportunidade",
        ],
        AnalysisType.SUMMARY: ["resumo", "visão geral", "overview"],
        AnalysisType.COMPARISON: ["comparar", "anterior", "evolução"],
    }

    def classify(self, message: str) -> AnalysisType:
        message_lower = (message or "").lower()

        for analysis_type, keywords in self.ANALYSIS_KEYWORDS.items():
            if any(keyword in message_lower for keyword in keywords):
                logger.debug(f"Request classified as {analysis_type.value}")
                return analysis_type

        return AnalysisType.GENERAL
