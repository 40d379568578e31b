"""
Market Strategy API Routes for LeadMaps.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from llm.orchestrator import LeadMapsAssistant

from ..services import get_assistant

logger = logging.getLogger(__name__)

router = APIRouter()


class CompareRequest(BaseModel):
    regions: List[str] = Field(..., min_length=1, max_length=20)


@router.get("/market/regions/{region}")
async def analyze_region(
    region: str,
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """Market analysis of a city or neighborhood; kept in the session context."""
    return assistant.analyze_region(region).to_dict()


@router.post("/market/compare")
async def compare_regions(
    request: CompareRequest,
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    analyses = assistant.market_analyzer.compare_regions(
        assistant.context.current_leads, request.regions
    )
    return {"regions": [a.to_dict() for a in analyses]}


@router.get("/market/opportunities")
async def best_opportunity_regions(
    top_n: int = Query(default=5, ge=1, le=50),
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """Cities ranked by opportunity score."""
    regions = assistant.market_analyzer.find_best_opportunity_regions(
        assistant.context.current_leads, top_n
    )
    return {"regions": [r.to_dict() for r in regions]}


@router.get("/market/categories")
async def category_saturation(assistant: LeadMapsAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    categories = assistant.market_analyzer.analyze_category_saturation(
        assistant.context.current_leads
    )
    return {"categories": [c.to_dict() for c in categories]}


@router.get("/market/expansion")
async def expansion_insights(assistant: LeadMapsAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    return assistant.market_analyzer.generate_expansion_insights(
        assistant.context.current_leads
    ).to_dict()
