"""
Lead API Routes for LeadMaps.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from ingest_leads.lead_loader import LeadRecord
from lead_scoring.models import Channel, Temperature
from lead_scoring.scoring_model import filter_by_min_score, filter_by_temperature, qualification_stats
from llm.orchestrator import LeadMapsAssistant

from ..middleware.metrics import record_ingestion
from ..services import get_assistant

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request Models ────────────────────────────────────────────────

class IngestRequest(BaseModel):
    """Batch of extracted leads; replaces the current batch."""
    leads: List[LeadRecord] = Field(default_factory=list)


class ScriptRequest(BaseModel):
    channel: str = "chat"
    top_n: int = Field(default=10, ge=1, le=100)
    lead_ids: Optional[List[str]] = None

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, value: str) -> str:
        return Channel(value).value


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/leads/ingest")
async def ingest_leads(
    request: IngestRequest,
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """Qualify a new batch and return its extraction summary."""
    summary = assistant.ingest([record.to_raw_lead() for record in request.leads])
    record_ingestion(q.score for q in assistant.context.qualified_leads)
    return summary.to_dict()


@router.get("/leads/qualified")
async def list_qualified_leads(
    temperature: Optional[Temperature] = None,
    min_score: Optional[int] = Query(default=None, ge=0, le=100),
    limit: int = Query(default=50, ge=1, le=500),
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """Ranked qualified leads of the current batch."""
    leads = assistant.context.qualified_leads

    if temperature is not None:
        leads = filter_by_temperature(leads, [temperature])
    if min_score is not None:
        leads = filter_by_min_score(leads, min_score)

    return {
        "total": len(leads),
        "leads": [q.to_dict() for q in leads[:limit]],
    }


@router.get("/leads/stats")
async def get_lead_stats(assistant: LeadMapsAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    return qualification_stats(assistant.context.qualified_leads)


@router.get("/leads/{lead_id}/approach")
async def get_recommended_approach(
    lead_id: str,
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """Preferred first-contact channel for one lead."""
    qualified = assistant.find_lead(lead_id)
    if qualified is None:
        raise HTTPException(status_code=404, detail="Lead not found")

    return {
        "lead_id": qualified.id,
        "lead_name": qualified.name,
        "approach": assistant.script_generator.recommended_approach(qualified).to_dict(),
    }


@router.post("/leads/scripts")
async def generate_scripts(
    request: ScriptRequest,
    assistant: LeadMapsAssistant = Depends(get_assistant),
) -> Dict[str, Any]:
    """
    Generate prospecting scripts.

    With ``lead_ids`` the listed leads are scripted in the given order,
    otherwise the ``top_n`` best-ranked leads.
    """
    channel = Channel(request.channel)
    generator = assistant.script_generator

    if request.lead_ids:
        selected = []
        for lead_id in request.lead_ids:
            qualified = assistant.find_lead(lead_id)
            if qualified is None:
                raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
            selected.append(qualified)
        scripts = generator.generate_bulk_scripts(selected, channel)
    else:
        scripts = generator.generate_top_leads_scripts(
            assistant.context.qualified_leads, request.top_n, channel
        )

    logger.info(f"Generated {len(scripts)} {channel.value} scripts")
    return {
        "channel": channel.value,
        "total": len(scripts),
        "scripts": [s.to_dict() for s in scripts],
    }
