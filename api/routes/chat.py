"""
Chat API Routes for LeadMaps.
"""

import asyncio
import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from llm.orchestrator import LeadMapsAssistant

from ..middleware.metrics import record_analysis, record_llm_failure, record_llm_latency
from ..services import get_assistant

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    history: List[HistoryMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    message: str
    data: Optional[Dict[str, Any]] = None
    insights: List[str] = []
    recommendations: List[str] = []
    error: Optional[str] = None
    analysis_type: Optional[str] = None


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    assistant: LeadMapsAssistant = Depends(get_assistant),
):
    """
    Answer an analyst request over the current lead batch.

    Completion failures come back in ``error`` with HTTP 200.
    """
    history = [m.model_dump() for m in request.history]

    # The provider call is blocking
    result = await asyncio.to_thread(assistant.respond, request.message, history)

    if result.analysis_type is not None:
        record_analysis(result.analysis_type.value)
    if result.completion_seconds is not None:
        record_llm_latency(result.completion_seconds)
    if result.error:
        record_llm_failure()

    return ChatResponse(**result.to_dict())
