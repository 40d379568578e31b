"""
Session Context API Routes for LeadMaps.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from llm.orchestrator import LeadMapsAssistant

from ..services import get_assistant

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/context")
async def get_context(assistant: LeadMapsAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    return assistant.context.to_dict()


@router.delete("/context")
async def reset_context(assistant: LeadMapsAssistant = Depends(get_assistant)) -> Dict[str, Any]:
    """Drop the current batch, history and analyses."""
    assistant.reset()
    return {"message": "Context cleared"}
