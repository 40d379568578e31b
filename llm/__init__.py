"""
LLM Orchestration Module for LeadMaps.

This module handles:
- Session context and request routing (LeadMapsAssistant)
- Prompt template management
- OpenAI-compatible completion provider
"""

from .orchestrator import AssistantResponse, LeadMapsAssistant, SessionContext
from .prompt_templates import PromptTemplates

__all__ = [
    "AssistantResponse",
    "LeadMapsAssistant",
    "SessionContext",
    "PromptTemplates",
]
