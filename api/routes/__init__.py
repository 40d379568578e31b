"""
API Routes for LeadMaps.
"""

from . import chat, context, leads, market

__all__ = ["chat", "context", "leads", "market"]
