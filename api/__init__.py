"""
API Module for LeadMaps.

FastAPI application with routes for:
- Lead ingestion, qualification and scripts
- Market strategy analysis
- Assistant chat and session context
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
