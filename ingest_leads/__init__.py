"""
LeadMaps Data Ingestion Module.

This module handles ingestion of maps-extracted leads:
- CSV and JSON exports (Portuguese or English columns)
- Extraction API responses
- Offline qualification reports (CLI)
"""

from .lead_loader import LeadLoader, LeadRecord

__all__ = ["LeadLoader", "LeadRecord"]
