"""
Filter Extraction for LeadMaps.

Turns natural-language commands such as "Separe apenas pizzarias com
WhatsApp" into LeadFilters. Categories and cities are only recognised
when they occur in the lead batch being filtered.
"""

import logging
import re
from typing import List, Optional, Sequence

from .models import LeadFilters, RawLead, Temperature

logger = logging.getLogger(__name__)


class FilterExtractor:
    """Pattern-based extraction of lead filter criteria."""

    TEMPERATURE_WORDS = {
        Temperature.HOT: ["quente", "quentes"],
        Temperature.WARM: ["morno", "mornos"],
        Temperature.COLD: ["frio", "frios"],
    }

    def __init__(self):
        self._build_patterns()

    def _build_patterns(self):
        """Build regex patterns for filter extraction."""
        self.without_whatsapp_pattern = re.compile(r'\bsem\s+(?:o\s+)?whats(?:app)?\b')
        self.whatsapp_pattern = re.compile(r'\bwhats(?:app)?\b')

        self.without_website_pattern = re.compile(r'\bsem\s+(?:um\s+)?(?:web)?site\b')
        self.with_website_pattern = re.compile(r'\bcom\s+(?:um\s+)?(?:web)?site\b')

        # "score acima de 70", "score mínimo 60", "score >= 50"
        self.min_score_pattern = re.compile(
            r'score\s*(?:acima\s+de|maior\s+que|m[ií]nimo(?:\s+de)?|>=?)\s*(\d{1,3})'
        )

        # "rating acima de 4.5", "nota maior que 4,0"
        self.min_rating_pattern = re.compile(
            r'(?:rating|nota|avalia[cç][aã]o)\s*'
            r'(?:acima\s+de|maior\s+que|m[ií]nim[ao](?:\s+de)?|>=?)\s*(\d(?:[.,]\d+)?)'
        )

    def extract(self, message: str, leads: Sequence[RawLead] = ()) -> LeadFilters:
        """
        Extract filter criteria from a message.

        Args:
            message: Analyst request
            leads: Current lead batch, used to recognise categories and cities

        Returns:
            LeadFilters with every criterion found; empty when none matched
        """
        message_lower = (message or "").lower()

        filters = LeadFilters(
            temperatures=self._extract_temperatures(message_lower),
            min_score=self._extract_min_score(message_lower),
            categories=self._extract_categories(message_lower, leads),
            cities=self._extract_cities(message_lower, leads),
            has_whatsapp=self._extract_whatsapp(message_lower),
            has_website=self._extract_website(message_lower),
            min_rating=self._extract_min_rating(message_lower),
        )

        if not filters.is_empty():
            logger.debug(f"Extracted filters: {filters.describe()}")
        return filters

    def _extract_temperatures(self, message_lower: str) -> List[Temperature]:
        words = set(re.findall(r'\w+', message_lower))
        return [
            temperature
            for temperature, keywords in self.TEMPERATURE_WORDS.items()
            if words.intersection(keywords)
        ]

    def _extract_categories(self, message_lower: str, leads: Sequence[RawLead]) -> List[str]:
        """Categories of the batch mentioned in singular or plural form."""
        found = []
        for category in dict.fromkeys(lead.category for lead in leads if lead.category):
            normalized = category.lower()
            if re.search(rf'\b{re.escape(normalized)}(?:s|es)?\b', message_lower):
                found.append(category)
        return found

    def _extract_cities(self, message_lower: str, leads: Sequence[RawLead]) -> List[str]:
        """Cities or neighborhoods of the batch mentioned in the message."""
        places = []
        for lead in leads:
            places.append(lead.city)
            if lead.neighborhood:
                places.append(lead.neighborhood)

        found = []
        for place in dict.fromkeys(p for p in places if p):
            if re.search(rf'\b{re.escape(place.lower())}\b', message_lower):
                found.append(place)
        return found

    def _extract_whatsapp(self, message_lower: str) -> Optional[bool]:
        if self.without_whatsapp_pattern.search(message_lower):
            return False
        if self.whatsapp_pattern.search(message_lower):
            return True
        return None

    def _extract_website(self, message_lower: str) -> Optional[bool]:
        if self.without_website_pattern.search(message_lower):
            return False
        if self.with_website_pattern.search(message_lower):
            return True
        return None

    def _extract_min_score(self, message_lower: str) -> Optional[int]:
        match = self.min_score_pattern.search(message_lower)
        if not match:
            return None
        return min(100, int(match.group(1)))

    def _extract_min_rating(self, message_lower: str) -> Optional[float]:
        match = self.min_rating_pattern.search(message_lower)
        if not match:
            return None
        return float(match.group(1).replace(",", "."))
