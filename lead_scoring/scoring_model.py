"""
Lead Scoring Model for LeadMaps.

Deterministic rule-based scoring of maps-extracted businesses into a
0-100 score, a temperature bucket and a conversion probability.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import (
    LeadFilters,
    QualifiedLead,
    QualityFactors,
    RawLead,
    Temperature,
    round_half_up,
)

logger = logging.getLogger(__name__)


class LeadScorer:
    """
    Scores raw leads from five bounded sub-scores.

    Sub-scores (0-100 total):
    - Rating: 0-25
    - Review volume: 0-20
    - Digital presence: 0-30 (website 12, WhatsApp 10, Instagram 8)
    - Category value: 8 or 15
    - Location: 5 or 10 (neighborhood known)

    Thresholds:
    - Score >= 70: Hot
    - Score >= 45: Warm
    - Score < 45: Cold
    """

    # (minimum, points), checked top-down
    RATING_TIERS = ((4.5, 25), (4.0, 20), (3.5, 15), (3.0, 10))
    RATING_FLOOR = 5

    REVIEW_TIERS = ((500, 20), (200, 18), (100, 15), (50, 12), (20, 8))
    REVIEW_FLOOR = 5

    DIGITAL_PRESENCE_POINTS = {
        "website": 12,
        "whatsapp": 10,
        "instagram": 8,
    }

    HIGH_VALUE_CATEGORIES = [
        "restaurante",
        "pizzaria",
        "hamburgueria",
        "lanchonete",
        "cafeteria",
        "padaria",
        "hotel",
        "pousada",
        "academia",
        "clínica",
        "consultório",
        "escritório",
        "loja",
        "salão",
        "barbearia",
        "pet shop",
        "autoescola",
        "escola",
        "curso",
    ]
    HIGH_VALUE_CATEGORY_SCORE = 15
    DEFAULT_CATEGORY_SCORE = 8

    LOCATION_WITH_NEIGHBORHOOD = 10
    LOCATION_DEFAULT = 5

    # Conversion probability adjustments
    REPUTATION_BONUS = 10
    NO_DIGITAL_PENALTY = 15
    WHATSAPP_BONUS = 5

    HIGH_RATING = 4.5
    GOOD_REVIEW_VOLUME = 50

    def __init__(self, hot_threshold: int = 70, warm_threshold: int = 45):
        self.hot_threshold = hot_threshold
        self.warm_threshold = warm_threshold

    # ── Sub-scores ─────────────────────────────────────

    def rating_score(self, rating: Optional[float]) -> int:
        """Tiered rating score (0-25); a zero rating counts as missing."""
        if not rating:
            return 0
        for minimum, points in self.RATING_TIERS:
            if rating >= minimum:
                return points
        return self.RATING_FLOOR

    def reviews_score(self, reviews: Optional[int]) -> int:
        """Tiered review-volume score (0-20)."""
        if not reviews:
            return 0
        for minimum, points in self.REVIEW_TIERS:
            if reviews >= minimum:
                return points
        return self.REVIEW_FLOOR

    def digital_presence_score(self, lead: RawLead) -> int:
        """Additive digital presence score (0-30)."""
        score = 0
        if lead.has_website:
            score += self.DIGITAL_PRESENCE_POINTS["website"]
        if lead.has_whatsapp:
            score += self.DIGITAL_PRESENCE_POINTS["whatsapp"]
        if lead.has_instagram:
            score += self.DIGITAL_PRESENCE_POINTS["instagram"]
        return score

    def category_score(self, category: str) -> int:
        """15 for high-value categories, 8 otherwise."""
        normalized = (category or "").lower()
        if any(cat in normalized for cat in self.HIGH_VALUE_CATEGORIES):
            return self.HIGH_VALUE_CATEGORY_SCORE
        return self.DEFAULT_CATEGORY_SCORE

    def location_score(self, lead: RawLead) -> int:
        """10 when the neighborhood is known, 5 otherwise."""
        if lead.neighborhood:
            return self.LOCATION_WITH_NEIGHBORHOOD
        return self.LOCATION_DEFAULT

    def score_breakdown(self, lead: RawLead) -> Dict[str, int]:
        """All five sub-scores keyed by name."""
        return {
            "rating": self.rating_score(lead.rating),
            "reviews": self.reviews_score(lead.reviews),
            "digital_presence": self.digital_presence_score(lead),
            "category": self.category_score(lead.category),
            "location": self.location_score(lead),
        }

    def score(self, lead: RawLead) -> int:
        """Total score (0-100)."""
        return round_half_up(sum(self.score_breakdown(lead).values()))

    # ── Classification ─────────────────────────────────

    def determine_temperature(self, score: int) -> Temperature:
        if score >= self.hot_threshold:
            return Temperature.HOT
        if score >= self.warm_threshold:
            return Temperature.WARM
        return Temperature.COLD

    def conversion_probability(self, lead: RawLead, score: int) -> int:
        """
        Estimate conversion probability (0-100) from the score.

        High rating with many reviews earns a bonus, no digital channel at
        all is penalised and a WhatsApp contact earns a small bonus.
        """
        probability = score

        if (
            lead.rating is not None and lead.rating >= self.HIGH_RATING
            and lead.reviews is not None and lead.reviews >= 100
        ):
            probability += self.REPUTATION_BONUS

        if not lead.has_digital_presence:
            probability -= self.NO_DIGITAL_PENALTY

        if lead.has_whatsapp:
            probability += self.WHATSAPP_BONUS

        return round_half_up(min(100, max(0, probability)))

    def quality_factors(self, lead: RawLead) -> QualityFactors:
        return QualityFactors(
            has_digital_presence=lead.has_digital_presence,
            has_high_rating=(lead.rating or 0) >= self.HIGH_RATING,
            has_good_review_volume=(lead.reviews or 0) >= self.GOOD_REVIEW_VOLUME,
            has_whatsapp=lead.has_whatsapp,
            has_website=lead.has_website,
            has_instagram=lead.has_instagram,
        )

    # ── Qualification ──────────────────────────────────

    def qualify(self, lead: RawLead) -> QualifiedLead:
        """Score and classify a single lead."""
        breakdown = self.score_breakdown(lead)
        total = round_half_up(sum(breakdown.values()))

        return QualifiedLead(
            lead=lead,
            score=total,
            temperature=self.determine_temperature(total),
            quality_factors=self.quality_factors(lead),
            conversion_probability=self.conversion_probability(lead, total),
            breakdown=breakdown,
        )

    def qualify_batch(self, leads: Iterable[RawLead]) -> List[QualifiedLead]:
        """
        Qualify a batch and rank it by score.

        sorted() is stable, so equal scores keep their input order.
        """
        qualified = [self.qualify(lead) for lead in leads]
        qualified = sorted(qualified, key=lambda q: q.score, reverse=True)

        for index, lead in enumerate(qualified):
            lead.priority_rank = index + 1

        logger.debug(f"Qualified {len(qualified)} leads")
        return qualified

    def adjust_thresholds(self, hot: int = 70, warm: int = 45):
        """
        Adjust temperature thresholds.

        Args:
            hot: Threshold for hot leads (default 70)
            warm: Threshold for warm leads (default 45)
        """
        self.hot_threshold = hot
        self.warm_threshold = warm


def filter_by_temperature(
    leads: Sequence[QualifiedLead],
    temperatures: Iterable[Temperature],
) -> List[QualifiedLead]:
    wanted = set(temperatures)
    return [lead for lead in leads if lead.temperature in wanted]


def filter_by_min_score(leads: Sequence[QualifiedLead], min_score: int) -> List[QualifiedLead]:
    return [lead for lead in leads if lead.score >= min_score]


def apply_filters(leads: Sequence[QualifiedLead], filters: LeadFilters) -> List[QualifiedLead]:
    """Apply every populated criterion of ``filters``; order is preserved."""
    result = list(leads)

    if filters.temperatures:
        result = filter_by_temperature(result, filters.temperatures)

    if filters.min_score is not None:
        result = filter_by_min_score(result, filters.min_score)

    if filters.categories:
        wanted = [c.lower() for c in filters.categories]
        result = [q for q in result if q.lead.category.lower() in wanted]

    if filters.cities:
        wanted = [c.lower() for c in filters.cities]
        result = [
            q for q in result
            if q.lead.city.lower() in wanted
            or (q.lead.neighborhood or "").lower() in wanted
        ]

    if filters.has_whatsapp is not None:
        result = [q for q in result if q.lead.has_whatsapp == filters.has_whatsapp]

    if filters.has_website is not None:
        result = [q for q in result if q.lead.has_website == filters.has_website]

    if filters.min_rating is not None:
        result = [
            q for q in result
            if q.lead.rating is not None and q.lead.rating >= filters.min_rating
        ]

    return result


def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(part / total * 100)


def qualification_stats(leads: Sequence[QualifiedLead]) -> Dict[str, Any]:
    """Distribution, averages and digital presence of a qualified batch."""
    total = len(leads)
    hot = sum(1 for q in leads if q.temperature == Temperature.HOT)
    warm = sum(1 for q in leads if q.temperature == Temperature.WARM)
    cold = sum(1 for q in leads if q.temperature == Temperature.COLD)

    with_whatsapp = sum(1 for q in leads if q.quality_factors.has_whatsapp)
    with_website = sum(1 for q in leads if q.quality_factors.has_website)
    with_instagram = sum(1 for q in leads if q.quality_factors.has_instagram)

    if total:
        avg_score = sum(q.score for q in leads) / total
        avg_conversion = sum(q.conversion_probability for q in leads) / total
    else:
        avg_score = avg_conversion = 0

    return {
        "total": total,
        "distribution": {
            "hot": hot,
            "warm": warm,
            "cold": cold,
            "hot_percent": _percent(hot, total),
            "warm_percent": _percent(warm, total),
            "cold_percent": _percent(cold, total),
        },
        "averages": {
            "score": round_half_up(avg_score),
            "conversion_probability": round_half_up(avg_conversion),
        },
        "digital_presence": {
            "whatsapp": with_whatsapp,
            "website": with_website,
            "instagram": with_instagram,
            "whatsapp_percent": _percent(with_whatsapp, total),
            "website_percent": _percent(with_website, total),
            "instagram_percent": _percent(with_instagram, total),
        },
    }
