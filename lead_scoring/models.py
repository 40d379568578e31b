"""
Domain models for the LeadMaps qualification pipeline.

Raw leads come from a maps extraction; everything else is derived from them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, List, Optional


def round_half_up(value: float, ndigits: int = 0):
    """Round with .5 going up (1.25 -> 1.3, 12.5 -> 13)."""
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


class Temperature(Enum):
    """Lead temperature buckets."""
    HOT = "hot"      # score >= 70
    WARM = "warm"    # score >= 45
    COLD = "cold"

    @property
    def label(self) -> str:
        return {"hot": "quente", "warm": "morno", "cold": "frio"}[self.value]


class Channel(Enum):
    """Outreach channels for prospecting scripts."""
    CHAT = "chat"    # WhatsApp-style message
    CALL = "call"
    EMAIL = "email"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.lower()
            if lowered == "whatsapp":
                return cls.CHAT
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class CompetitionDensity(Enum):
    """Competitive density of a region."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    SATURATED = "saturated"


class SaturationLevel(Enum):
    """Saturation tier of a business category."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisType(Enum):
    """Kinds of requests the assistant can route."""
    QUALIFICATION = "qualification"
    COPYWRITING = "copywriting"
    FILTERING = "filtering"
    MARKET_STRATEGY = "market_strategy"
    SUMMARY = "summary"
    COMPARISON = "comparison"
    GENERAL = "general"


@dataclass(frozen=True)
class RawLead:
    """A business record extracted from a maps search."""
    id: str
    name: str
    category: str
    address: str
    city: str
    state: str
    keyword: str = ""
    extracted_at: str = ""
    neighborhood: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_website(self) -> bool:
        return bool(self.website)

    @property
    def has_whatsapp(self) -> bool:
        return bool(self.whatsapp)

    @property
    def has_instagram(self) -> bool:
        return bool(self.instagram)

    @property
    def has_digital_presence(self) -> bool:
        return self.has_website or self.has_whatsapp or self.has_instagram

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "address": self.address,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
            "phone": self.phone,
            "whatsapp": self.whatsapp,
            "instagram": self.instagram,
            "website": self.website,
            "rating": self.rating,
            "reviews": self.reviews,
            "keyword": self.keyword,
            "extracted_at": self.extracted_at,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass
class QualityFactors:
    """Boolean quality signals for a lead."""
    has_digital_presence: bool
    has_high_rating: bool
    has_good_review_volume: bool
    has_whatsapp: bool
    has_website: bool
    has_instagram: bool

    def to_dict(self) -> Dict[str, bool]:
        return {
            "has_digital_presence": self.has_digital_presence,
            "has_high_rating": self.has_high_rating,
            "has_good_review_volume": self.has_good_review_volume,
            "has_whatsapp": self.has_whatsapp,
            "has_website": self.has_website,
            "has_instagram": self.has_instagram,
        }


@dataclass
class QualifiedLead:
    """A raw lead with its score, temperature and ranking."""
    lead: RawLead
    score: int
    temperature: Temperature
    quality_factors: QualityFactors
    conversion_probability: int
    breakdown: Dict[str, int] = field(default_factory=dict)
    priority_rank: Optional[int] = None

    @property
    def id(self) -> str:
        return self.lead.id

    @property
    def name(self) -> str:
        return self.lead.name

    def to_dict(self) -> Dict[str, Any]:
        data = self.lead.to_dict()
        data.update({
            "score": self.score,
            "temperature": self.temperature.value,
            "quality_factors": self.quality_factors.to_dict(),
            "conversion_probability": self.conversion_probability,
            "breakdown": dict(self.breakdown),
            "priority_rank": self.priority_rank,
        })
        return data


@dataclass
class ProspectingScript:
    """Outreach script generated for one lead and channel."""
    lead_id: str
    lead_name: str
    channel: Channel
    script: str
    pain_points: List[str] = field(default_factory=list)
    value_proposition: str = ""
    cta: str = ""
    personalization_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lead_id": self.lead_id,
            "lead_name": self.lead_name,
            "channel": self.channel.value,
            "script": self.script,
            "pain_points": self.pain_points,
            "value_proposition": self.value_proposition,
            "cta": self.cta,
            "personalization_factors": self.personalization_factors,
        }


@dataclass
class RecommendedApproach:
    """Preferred first-contact channel for a lead."""
    primary_channel: Channel
    reasoning: str
    alternative_channels: List[Channel] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_channel": self.primary_channel.value,
            "reasoning": self.reasoning,
            "alternative_channels": [c.value for c in self.alternative_channels],
        }


@dataclass
class CategoryShare:
    """Count and share of one category inside a lead collection."""
    category: str
    count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "count": self.count, "percentage": self.percentage}


@dataclass
class MarketAnalysis:
    """Market picture for a city or neighborhood."""
    region: str
    total_leads: int
    competition_density: CompetitionDensity
    average_rating: float
    average_reviews: int
    top_categories: List[CategoryShare] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "total_leads": self.total_leads,
            "competition_density": self.competition_density.value,
            "average_rating": self.average_rating,
            "average_reviews": self.average_reviews,
            "top_categories": [c.to_dict() for c in self.top_categories],
            "opportunities": self.opportunities,
            "warnings": self.warnings,
            "recommendations": self.recommendations,
        }


@dataclass
class RegionOpportunity:
    """Heuristic opportunity score for a city."""
    region: str
    score: int
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {"region": self.region, "score": self.score, "reasoning": self.reasoning}


@dataclass
class CategorySaturation:
    """Saturation tier for a category."""
    category: str
    count: int
    saturation: SaturationLevel
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "count": self.count,
            "saturation": self.saturation.value,
            "recommendation": self.recommendation,
        }


@dataclass
class ExpansionInsights:
    """Where the current batch reaches and where to go next."""
    current_coverage: List[str]
    suggested_expansion: List[str]
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_coverage": self.current_coverage,
            "suggested_expansion": self.suggested_expansion,
            "reasoning": self.reasoning,
        }


@dataclass
class TemperatureBreakdown:
    hot: int = 0
    warm: int = 0
    cold: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"hot": self.hot, "warm": self.warm, "cold": self.cold}


@dataclass
class ExtractionComparison:
    """Deltas against the previous extraction."""
    previous_total: int
    growth: int
    quality_improvement: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "previous_total": self.previous_total,
            "growth": self.growth,
            "quality_improvement": self.quality_improvement,
        }


@dataclass
class ExtractionSummary:
    """Executive summary produced for every ingested batch."""
    extraction_id: str
    total_leads: int
    breakdown: TemperatureBreakdown
    top_opportunities: List[QualifiedLead] = field(default_factory=list)
    market_insights: List[str] = field(default_factory=list)
    next_actions: List[str] = field(default_factory=list)
    comparison_with_previous: Optional[ExtractionComparison] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def top_score(self) -> int:
        return self.top_opportunities[0].score if self.top_opportunities else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extraction_id": self.extraction_id,
            "timestamp": self.timestamp.isoformat(),
            "total_leads": self.total_leads,
            "qualified_leads": self.breakdown.to_dict(),
            "top_opportunities": [q.to_dict() for q in self.top_opportunities],
            "market_insights": self.market_insights,
            "next_actions": self.next_actions,
            "comparison_with_previous": (
                self.comparison_with_previous.to_dict()
                if self.comparison_with_previous else None
            ),
        }


@dataclass
class LeadFilters:
    """Filter criteria applied to qualified leads. None means "any"."""
    temperatures: List[Temperature] = field(default_factory=list)
    min_score: Optional[int] = None
    categories: List[str] = field(default_factory=list)
    cities: List[str] = field(default_factory=list)
    has_whatsapp: Optional[bool] = None
    has_website: Optional[bool] = None
    min_rating: Optional[float] = None

    def is_empty(self) -> bool:
        return (
            not self.temperatures
            and self.min_score is None
            and not self.categories
            and not self.cities
            and self.has_whatsapp is None
            and self.has_website is None
            and self.min_rating is None
        )

    def describe(self) -> List[str]:
        """Human-readable list of the active criteria."""
        parts = []
        if self.temperatures:
            parts.append("temperatura: " + ", ".join(t.label for t in self.temperatures))
        if self.min_score is not None:
            parts.append(f"score mínimo: {self.min_score}")
        if self.categories:
            parts.append("categorias: " + ", ".join(self.categories))
        if self.cities:
            parts.append("cidades: " + ", ".join(self.cities))
        if self.has_whatsapp is not None:
            parts.append("com WhatsApp" if self.has_whatsapp else "sem WhatsApp")
        if self.has_website is not None:
            parts.append("com site" if self.has_website else "sem site")
        if self.min_rating is not None:
            parts.append(f"rating mínimo: {self.min_rating:g}")
        return parts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperatures": [t.value for t in self.temperatures],
            "min_score": self.min_score,
            "categories": self.categories,
            "cities": self.cities,
            "has_whatsapp": self.has_whatsapp,
            "has_website": self.has_website,
            "min_rating": self.min_rating,
        }
