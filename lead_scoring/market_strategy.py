"""
Market Strategy Analyzer for LeadMaps.

Aggregates lead collections by region and category into density,
saturation and opportunity summaries.
"""

import logging
from collections import Counter
from typing import List, Sequence, Tuple

from .models import (
    CategorySaturation,
    CategoryShare,
    CompetitionDensity,
    ExpansionInsights,
    MarketAnalysis,
    RawLead,
    RegionOpportunity,
    SaturationLevel,
    round_half_up,
)

logger = logging.getLogger(__name__)


class MarketStrategyAnalyzer:
    """
    Rule-based market analysis over raw leads.

    Regions are matched by exact equality against either the city or the
    neighborhood of each lead.
    """

    # (minimum count, density), checked top-down
    DENSITY_TIERS = (
        (50, CompetitionDensity.SATURATED),
        (30, CompetitionDensity.HIGH),
        (15, CompetitionDensity.MEDIUM),
    )

    DENSITY_OPPORTUNITY_POINTS = {
        CompetitionDensity.MEDIUM: 40,
        CompetitionDensity.LOW: 30,
        CompetitionDensity.HIGH: 20,
        CompetitionDensity.SATURATED: 10,
    }
    DENSITY_REASONING = {
        CompetitionDensity.MEDIUM: "densidade competitiva equilibrada",
        CompetitionDensity.LOW: "baixa concorrência",
        CompetitionDensity.SATURATED: "mercado saturado",
    }

    LOW_RATING = 4.0
    WEBSITE_GAP_PERCENT = 60
    WHATSAPP_GAP_PERCENT = 50
    DOMINANT_CATEGORY_PERCENT = 40
    TOP_CATEGORIES = 10

    CATEGORY_SATURATION_TIERS = (
        (30, SaturationLevel.HIGH, "Evitar entrada direta — buscar nicho específico"),
        (15, SaturationLevel.MEDIUM, "Oportunidade com diferenciação clara"),
    )
    CATEGORY_SATURATION_DEFAULT = (SaturationLevel.LOW, "Excelente oportunidade de entrada")

    # ── Building blocks ────────────────────────────────

    @staticmethod
    def region_leads(leads: Sequence[RawLead], region: str) -> List[RawLead]:
        return [lead for lead in leads if lead.city == region or lead.neighborhood == region]

    def competition_density(self, leads: Sequence[RawLead], region: str) -> CompetitionDensity:
        count = len(self.region_leads(leads, region))
        for minimum, density in self.DENSITY_TIERS:
            if count >= minimum:
                return density
        return CompetitionDensity.LOW

    @staticmethod
    def rating_stats(leads: Sequence[RawLead]) -> Tuple[float, float]:
        """Mean rating and mean reviews; a zero value counts as missing."""
        ratings = [lead.rating for lead in leads if lead.rating]
        reviews = [lead.reviews for lead in leads if lead.reviews]

        avg_rating = sum(ratings) / len(ratings) if ratings else 0.0
        avg_reviews = sum(reviews) / len(reviews) if reviews else 0.0
        return avg_rating, avg_reviews

    def top_categories(self, leads: Sequence[RawLead]) -> List[CategoryShare]:
        if not leads:
            return []

        # Counter preserves first-seen order, sorted() keeps it for ties
        counts = Counter(lead.category for lead in leads)
        shares = [
            CategoryShare(
                category=category,
                count=count,
                percentage=round_half_up(count / len(leads) * 100),
            )
            for category, count in counts.items()
        ]
        shares = sorted(shares, key=lambda s: s.count, reverse=True)
        return shares[:self.TOP_CATEGORIES]

    @staticmethod
    def _gap_percent(leads: Sequence[RawLead], missing) -> int:
        if not leads:
            return 0
        return round_half_up(sum(1 for lead in leads if missing(lead)) / len(leads) * 100)

    # ── Rule sets ──────────────────────────────────────

    def _opportunities(
        self,
        leads: Sequence[RawLead],
        density: CompetitionDensity,
        avg_rating: float,
    ) -> List[str]:
        opportunities = []

        if density == CompetitionDensity.LOW:
            opportunities.append("Região com baixa concorrência — oportunidade de entrada")
            opportunities.append("Possibilidade de dominar o mercado local rapidamente")

        if density == CompetitionDensity.SATURATED:
            opportunities.append("Mercado saturado — foco em diferenciação é crítico")
            opportunities.append("Considerar expansão para bairros adjacentes")

        if avg_rating < self.LOW_RATING:
            opportunities.append("Média de avaliação baixa — oportunidade para serviço superior")

        website_gap = self._gap_percent(leads, lambda lead: not lead.has_website)
        if website_gap > self.WEBSITE_GAP_PERCENT:
            opportunities.append(
                f"{website_gap}% dos negócios sem site — grande oportunidade de digitalização"
            )

        whatsapp_gap = self._gap_percent(leads, lambda lead: not lead.has_whatsapp)
        if whatsapp_gap > self.WHATSAPP_GAP_PERCENT:
            opportunities.append(
                f"{whatsapp_gap}% sem WhatsApp Business — canal de vendas inexplorado"
            )

        return opportunities

    def _warnings(
        self,
        density: CompetitionDensity,
        top_categories: List[CategoryShare],
    ) -> List[str]:
        warnings = []

        if density == CompetitionDensity.SATURATED:
            warnings.append("⚠️ Alta saturação — entrada de novos players será desafiadora")
            warnings.append("⚠️ Necessário investimento alto em marketing para se destacar")

        if top_categories and top_categories[0].percentage > self.DOMINANT_CATEGORY_PERCENT:
            dominant = top_categories[0]
            warnings.append(
                f"⚠️ {dominant.category} domina {dominant.percentage}% do mercado"
            )

        return warnings

    def _recommendations(
        self,
        leads: Sequence[RawLead],
        density: CompetitionDensity,
        avg_rating: float,
    ) -> List[str]:
        recommendations = []

        if density == CompetitionDensity.SATURATED:
            recommendations.append("Foque em nichos específicos não atendidos")
            recommendations.append("Invista em branding forte e diferenciação clara")
            recommendations.append(
                "Considere modelo de negócio inovador (dark kitchen, delivery-only, etc.)"
            )
        elif density == CompetitionDensity.LOW:
            recommendations.append("Aproveite a baixa concorrência para estabelecer marca")
            recommendations.append("Invista em SEO local para dominar buscas da região")
            recommendations.append("Crie parcerias com negócios complementares")

        if avg_rating < self.LOW_RATING:
            recommendations.append(
                "Priorize excelência no atendimento — concorrência tem avaliações baixas"
            )
            recommendations.append("Implemente programa de fidelidade para reter clientes")

        offline = sum(1 for lead in leads if not lead.has_website and not lead.has_whatsapp)
        if offline > len(leads) * 0.5:
            recommendations.append(
                "Mercado com baixa maturidade digital — oportunidade de liderança tecnológica"
            )

        return recommendations

    # ── Public operations ──────────────────────────────

    def analyze_market_by_region(self, leads: Sequence[RawLead], region: str) -> MarketAnalysis:
        """Analyze one city or neighborhood."""
        regional = self.region_leads(leads, region)

        density = self.competition_density(leads, region)
        avg_rating, avg_reviews = self.rating_stats(regional)
        top_categories = self.top_categories(regional)

        analysis = MarketAnalysis(
            region=region,
            total_leads=len(regional),
            competition_density=density,
            average_rating=round_half_up(avg_rating, 1),
            average_reviews=round_half_up(avg_reviews),
            top_categories=top_categories,
            opportunities=self._opportunities(regional, density, avg_rating),
            warnings=self._warnings(density, top_categories),
            recommendations=self._recommendations(regional, density, avg_rating),
        )

        logger.info(
            f"Market analysis for {region}: {analysis.total_leads} leads, "
            f"density={density.value}"
        )
        return analysis

    def compare_regions(self, leads: Sequence[RawLead], regions: Sequence[str]) -> List[MarketAnalysis]:
        return [self.analyze_market_by_region(leads, region) for region in regions]

    def find_best_opportunity_regions(
        self,
        leads: Sequence[RawLead],
        top_n: int = 5,
    ) -> List[RegionOpportunity]:
        """
        Rank every distinct city by a weighted opportunity score.

        Density contributes 10-40 points, a low average rating 20, a
        website gap above 60% 25 and more than 20 leads 15.
        """
        cities = list(dict.fromkeys(lead.city for lead in leads))
        ranked = []

        for city in cities:
            city_leads = [lead for lead in leads if lead.city == city]
            density = self.competition_density(leads, city)
            avg_rating, _ = self.rating_stats(city_leads)

            score = self.DENSITY_OPPORTUNITY_POINTS[density]
            reasoning = []
            if density in self.DENSITY_REASONING:
                reasoning.append(self.DENSITY_REASONING[density])

            if avg_rating < self.LOW_RATING:
                score += 20
                reasoning.append("concorrentes com avaliações baixas")

            digital_gap = sum(1 for lead in city_leads if not lead.has_website) / len(city_leads)
            if digital_gap > 0.6:
                score += 25
                reasoning.append("alto gap de digitalização")

            if len(city_leads) > 20:
                score += 15
                reasoning.append("mercado com volume relevante")

            ranked.append(RegionOpportunity(region=city, score=score, reasoning=", ".join(reasoning)))

        ranked = sorted(ranked, key=lambda r: r.score, reverse=True)
        return ranked[:top_n]

    def analyze_category_saturation(self, leads: Sequence[RawLead]) -> List[CategorySaturation]:
        """Bucket the top categories into saturation tiers."""
        result = []
        for share in self.top_categories(leads):
            level, recommendation = self.CATEGORY_SATURATION_DEFAULT
            for minimum, tier, tier_recommendation in self.CATEGORY_SATURATION_TIERS:
                if share.count >= minimum:
                    level, recommendation = tier, tier_recommendation
                    break
            result.append(CategorySaturation(
                category=share.category,
                count=share.count,
                saturation=level,
                recommendation=recommendation,
            ))
        return result

    def generate_expansion_insights(self, leads: Sequence[RawLead]) -> ExpansionInsights:
        cities = list(dict.fromkeys(lead.city for lead in leads))
        best = self.find_best_opportunity_regions(leads, 3)

        top_reasoning = best[0].reasoning if best and best[0].reasoning else "oportunidades estratégicas"
        return ExpansionInsights(
            current_coverage=cities,
            suggested_expansion=[r.region for r in best],
            reasoning=(
                f"Baseado em análise de {len(leads)} leads, as regiões sugeridas "
                f"apresentam: {top_reasoning}"
            ),
        )
