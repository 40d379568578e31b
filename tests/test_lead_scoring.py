"""Tests for Lead Scoring components."""

import itertools

import pytest

from lead_scoring.models import LeadFilters, Temperature, round_half_up
from lead_scoring.scoring_model import (
    LeadScorer,
    apply_filters,
    filter_by_min_score,
    filter_by_temperature,
    qualification_stats,
)

from conftest import make_lead


@pytest.fixture
def scorer():
    return LeadScorer()


# ── Sub-scores ────────────────────────────────────────

class TestSubScores:
    @pytest.mark.parametrize("rating,expected", [
        (None, 0), (5.0, 25), (4.5, 25), (4.4, 20), (4.0, 20),
        (3.5, 15), (3.0, 10), (2.9, 5), (1.0, 5), (0.0, 0),
    ])
    def test_rating_tiers(self, scorer, rating, expected):
        assert scorer.rating_score(rating) == expected

    @pytest.mark.parametrize("reviews,expected", [
        (None, 0), (0, 0), (1, 5), (19, 5), (20, 8), (50, 12),
        (100, 15), (200, 18), (499, 18), (500, 20), (10000, 20),
    ])
    def test_review_tiers(self, scorer, reviews, expected):
        assert scorer.reviews_score(reviews) == expected

    def test_digital_presence_is_additive(self, scorer):
        lead = make_lead(website="https://x.com.br", whatsapp="+55119", instagram="@x")
        assert scorer.digital_presence_score(lead) == 30
        assert scorer.digital_presence_score(make_lead(whatsapp="+55119")) == 10
        assert scorer.digital_presence_score(make_lead()) == 0

    def test_high_value_category_substring(self, scorer):
        assert scorer.category_score("Pizzaria Delivery") == 15
        assert scorer.category_score("CLÍNICA odontológica") == 15
        assert scorer.category_score("Oficina Mecânica") == 8

    def test_location_score(self, scorer):
        assert scorer.location_score(make_lead(neighborhood="Moema")) == 10
        assert scorer.location_score(make_lead()) == 5


# ── Totals and classification ─────────────────────────

class TestScoring:
    def test_top_reputation_scores_45(self, scorer):
        """Rating >= 4.5 with 500+ reviews always adds up to 45."""
        for category, neighborhood in [("Pizzaria", "Moema"), ("Oficina", None)]:
            lead = make_lead(rating=4.7, reviews=800, category=category, neighborhood=neighborhood)
            breakdown = scorer.score_breakdown(lead)
            assert breakdown["rating"] + breakdown["reviews"] == 45

    def test_bare_lead_is_cold_13(self, scorer):
        qualified = scorer.qualify(make_lead(category="Oficina Mecânica"))
        assert qualified.score == 13
        assert qualified.temperature == Temperature.COLD

    def test_zero_rating_and_reviews_score_like_missing(self, scorer):
        lead = make_lead(rating=0.0, reviews=0)
        breakdown = scorer.score_breakdown(lead)
        assert breakdown["rating"] == 0
        assert breakdown["reviews"] == 0
        assert scorer.score(lead) == scorer.score(make_lead()) == 13

    def test_score_bounds_across_tiers(self, scorer):
        ratings = [None, 0.0, 2.9, 3.0, 3.5, 4.0, 4.5, 5.0]
        reviews = [None, 0, 19, 20, 50, 100, 200, 500]
        contacts = [None, "x"]
        for rating, count, website, whatsapp, instagram, category, neighborhood in itertools.product(
            ratings, reviews, contacts, contacts, contacts,
            ["Pizzaria", "Oficina"], [None, "Centro"],
        ):
            lead = make_lead(
                rating=rating, reviews=count, website=website, whatsapp=whatsapp,
                instagram=instagram, category=category, neighborhood=neighborhood,
            )
            score = scorer.score(lead)
            assert 0 <= score <= 100
            assert 0 <= scorer.conversion_probability(lead, score) <= 100

    def test_maximum_score(self, scorer):
        lead = make_lead(
            category="Restaurante", neighborhood="Centro", rating=5.0, reviews=900,
            website="https://r.com.br", whatsapp="+55", instagram="@r",
        )
        assert scorer.score(lead) == 100

    @pytest.mark.parametrize("score,expected", [
        (100, Temperature.HOT), (70, Temperature.HOT), (69, Temperature.WARM),
        (45, Temperature.WARM), (44, Temperature.COLD), (0, Temperature.COLD),
    ])
    def test_temperature_thresholds(self, scorer, score, expected):
        assert scorer.determine_temperature(score) == expected

    def test_custom_thresholds(self):
        scorer = LeadScorer()
        scorer.adjust_thresholds(hot=80, warm=60)
        assert scorer.hot_threshold == 80
        assert scorer.determine_temperature(75) == Temperature.WARM
        assert scorer.determine_temperature(55) == Temperature.COLD


class TestConversionProbability:
    def test_clamped_at_100(self, scorer):
        lead = make_lead(rating=4.9, reviews=300, whatsapp="+55")
        assert scorer.conversion_probability(lead, 95) == 100

    def test_clamped_at_0(self, scorer):
        assert scorer.conversion_probability(make_lead(), 10) == 0

    def test_adjustments(self, scorer):
        assert scorer.conversion_probability(make_lead(website="https://a.com"), 50) == 50
        assert scorer.conversion_probability(make_lead(whatsapp="+55"), 50) == 55
        assert scorer.conversion_probability(make_lead(), 50) == 35
        reputable = make_lead(rating=4.5, reviews=100, instagram="@a")
        assert scorer.conversion_probability(reputable, 50) == 60

    def test_sao_paulo_fixture(self, scorer, sao_paulo_leads):
        by_id = {q.id: q for q in scorer.qualify_batch(sao_paulo_leads)}
        assert by_id["sp-1"].score == 80
        assert by_id["sp-1"].conversion_probability == 95
        assert by_id["rj-1"].score == 86
        assert by_id["rj-1"].conversion_probability == 100
        assert by_id["sp-3"].conversion_probability == 25


# ── Batch qualification ───────────────────────────────

class TestBatchQualifier:
    def test_ranks_and_order(self, scorer, sao_paulo_leads):
        qualified = scorer.qualify_batch(sao_paulo_leads)

        assert len(qualified) == len(sao_paulo_leads)
        assert [q.id for q in qualified] == ["rj-1", "sp-1", "sp-2", "sp-3", "bh-1"]
        assert [q.priority_rank for q in qualified] == [1, 2, 3, 4, 5]

    def test_requalifying_sorted_output_is_idempotent(self, scorer, sao_paulo_leads):
        first = scorer.qualify_batch(sao_paulo_leads)
        second = scorer.qualify_batch([q.lead for q in first])
        assert [q.id for q in second] == [q.id for q in first]
        assert [q.priority_rank for q in second] == [q.priority_rank for q in first]

    def test_ties_keep_input_order(self, scorer):
        leads = [make_lead(f"tie-{i}") for i in range(4)]
        qualified = scorer.qualify_batch(leads)
        assert [q.id for q in qualified] == ["tie-0", "tie-1", "tie-2", "tie-3"]

    def test_empty_batch(self, scorer):
        assert scorer.qualify_batch([]) == []

    def test_to_dict_merges_lead_fields(self, scorer, sao_paulo_leads):
        data = scorer.qualify(sao_paulo_leads[0]).to_dict()
        assert data["name"] == "Pizzaria Bella Napoli"
        assert data["temperature"] == "hot"
        assert data["breakdown"]["digital_presence"] == 10


# ── Filters and stats ─────────────────────────────────

class TestFiltersAndStats:
    def test_filter_helpers(self, scorer, sao_paulo_leads):
        qualified = scorer.qualify_batch(sao_paulo_leads)
        hot = filter_by_temperature(qualified, [Temperature.HOT])
        assert [q.id for q in hot] == ["rj-1", "sp-1"]
        assert [q.id for q in filter_by_min_score(qualified, 69)] == ["rj-1", "sp-1", "sp-2"]

    def test_apply_filters(self, scorer, sao_paulo_leads):
        qualified = scorer.qualify_batch(sao_paulo_leads)

        pizzarias_with_whatsapp = apply_filters(
            qualified, LeadFilters(categories=["pizzaria"], has_whatsapp=True)
        )
        assert [q.id for q in pizzarias_with_whatsapp] == ["sp-1"]

        without_site = apply_filters(qualified, LeadFilters(has_website=False, min_rating=4.0))
        assert [q.id for q in without_site] == ["rj-1", "sp-1"]

        by_neighborhood = apply_filters(qualified, LeadFilters(cities=["Copacabana"]))
        assert [q.id for q in by_neighborhood] == ["rj-1"]

        assert apply_filters(qualified, LeadFilters()) == qualified

    def test_stats(self, scorer, sao_paulo_leads):
        stats = qualification_stats(scorer.qualify_batch(sao_paulo_leads))

        assert stats["total"] == 5
        assert stats["distribution"]["hot"] == 2
        assert stats["distribution"]["hot_percent"] == 40
        assert stats["distribution"]["warm_percent"] == 20
        assert stats["averages"]["score"] == 62
        assert stats["averages"]["conversion_probability"] == 62
        assert stats["digital_presence"]["whatsapp_percent"] == 40
        assert stats["digital_presence"]["website"] == 1

    def test_stats_empty(self):
        stats = qualification_stats([])
        assert stats["total"] == 0
        assert stats["distribution"]["hot_percent"] == 0
        assert stats["averages"]["score"] == 0


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(62.2) == 62
    assert round_half_up(4.25, 1) == 4.3
