"""
Phone recommender - read the catalog snapshot, rank, and explain.

Each call reads its own snapshot of phones and reviews, so concurrent
requests share nothing mutable.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from src.recommend.insights import InsightComposer
from src.recommend.ranker import MatchRanker, RankedResult, budget_bounds, validate_priority_order
from src.recommend.spec_normalizer import format_price


@dataclass
class RecommendationSet:
    """Ranked recommendations for one request."""
    budget: int
    budget_range: str
    priorities: List[str]
    total_found: int
    recommendations: List[RankedResult] = field(default_factory=list)
    message: Optional[str] = None


def budget_range_label(budget: int) -> str:
    low, high = budget_bounds(budget)
    return f"{format_price(low)} - {format_price(high)}"


class PhoneRecommender:
    """
    Recommend phones for a budget and priority order.

    Args:
        phone_client: Catalog/review reader (PhoneDatabaseClient or compatible)
        top_k: Number of recommendations
        reviews_per_phone: Reviews attached to each recommendation
    """

    def __init__(
        self,
        phone_client,
        top_k: int = 5,
        reviews_per_phone: int = 3,
        verbose: bool = False
    ):
        self.phone_client = phone_client
        self.ranker = MatchRanker(top_k=top_k, verbose=verbose)
        self.composer = InsightComposer()
        self.reviews_per_phone = reviews_per_phone
        self.verbose = verbose

    def recommend(self, budget: int, priorities: Sequence[str]) -> RecommendationSet:
        """
        Raises:
            ValueError: invalid budget or priority order
        """
        if budget is None or budget <= 0:
            raise ValueError("Budget must be a positive integer")
        order = validate_priority_order(priorities)

        catalog = self.phone_client.get_phones_in_budget(budget)
        result = RecommendationSet(
            budget=budget,
            budget_range=budget_range_label(budget),
            priorities=order,
            total_found=0
        )

        candidates = self.ranker.score_candidates(catalog, order, budget)
        if not candidates:
            result.message = 'No phones found in this budget'
            return result

        result.total_found = len(candidates)
        for ranked in candidates[:self.ranker.top_k]:
            reviews = self.phone_client.get_reviews(ranked.phone.id, limit=self.reviews_per_phone)
            insights = self.composer.compose(ranked.phone, ranked.top_priority, reviews)
            ranked.reviews = reviews
            ranked.why_picked = insights['why_picked']
            ranked.what_to_know = insights['what_to_know']
            result.recommendations.append(ranked)

        if self.verbose:
            print(f"[+] {len(result.recommendations)} recommendations for budget {budget}")

        return result
