"""
Match Ranker - Score and rank catalog phones against user priorities.

This module takes scored catalog phones and a five-way priority order and:
1. Keeps phones priced within ±10% of the budget
2. Computes a weighted match score from the priority positions
3. Sorts by match score (stable, so catalog order breaks ties)
4. Returns the top recommendations
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from src.recommend.models import FEATURES, Phone

# Weight (in percent) by priority position: 1st..5th
PRIORITY_WEIGHTS = (40, 30, 20, 10, 0)

BUDGET_TOLERANCE_PERCENT = 10


def validate_priority_order(priorities: Sequence[str]) -> List[str]:
    """
    Check that priorities are a permutation of the five feature tags.

    Returns:
        Normalized (trimmed, lower-cased) priority list

    Raises:
        ValueError: if tags are missing, duplicated or unknown
    """
    if not priorities:
        raise ValueError("Missing required parameter: priorities")

    order = [str(p).strip().lower() for p in priorities]
    if len(order) != len(FEATURES):
        raise ValueError(f"Priorities must include all {len(FEATURES)} features")

    unknown = [p for p in order if p not in FEATURES]
    if unknown:
        raise ValueError(f"Unknown priorities: {', '.join(unknown)}")

    if len(set(order)) != len(order):
        raise ValueError("Priorities must not contain duplicates")

    return order


def budget_bounds(budget: int) -> Tuple[float, float]:
    """Inclusive price window around the budget."""
    return (
        budget * (100 - BUDGET_TOLERANCE_PERCENT) / 100,
        budget * (100 + BUDGET_TOLERANCE_PERCENT) / 100
    )


def in_budget(price: int, budget: int) -> bool:
    # Integer comparison keeps the ±10% bounds exact
    return (price * 100 >= budget * (100 - BUDGET_TOLERANCE_PERCENT)
            and price * 100 <= budget * (100 + BUDGET_TOLERANCE_PERCENT))


def calculate_score(phone: Phone, priorities: Sequence[str]) -> int:
    """
    Weighted match score (0-100) for a phone.

    For priorities [camera, battery, performance, privacy, design] and
    scores [90, 80, 70, 60, 50]: 36 + 24 + 14 + 6 + 0 = 80
    """
    total = sum(
        weight * phone.feature_score(feature)
        for weight, feature in zip(PRIORITY_WEIGHTS, priorities)
    )
    # Round half up on the percent-weighted integer total
    return (total + 50) // 100


@dataclass
class RankedResult:
    """A ranked phone recommendation."""
    phone: Phone
    match_score: int
    rank: int
    top_priority: str
    why_picked: str = ''
    what_to_know: str = ''
    reviews: List = field(default_factory=list)

    @property
    def match_percentage(self) -> int:
        return self.match_score


class MatchRanker:
    """
    Rank phones by weighted priority match within a budget window.

    Deterministic: identical catalog, priorities and budget always give
    the same ranking.
    """

    def __init__(self, top_k: int = 5, verbose: bool = False):
        self.top_k = top_k
        self.verbose = verbose

    def score_candidates(
        self,
        catalog: Sequence[Phone],
        priorities: Sequence[str],
        budget: int
    ) -> List[RankedResult]:
        """All in-budget phones, scored and sorted (not truncated)."""
        order = validate_priority_order(priorities)

        candidates = [phone for phone in catalog if in_budget(phone.price, budget)]
        if not candidates:
            if self.verbose:
                print(f"[!] No phones within budget {budget}")
            return []

        scored = [(phone, calculate_score(phone, order)) for phone in candidates]
        scored.sort(key=lambda pair: pair[1], reverse=True)

        return [
            RankedResult(phone=phone, match_score=score, rank=i, top_priority=order[0])
            for i, (phone, score) in enumerate(scored, 1)
        ]

    def rank(
        self,
        catalog: Sequence[Phone],
        priorities: Sequence[str],
        budget: int,
        top_k: Optional[int] = None
    ) -> List[RankedResult]:
        """
        Rank catalog phones for a budget and priority order.

        Args:
            catalog: Scored phones (any order; ties keep this order)
            priorities: Permutation of the five feature tags, most important first
            budget: Target price
            top_k: Number of results (defaults to the ranker's top_k)

        Returns:
            Up to top_k RankedResult objects, best first
        """
        limit = self.top_k if top_k is None else top_k
        ranked = self.score_candidates(catalog, priorities, budget)

        if self.verbose and ranked:
            print(f"[+] Ranked {len(ranked)} phones in budget")
            print(f"    - Top match: {ranked[0].phone.name} ({ranked[0].match_score})")

        return ranked[:limit]
