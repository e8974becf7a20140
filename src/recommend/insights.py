"""
Insight Composer - Short explanations for a recommended phone.
"""
from typing import Dict, List, Optional, Sequence

from src.recommend.models import FEATURES, Phone, Review

MAX_SENTENCES = 3
NEGATIVE_POINTS_PER_REVIEW = 2
WEAK_SCORE_THRESHOLD = 75
NO_CONCERNS = 'No major concerns'


def _join_sentences(sentences: List[str]) -> str:
    if not sentences:
        return ''
    return '. '.join(sentences[:MAX_SENTENCES]) + '.'


def average_sentiment(reviews: Sequence[Review]) -> Optional[float]:
    if not reviews:
        return None
    return sum(r.sentiment_score for r in reviews) / len(reviews)


class InsightComposer:
    """Compose "why we picked this" and "what to know" text."""

    def why_picked(self, phone: Phone, top_priority: str, reviews: Sequence[Review]) -> str:
        reasons = []

        top_score = phone.feature_score(top_priority)
        if top_score >= 90:
            reasons.append(f"Exceptional {top_priority} - one of the best in this range")
        elif top_score >= 85:
            reasons.append(f"Excellent {top_priority} performance")
        elif top_score >= 80:
            reasons.append(f"Strong {top_priority} capabilities")

        avg = average_sentiment(reviews)
        if avg is not None:
            if avg >= 50:
                reasons.append('Highly praised by reviewers')
            elif avg >= 20:
                reasons.append('Positively reviewed overall')

        if phone.price < 30000:
            reasons.append('Great value for money')
        elif phone.price >= 60000:
            reasons.append('Premium flagship experience')

        return _join_sentences(reasons)

    def what_to_know(self, phone: Phone, reviews: Sequence[Review]) -> str:
        warnings = [
            f"{feature.capitalize()} could be better"
            for feature in FEATURES
            if phone.feature_score(feature) < WEAK_SCORE_THRESHOLD
        ]

        for review in reviews or []:
            warnings.extend(review.negative_points[:NEGATIVE_POINTS_PER_REVIEW])

        return _join_sentences(warnings) if warnings else NO_CONCERNS

    def compose(self, phone: Phone, top_priority: str, reviews: Sequence[Review]) -> Dict[str, str]:
        return {
            'why_picked': self.why_picked(phone, top_priority, reviews),
            'what_to_know': self.what_to_know(phone, reviews),
        }
