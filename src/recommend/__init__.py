"""
Recommendation module.
Handles spec scoring, ranking, and explanation of phone recommendations.
"""

from .feature_scorer import FeatureScorer
from .ranker import MatchRanker, RankedResult
from .insights import InsightComposer
from .recommender import PhoneRecommender, RecommendationSet

__all__ = [
    'FeatureScorer', 'MatchRanker', 'RankedResult',
    'InsightComposer', 'PhoneRecommender', 'RecommendationSet'
]
