"""
Sentiment Analyzer - Score review transcripts and extract insight phrases.

Polarity comes from a pluggable scorer (AFINN lexicon by default, Gemini
Flash optionally). Insight phrases come from fixed keyword patterns and do
not depend on the polarity score.
"""
import json
import re
import time
from typing import Dict, List, Optional, Tuple

from afinn import Afinn
from google import genai

from src import settings

SCORE_MULTIPLIER = 5
SCORE_LIMIT = 100
MAX_INSIGHTS = 5

# Gemini returns [-1, 1]; this puts it on the lexicon's raw scale
GEMINI_RAW_SCALE = 20

POSITIVE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'great camera|excellent camera|amazing camera|camera is good|camera quality|superb camera'), 'Great camera quality'),
    (re.compile(r'good battery|excellent battery|amazing battery|battery life is good|long battery'), 'Excellent battery life'),
    (re.compile(r'fast performance|smooth performance|powerful|fast processor|snappy'), 'Fast and smooth performance'),
    (re.compile(r'premium design|beautiful design|good build quality|premium feel|solid build'), 'Premium design and build'),
    (re.compile(r'value for money|worth the price|good price|affordable|bang for buck'), 'Good value for money'),
    (re.compile(r'great display|excellent screen|beautiful display|good screen|vibrant display'), 'Excellent display quality'),
    (re.compile(r'fast charging|quick charging|charges fast|rapid charging'), 'Fast charging support'),
    (re.compile(r'good speakers|great audio|excellent sound|loud speakers'), 'Good audio quality'),
]

NEGATIVE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'camera issues|camera problem|disappointing camera|average camera|weak camera'), 'Camera could be better'),
    (re.compile(r'battery drain|poor battery|bad battery|battery life issues|short battery'), 'Battery life concerns'),
    (re.compile(r'slow performance|laggy|stutters|performance issues|choppy'), 'Performance issues reported'),
    (re.compile(r'overheating|heating issues|gets hot|thermal|too hot'), 'Heating issues'),
    (re.compile(r'expensive|overpriced|too costly|not worth|pricey'), 'Expensive for what it offers'),
    (re.compile(r'cheap build|plastic feel|poor build|feels cheap|flimsy'), 'Build quality could be better'),
    (re.compile(r'bloatware|too many ads|ui issues|software bugs|buggy'), 'Software needs improvement'),
    (re.compile(r'no headphone jack|no expandable storage|no wireless charging|missing features'), 'Missing some features'),
]

SUMMARY_POSITIVE = 'Overall positive review with some minor concerns'
SUMMARY_NEGATIVE = 'Mixed review with several concerns raised'
SUMMARY_BALANCED = 'Balanced review highlighting both pros and cons'

# (lower bound inclusive, label), checked top-down
RECOMMENDATION_TIERS = [
    (50, 'Highly Recommended'),
    (20, 'Recommended'),
    (-20, 'Mixed'),
    (-50, 'Not Recommended'),
]
LOWEST_RECOMMENDATION = 'Strongly Not Recommended'


def clean_transcript(text: str) -> str:
    """Lower-case, strip punctuation, collapse whitespace."""
    cleaned = re.sub(r'[^\w\s]', ' ', text.lower())
    return re.sub(r'\s+', ' ', cleaned).strip()


def scale_polarity(raw: float) -> int:
    """Scale a raw polarity by 5 and clamp to [-100, 100]."""
    scaled = max(-SCORE_LIMIT, min(SCORE_LIMIT, raw * SCORE_MULTIPLIER))
    # Round half up
    return int(scaled + 0.5) if scaled >= 0 else -int(-scaled + 0.5)


def determine_recommendation(sentiment_score: int) -> str:
    for lower_bound, label in RECOMMENDATION_TIERS:
        if sentiment_score >= lower_bound:
            return label
    return LOWEST_RECOMMENDATION


def extract_insights(transcript: str) -> Dict:
    """
    Match canned positive/negative insight phrases.

    Returns:
        Dictionary with positive, negative (each up to 5, table order)
        and summary
    """
    if not transcript:
        return {'positive': [], 'negative': [], 'summary': ''}

    text = transcript.lower()
    positive = [insight for pattern, insight in POSITIVE_PATTERNS if pattern.search(text)][:MAX_INSIGHTS]
    negative = [insight for pattern, insight in NEGATIVE_PATTERNS if pattern.search(text)][:MAX_INSIGHTS]

    if len(positive) > len(negative):
        summary = SUMMARY_POSITIVE
    elif len(negative) > len(positive):
        summary = SUMMARY_NEGATIVE
    else:
        summary = SUMMARY_BALANCED

    return {'positive': positive, 'negative': negative, 'summary': summary}


class AfinnPolarityScorer:
    """Additive AFINN word-list polarity."""

    def __init__(self):
        self.afinn = Afinn(language='en')

    def polarity(self, text: str) -> float:
        return self.afinn.score(text)


class GeminiPolarityScorer:
    """
    Polarity from Gemini Flash, on the lexicon's raw scale.

    Uses Gemini Flash to rate the reviewer's overall opinion of the phone.
    """

    def __init__(self, api_key: Optional[str] = None, rate_limit_delay: float = 0.2, verbose: bool = False):
        api_key = api_key or settings.GEMINI_API_KEY
        if not api_key:
            raise ValueError("GEMINI_API_KEY not found in environment variables")

        self.client = genai.Client(api_key=api_key)
        self.model_name = 'gemini-2.0-flash'
        self.rate_limit_delay = rate_limit_delay
        self.last_call_time = 0.0
        self.verbose = verbose

    def polarity(self, text: str) -> float:
        elapsed = time.time() - self.last_call_time
        if elapsed < self.rate_limit_delay:
            time.sleep(self.rate_limit_delay - elapsed)

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=self._create_prompt(text)
        )
        self.last_call_time = time.time()

        response_text = response.text.strip()
        if response_text.startswith('```'):
            lines = response_text.split('\n')
            response_text = '\n'.join(lines[1:-1])

        try:
            score = float(json.loads(response_text).get('sentiment_score', 0.0))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            if self.verbose:
                print(f"[!] Failed to parse sentiment response: {e}")
            score = 0.0

        score = max(-1.0, min(1.0, score))
        return score * GEMINI_RAW_SCALE

    def _create_prompt(self, text: str) -> str:
        return f"""Rate the reviewer's overall opinion of the smartphone in this video transcript.

Transcript:
{text[:12000]}

Return ONLY a JSON object (no markdown, no explanation):
{{"sentiment_score": <number from -1.0 (very negative) to +1.0 (very positive)>}}"""


def create_polarity_scorer(backend: Optional[str] = None, verbose: bool = False):
    """Polarity scorer for 'afinn' or 'gemini'."""
    backend = (backend or settings.SENTIMENT_BACKEND).lower()
    if backend == 'afinn':
        return AfinnPolarityScorer()
    if backend == 'gemini':
        return GeminiPolarityScorer(verbose=verbose)
    raise ValueError(f"Unknown sentiment backend: {backend}")


class SentimentAnalyzer:
    """
    Analyze review transcripts.

    Produces a bounded sentiment score, insight phrases, a one-line
    summary and the derived recommendation label.
    """

    def __init__(self, polarity_scorer=None, verbose: bool = False):
        """
        Args:
            polarity_scorer: Object with polarity(text) -> float (defaults to AFINN)
            verbose: Print detailed output
        """
        self.polarity_scorer = polarity_scorer or AfinnPolarityScorer()
        self.verbose = verbose

    def score(self, transcript: str) -> Optional[int]:
        if not transcript or not transcript.strip():
            return None
        raw = self.polarity_scorer.polarity(clean_transcript(transcript))
        return scale_polarity(raw)

    def analyze(self, transcript: Optional[str]) -> Optional[Dict]:
        """
        Analyze one transcript.

        Returns:
            None when the transcript is missing or blank, else a dict with:
            - sentiment_score: int (-100 to +100)
            - positive_points: List[str]
            - negative_points: List[str]
            - summary: str
            - recommendation: str
        """
        sentiment_score = self.score(transcript)
        if sentiment_score is None:
            return None

        insights = extract_insights(transcript)
        result = {
            'sentiment_score': sentiment_score,
            'positive_points': insights['positive'],
            'negative_points': insights['negative'],
            'summary': insights['summary'],
            'recommendation': determine_recommendation(sentiment_score)
        }

        if self.verbose:
            print(f"[+] Sentiment {sentiment_score} ({result['recommendation']}): "
                  f"{len(insights['positive'])} positive | {len(insights['negative'])} negative")

        return result
