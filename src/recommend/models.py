"""
Data models shared by scoring, ranking and persistence.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional, Any

# Canonical feature vocabulary, in display order
FEATURES = ('camera', 'battery', 'performance', 'privacy', 'design')

DEFAULT_FEATURE_SCORE = 75


@dataclass
class FeatureScores:
    """Five capability scores derived from a phone's specs."""
    camera: int
    battery: int
    performance: int
    privacy: int
    design: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class Phone:
    """A catalog phone with raw specs and derived scores."""
    brand: str
    model: str
    price: int
    id: Optional[int] = None

    # Raw specs
    memory_and_storage: str = ''
    display: str = ''
    processor: str = ''
    ram: str = ''
    storage: str = ''
    battery: str = ''
    camera: str = ''
    front_camera: str = ''
    image_url: str = ''
    product_url: str = ''

    # Derived scores
    camera_score: Optional[int] = None
    battery_score: Optional[int] = None
    performance_score: Optional[int] = None
    privacy_score: Optional[int] = None
    design_score: Optional[int] = None

    # Review aggregates (read path only)
    review_count: int = 0
    avg_review_score: float = 0.0

    @property
    def name(self) -> str:
        return f"{self.brand} {self.model}"

    def feature_score(self, feature: str) -> int:
        """Score for a feature tag; 75 when the stored score is missing."""
        value = getattr(self, f"{feature}_score", None)
        return DEFAULT_FEATURE_SCORE if value is None else value

    def apply_scores(self, scores: FeatureScores) -> None:
        for feature, value in scores.to_dict().items():
            setattr(self, f"{feature}_score", value)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Phone':
        """Build from a database row (RealDictCursor)."""
        return cls(
            id=row.get('id'),
            brand=row.get('brand') or '',
            model=row.get('model') or '',
            price=int(row.get('price') or 0),
            memory_and_storage=row.get('memory_and_storage') or '',
            display=row.get('display_info') or '',
            processor=row.get('processor') or '',
            ram=row.get('ram') or '',
            storage=row.get('storage') or '',
            battery=row.get('battery') or '',
            camera=row.get('camera') or '',
            front_camera=row.get('front_camera') or '',
            image_url=row.get('image_url') or '',
            product_url=row.get('product_url') or '',
            camera_score=row.get('camera_score'),
            battery_score=row.get('battery_score'),
            performance_score=row.get('performance_score'),
            privacy_score=row.get('privacy_score'),
            design_score=row.get('design_score'),
            review_count=int(row.get('review_count') or 0),
            avg_review_score=float(row.get('avg_review_score') or 0.0)
        )


@dataclass
class Review:
    """A sentiment-scored trusted-channel video review of one phone."""
    phone_id: int
    video_id: str
    channel_id: str = ''
    channel_name: str = ''
    title: str = ''
    url: str = ''
    thumbnail_url: str = ''
    view_count: int = 0
    like_count: int = 0
    published_at: Optional[datetime] = None
    sentiment_score: int = 0
    positive_points: List[str] = field(default_factory=list)
    negative_points: List[str] = field(default_factory=list)
    summary: str = ''
    recommendation: str = 'Mixed'
    transcript_available: bool = True
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Review':
        return cls(
            id=row.get('id'),
            phone_id=row.get('phone_id'),
            video_id=row.get('video_id') or '',
            channel_id=row.get('channel_id') or '',
            channel_name=row.get('channel_name') or '',
            title=row.get('video_title') or '',
            url=row.get('video_url') or '',
            thumbnail_url=row.get('thumbnail_url') or '',
            view_count=int(row.get('view_count') or 0),
            like_count=int(row.get('like_count') or 0),
            published_at=row.get('published_at'),
            sentiment_score=int(row.get('sentiment_score') or 0),
            positive_points=list(row.get('positive_points') or []),
            negative_points=list(row.get('negative_points') or []),
            summary=row.get('key_insights') or '',
            recommendation=row.get('recommendation') or 'Mixed',
            transcript_available=bool(row.get('transcript_available', True))
        )
