"""
Feature Scorer - Map normalized phone specs to five capability scores.

Each feature is scored from an ordered rule table. Rules are checked
top-down and the first match wins; when nothing matches the feature
keeps its baseline. Scores are clamped per feature and never rescaled
against each other.
"""
from typing import Dict, List, NamedTuple, Optional, Tuple

from src.recommend.models import FeatureScores, Phone
from src.recommend.spec_normalizer import extract_battery_capacity, normalize_key


class TierRule(NamedTuple):
    """Substring rule: any keyword present (and brand allowed) -> score."""
    keywords: Tuple[str, ...]
    score: int
    brands: Tuple[str, ...] = ()

    def matches(self, text: str, brand: str = '') -> bool:
        if self.brands and not any(b in brand for b in self.brands):
            return False
        return any(keyword in text for keyword in self.keywords)


class BatteryBucket(NamedTuple):
    min_mah: int
    score: int


# Brands whose 12MP sensors still rank with high-MP flagships
PREMIUM_CAMERA_BRANDS = ('apple',)

CAMERA_RULES: List[TierRule] = [
    TierRule(('200mp',), 95),
    TierRule(('108mp', '100mp'), 92),
    TierRule(('64mp', '50mp'), 85),
    TierRule(('48mp',), 82),
    TierRule(('12mp',), 90, brands=PREMIUM_CAMERA_BRANDS),
]

BATTERY_BUCKETS: List[BatteryBucket] = [
    BatteryBucket(7000, 98),
    BatteryBucket(6500, 95),
    BatteryBucket(6250, 92),
    BatteryBucket(6000, 90),
    BatteryBucket(5750, 88),
    BatteryBucket(5500, 86),
    BatteryBucket(5250, 84),
    BatteryBucket(5000, 82),
    BatteryBucket(4750, 80),
    BatteryBucket(4500, 78),
    BatteryBucket(4250, 76),
    BatteryBucket(4000, 74),
    BatteryBucket(3750, 72),
    BatteryBucket(3500, 71),
]

# Apple A-series first, then Snapdragon 8 and Dimensity generations
PERFORMANCE_RULES: List[TierRule] = [
    TierRule(('a18', 'a17 pro'), 98),
    TierRule(('a17', 'a16'), 95),
    TierRule(('a15',), 92),
    TierRule(('a14',), 88),
    TierRule(('a13',), 85),
    TierRule(('8 gen 3',), 95),
    TierRule(('8 gen 2',), 92),
    TierRule(('8+ gen 1', '8 gen 1'), 88),
    TierRule(('dimensity 9300',), 93),
    TierRule(('dimensity 9200',), 90),
    TierRule(('dimensity 9000',), 88),
    TierRule(('dimensity 8',), 85),
    TierRule(('dimensity 7',), 80),
]

PRIVACY_RULES: List[TierRule] = [
    TierRule(('apple',), 95),
    TierRule(('google',), 88),
    TierRule(('samsung',), 82),
    TierRule(('oneplus',), 75),
]

DESIGN_RULES: List[TierRule] = [
    TierRule(('apple',), 92),
    TierRule(('nothing',), 90),
    TierRule(('samsung',), 85),
    TierRule(('oneplus',), 82),
]

# (price strictly above, boost, cap)
DESIGN_PRICE_BOOSTS: List[Tuple[int, int, int]] = [
    (80000, 5, 95),
    (50000, 3, 90),
]

BASELINES = {
    'camera': 70,
    'battery': 70,
    'performance': 75,
    'privacy': 70,
    'design': 75,
}

SCORE_RANGES = {
    'camera': (70, 98),
    'battery': (70, 95),
    'performance': (70, 98),
    'privacy': (70, 95),
    'design': (70, 95),
}


def first_match(rules: List[TierRule], text: str, default: int, brand: str = '') -> int:
    """Score of the first matching rule, or the default."""
    for rule in rules:
        if rule.matches(text, brand):
            return rule.score
    return default


def clamp(value: int, bounds: Tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


def battery_bucket_score(mah: Optional[int]) -> int:
    """Bucketed battery score for a capacity in mAh (70 when unknown)."""
    if mah is None:
        return BASELINES['battery']
    for bucket in BATTERY_BUCKETS:
        if mah >= bucket.min_mah:
            return bucket.score
    return BASELINES['battery']


def battery_score_from_text(battery_text) -> int:
    """Unclamped bucket score straight from battery text."""
    return battery_bucket_score(extract_battery_capacity(battery_text))


class FeatureScorer:
    """
    Score phones on camera, battery, performance, privacy and design.

    Usage:
        scorer = FeatureScorer()
        scores = scorer.score(phone)
    """

    def score_camera(self, camera_text, brand) -> int:
        raw = first_match(
            CAMERA_RULES, normalize_key(camera_text), BASELINES['camera'],
            brand=normalize_key(brand)
        )
        return clamp(raw, SCORE_RANGES['camera'])

    def score_battery(self, battery_text) -> int:
        return clamp(battery_score_from_text(battery_text), SCORE_RANGES['battery'])

    def score_performance(self, processor_text) -> int:
        raw = first_match(PERFORMANCE_RULES, normalize_key(processor_text), BASELINES['performance'])
        return clamp(raw, SCORE_RANGES['performance'])

    def score_privacy(self, brand) -> int:
        raw = first_match(PRIVACY_RULES, normalize_key(brand), BASELINES['privacy'])
        return clamp(raw, SCORE_RANGES['privacy'])

    def score_design(self, brand, price: Optional[int]) -> int:
        raw = first_match(DESIGN_RULES, normalize_key(brand), BASELINES['design'])
        if price:
            for threshold, boost, cap in DESIGN_PRICE_BOOSTS:
                if price > threshold:
                    raw = min(cap, raw + boost)
                    break
        return clamp(raw, SCORE_RANGES['design'])

    def score_specs(self, specs: Dict) -> FeatureScores:
        """
        Score a raw spec mapping.

        Args:
            specs: Dict with brand, price, camera, battery, processor

        Returns:
            FeatureScores
        """
        brand = specs.get('brand', '')
        return FeatureScores(
            camera=self.score_camera(specs.get('camera', ''), brand),
            battery=self.score_battery(specs.get('battery', '')),
            performance=self.score_performance(specs.get('processor', '')),
            privacy=self.score_privacy(brand),
            design=self.score_design(brand, specs.get('price'))
        )

    def score(self, phone: Phone) -> FeatureScores:
        return self.score_specs({
            'brand': phone.brand,
            'price': phone.price,
            'camera': phone.camera,
            'battery': phone.battery,
            'processor': phone.processor,
        })
