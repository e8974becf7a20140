"""
Tests for rule-table feature scoring.
"""
import pytest

from src.recommend.feature_scorer import (
    FeatureScorer,
    BATTERY_BUCKETS,
    SCORE_RANGES,
    battery_bucket_score,
    battery_score_from_text,
)
from src.recommend.models import Phone


@pytest.fixture
def scorer():
    return FeatureScorer()


def test_end_to_end_apple_scores(scorer):
    phone = Phone(
        brand="Apple", model="iPhone X", price=70000,
        camera="48MP", battery="4500mAh", processor="A17 Pro"
    )
    scores = scorer.score(phone)

    assert scores.camera == 82
    assert scores.battery == 78
    assert scores.performance == 98
    assert scores.privacy == 95
    # Apple 92 + 3 for price above 50,000, capped at 90 for that tier
    assert scores.design == 90


@pytest.mark.parametrize("camera,brand,expected", [
    ("200MP + 12MP", "Samsung", 95),
    ("108MP Triple", "Xiaomi", 92),
    ("100MP", "Honor", 92),
    ("50MP + 8MP", "Realme", 85),
    ("64MP", "Poco", 85),
    ("48MP + 12MP", "Apple", 82),
    ("12MP + 12MP", "Apple", 90),
    ("12MP", "Samsung", 70),
    ("", "Apple", 70),
])
def test_camera_tiers(scorer, camera, brand, expected):
    assert scorer.score_camera(camera, brand) == expected


def test_battery_buckets_at_boundaries():
    assert battery_score_from_text("7000 mAh") == 98
    assert battery_score_from_text("6999 mAh") == 95
    assert battery_score_from_text("6500 mAh") == 95
    assert battery_score_from_text("4749 mAh") == 78
    assert battery_score_from_text("3500 mAh") == 71
    assert battery_score_from_text("3499 mAh") == 70
    assert battery_score_from_text("Li-Po") == 70


def test_battery_bucket_is_monotonic():
    previous = battery_bucket_score(0)
    for mah in range(0, 9001, 50):
        current = battery_bucket_score(mah)
        assert current >= previous
        previous = current


def test_battery_thresholds_descend_to_3500():
    thresholds = [b.min_mah for b in BATTERY_BUCKETS]
    assert thresholds == sorted(thresholds, reverse=True)
    assert thresholds[-1] == 3500


def test_device_battery_score_is_clamped(scorer):
    assert scorer.score_battery("7000 mAh") == 95
    assert scorer.score_battery("5000 mAh") == 82
    assert scorer.score_battery("unknown") == 70


@pytest.mark.parametrize("processor,expected", [
    ("Apple A18 Bionic", 98),
    ("A17 Pro", 98),
    ("A16 Bionic", 95),
    ("A15 Bionic", 92),
    ("Snapdragon 8 Gen 3", 95),
    ("Qualcomm Snapdragon 8 Gen 2", 92),
    ("Snapdragon 8+ Gen 1", 88),
    ("Dimensity 9300", 93),
    ("MediaTek Dimensity 8200", 85),
    ("Dimensity 7200", 80),
    ("Helio G99", 75),
    ("", 75),
])
def test_performance_tiers(scorer, processor, expected):
    assert scorer.score_performance(processor) == expected


@pytest.mark.parametrize("brand,expected", [
    ("Apple", 95),
    ("Google", 88),
    ("SAMSUNG", 82),
    ("OnePlus", 75),
    ("Xiaomi", 70),
])
def test_privacy_by_brand(scorer, brand, expected):
    assert scorer.score_privacy(brand) == expected


@pytest.mark.parametrize("brand,price,expected", [
    ("Apple", 100000, 95),
    ("Apple", 40000, 92),
    ("Nothing", 30000, 90),
    ("Samsung", 90000, 90),
    ("OnePlus", 60000, 85),
    ("Vivo", 85000, 80),
    ("Vivo", 20000, 75),
])
def test_design_brand_and_price_boost(scorer, brand, price, expected):
    assert scorer.score_design(brand, price) == expected


@pytest.mark.parametrize("specs", [
    {"brand": "Apple", "price": 150000, "camera": "200MP", "battery": "9000 mAh", "processor": "A18 Pro"},
    {"brand": "", "price": 0, "camera": "", "battery": "", "processor": ""},
    {"brand": "??", "price": None, "camera": "1MP", "battery": "1 mAh", "processor": "unknown"},
])
def test_scores_always_within_ranges(scorer, specs):
    scores = scorer.score_specs(specs).to_dict()
    for feature, value in scores.items():
        low, high = SCORE_RANGES[feature]
        assert low <= value <= high
