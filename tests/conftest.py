"""
Shared fixtures: in-memory stand-ins for the database client.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from src.recommend.models import Phone, Review


def make_phone(
    id=None,
    brand='Samsung',
    model='Galaxy',
    price=60000,
    scores=(80, 80, 80, 80, 80),
    **specs
):
    camera, battery, performance, privacy, design = scores
    return Phone(
        id=id,
        brand=brand,
        model=model,
        price=price,
        camera_score=camera,
        battery_score=battery,
        performance_score=performance,
        privacy_score=privacy,
        design_score=design,
        **specs
    )


def make_review(phone_id=1, video_id='vid1', sentiment=40, negative=None, positive=None, views=1000):
    return Review(
        phone_id=phone_id,
        video_id=video_id,
        channel_id='UCBJycsmduvYEL83R_U4JriQ',
        channel_name='MKBHD',
        title=f"Review {video_id}",
        url=f"https://www.youtube.com/watch?v={video_id}",
        view_count=views,
        sentiment_score=sentiment,
        positive_points=positive or [],
        negative_points=negative or [],
        summary='Balanced review highlighting both pros and cons',
        recommendation='Recommended'
    )


class FakePhoneClient:
    """Dict-backed client with the same keyed-upsert semantics as the database."""

    def __init__(self, phones=None, reviews=None):
        self.phones = {}
        self.reviews = {}
        self.battery_updates = []
        self._next_id = 1
        for phone in phones or []:
            self.upsert_phone(phone)
        for review in reviews or []:
            self.upsert_review(review)

    # Phones
    def upsert_phone(self, phone):
        key = (phone.brand, phone.model)
        if key in self.phones:
            phone.id = self.phones[key].id
        else:
            phone.id = phone.id or self._next_id
            self._next_id = max(self._next_id, phone.id) + 1
        self.phones[key] = phone
        return phone.id

    def _ordered(self):
        return sorted(self.phones.values(), key=lambda p: p.id)

    def get_phones_in_budget(self, budget, tolerance_percent=10):
        return [
            p for p in self._ordered()
            if budget * (100 - tolerance_percent) <= p.price * 100 <= budget * (100 + tolerance_percent)
        ]

    def count_phones_in_budget(self, budget, tolerance_percent=10):
        return len(self.get_phones_in_budget(budget, tolerance_percent))

    def get_phone(self, phone_id):
        for phone in self.phones.values():
            if phone.id == phone_id:
                return phone
        return None

    def list_phones(self, limit=None):
        phones = sorted(self.phones.values(), key=lambda p: (p.brand, p.model))
        return phones[:limit] if limit else phones

    def update_battery_score(self, phone_id, battery_score):
        self.get_phone(phone_id).battery_score = battery_score
        self.battery_updates.append((phone_id, battery_score))
        return phone_id

    def get_phone_count(self):
        return len(self.phones)

    # Reviews
    def upsert_review(self, review):
        key = (review.phone_id, review.video_id)
        existing = self.reviews.get(key)
        if existing is not None:
            existing.sentiment_score = review.sentiment_score
            existing.positive_points = review.positive_points
            existing.negative_points = review.negative_points
            existing.summary = review.summary
            existing.recommendation = review.recommendation
            existing.transcript_available = review.transcript_available
            return existing.id
        review.id = len(self.reviews) + 1
        self.reviews[key] = review
        return review.id

    def get_reviews(self, phone_id, limit=None):
        reviews = [r for r in self.reviews.values() if r.phone_id == phone_id]
        reviews.sort(key=lambda r: (r.sentiment_score, r.view_count), reverse=True)
        return reviews[:limit] if limit else reviews


@pytest.fixture
def fake_client():
    return FakePhoneClient()
