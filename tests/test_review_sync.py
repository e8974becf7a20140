"""
Tests for trusted-channel review sync.
"""
import pytest
import requests

from src.data_pipeline.review_sync import ReviewSync, SyncStats
from src.data_pipeline.sentiment_analyzer import SentimentAnalyzer
from src.data_pipeline.youtube_client import RateLimitError, parse_published_at
from tests.conftest import FakePhoneClient, make_phone

TRUSTED = 'UCBJycsmduvYEL83R_U4JriQ'
UNTRUSTED = 'UCrandomchannel000000000'


class FixedPolarity:
    def __init__(self, value=8):
        self.value = value

    def polarity(self, text):
        return self.value


def video(video_id, channel_id=TRUSTED, channel_name='MKBHD'):
    return {
        'video_id': video_id,
        'title': f"Review {video_id}",
        'channel_id': channel_id,
        'channel_name': channel_name,
        'published_at': '2024-01-15T10:00:00Z',
        'thumbnail': f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
    }


class FakeYouTube:
    """Scripted search results, transcripts and failures."""

    def __init__(self, videos=None, transcripts=None, errors=None, search_error=None, transcript_errors=None):
        self.videos = videos or {}
        self.transcripts = transcripts or {}
        self.errors = errors or {}
        self.search_error = search_error
        self.transcript_errors = transcript_errors or {}
        self.searches = []

    def search_reviews(self, brand, model, max_results=5):
        self.searches.append(f"{brand} {model}")
        if self.search_error:
            raise self.search_error
        return self.videos.get(model, [])

    def get_video_stats(self, video_id):
        if video_id in self.errors:
            raise self.errors[video_id]
        return {'view_count': 1000, 'like_count': 50}

    def get_transcript(self, video_id):
        if video_id in self.transcript_errors:
            raise self.transcript_errors[video_id]
        return self.transcripts.get(video_id)


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def make_sync(youtube, client, sleep, **kwargs):
    return ReviewSync(
        youtube,
        client,
        analyzer=SentimentAnalyzer(FixedPolarity()),
        trusted_channels={TRUSTED},
        video_delay=3,
        phone_delay=5,
        max_retry_after=120,
        sleep=sleep,
        verbose=False,
        **kwargs
    )


@pytest.fixture
def phone_client():
    return FakePhoneClient([make_phone(id=1, brand='Google', model='Pixel 8')])


def test_only_trusted_channels_are_processed(phone_client):
    youtube = FakeYouTube(
        videos={'Pixel 8': [video('a'), video('b', UNTRUSTED, 'Random Reviews')]},
        transcripts={'a': 'Great camera and good battery', 'b': 'Great camera'},
    )
    sleep = SleepRecorder()

    stats = make_sync(youtube, phone_client, sleep).sync_phone(phone_client.get_phone(1))

    assert stats.success == 1
    assert list(phone_client.reviews) == [(1, 'a')]
    assert sleep.calls == []


def test_stored_review_fields(phone_client):
    youtube = FakeYouTube(
        videos={'Pixel 8': [video('a')]},
        transcripts={'a': 'Great camera, but battery drain is bad.'},
    )

    make_sync(youtube, phone_client, SleepRecorder()).sync_phone(phone_client.get_phone(1))

    review = phone_client.reviews[(1, 'a')]
    assert review.url == 'https://www.youtube.com/watch?v=a'
    assert review.view_count == 1000
    assert review.like_count == 50
    assert review.sentiment_score == 40
    assert review.recommendation == 'Recommended'
    assert review.positive_points == ['Great camera quality']
    assert review.negative_points == ['Battery life concerns']
    assert review.published_at.year == 2024


def test_missing_transcript_counts_as_failed_and_batch_continues(phone_client):
    youtube = FakeYouTube(
        videos={'Pixel 8': [video('a'), video('b'), video('c')]},
        transcripts={'c': 'Solid build and great display'},
        errors={'b': RuntimeError('stats unavailable')},
    )
    sleep = SleepRecorder()

    stats = make_sync(youtube, phone_client, sleep).sync_phone(phone_client.get_phone(1))

    assert (stats.success, stats.failed) == (1, 2)
    assert list(phone_client.reviews) == [(1, 'c')]
    # Delay between consecutive videos only
    assert sleep.calls == [3, 3]


def test_rate_limit_backs_off_with_cap(phone_client):
    youtube = FakeYouTube(
        videos={'Pixel 8': [video('a'), video('b')]},
        transcripts={'b': 'Great camera'},
        errors={'a': RateLimitError('slow down', retry_after=600)},
    )
    sleep = SleepRecorder()

    stats = make_sync(youtube, phone_client, sleep).sync_phone(phone_client.get_phone(1))

    assert (stats.success, stats.failed) == (1, 1)
    assert sleep.calls == [120, 3]


def test_rate_limited_search_waits_retry_after(phone_client):
    youtube = FakeYouTube(search_error=RateLimitError('quota', retry_after=30))
    sleep = SleepRecorder()

    stats = make_sync(youtube, phone_client, sleep).sync_phone(phone_client.get_phone(1))

    assert stats == SyncStats(success=0, failed=0, phones=1)
    assert sleep.calls == [30]


def test_search_error_skips_phone(phone_client):
    youtube = FakeYouTube(search_error=RuntimeError('network down'))
    stats = make_sync(youtube, phone_client, SleepRecorder()).sync_phone(phone_client.get_phone(1))
    assert stats.success == 0
    assert phone_client.reviews == {}


def test_sync_all_respects_limit_and_phone_delay():
    client = FakePhoneClient([
        make_phone(id=1, brand='Apple', model='iPhone 15'),
        make_phone(id=2, brand='Google', model='Pixel 8'),
        make_phone(id=3, brand='Samsung', model='Galaxy S24'),
    ])
    youtube = FakeYouTube(
        videos={'iPhone 15': [video('x')], 'Pixel 8': [video('y')]},
        transcripts={'x': 'Great camera', 'y': 'Good battery'},
    )
    sleep = SleepRecorder()

    total = make_sync(youtube, client, sleep).sync_all(limit=2)

    assert youtube.searches == ['Apple iPhone 15', 'Google Pixel 8']
    assert (total.phones, total.success, total.failed) == (2, 2, 0)
    assert sleep.calls == [5]


def test_resync_updates_existing_review(phone_client):
    youtube = FakeYouTube(videos={'Pixel 8': [video('a')]}, transcripts={'a': 'Great camera'})
    sync = make_sync(youtube, phone_client, SleepRecorder())

    sync.sync_phone(phone_client.get_phone(1))
    phone_client.reviews[(1, 'a')].transcript_available = False
    sync.analyzer = SentimentAnalyzer(FixedPolarity(-12))
    sync.sync_phone(phone_client.get_phone(1))

    assert len(phone_client.reviews) == 1
    stored = phone_client.reviews[(1, 'a')]
    assert stored.sentiment_score == -60
    assert stored.recommendation == 'Strongly Not Recommended'
    assert stored.transcript_available is True


def test_transcript_timeout_counts_as_failed_and_batch_continues(phone_client):
    youtube = FakeYouTube(
        videos={'Pixel 8': [video('slow'), video('ok')]},
        transcripts={'ok': 'Great camera'},
        transcript_errors={'slow': requests.exceptions.Timeout('read timed out')},
    )
    sleep = SleepRecorder()

    stats = make_sync(youtube, phone_client, sleep).sync_phone(phone_client.get_phone(1))

    assert (stats.success, stats.failed) == (1, 1)
    assert list(phone_client.reviews) == [(1, 'ok')]
    assert sleep.calls == [3]


def test_parse_published_at():
    assert parse_published_at('2024-01-15T10:00:00Z').month == 1
    assert parse_published_at(None) is None
    assert parse_published_at('not a date') is None
