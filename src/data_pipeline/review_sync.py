"""
Review Sync - Pull trusted-channel video reviews for catalog phones.

For each phone: search review videos, keep those from trusted channels,
fetch stats and transcript, analyze sentiment, and upsert the review.
A failure on one video or one phone is reported and skipped; the batch
always continues.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from src import settings
from src.data_pipeline.sentiment_analyzer import SentimentAnalyzer
from src.data_pipeline.youtube_client import RateLimitError, parse_published_at
from src.recommend.models import Phone, Review

VIDEO_URL = 'https://www.youtube.com/watch?v={video_id}'


@dataclass
class SyncStats:
    success: int = 0
    failed: int = 0
    phones: int = 0

    def add(self, other: 'SyncStats') -> None:
        self.success += other.success
        self.failed += other.failed
        self.phones += other.phones


class ReviewSync:
    """
    Sync YouTube reviews into the youtube_reviews table.

    Args:
        youtube_client: search_reviews / get_video_stats / get_transcript provider
        phone_client: list_phones / upsert_review provider
        analyzer: SentimentAnalyzer
        trusted_channels: Channel ids whose videos are accepted
        video_delay: Seconds between consecutive videos
        phone_delay: Seconds between consecutive phones
        sleep: Sleep function (injectable for tests)
    """

    def __init__(
        self,
        youtube_client,
        phone_client,
        analyzer: Optional[SentimentAnalyzer] = None,
        trusted_channels: Optional[Iterable[str]] = None,
        video_delay: Optional[float] = None,
        phone_delay: Optional[float] = None,
        max_retry_after: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        verbose: bool = True
    ):
        self.youtube_client = youtube_client
        self.phone_client = phone_client
        self.analyzer = analyzer or SentimentAnalyzer()
        self.trusted_channels = frozenset(
            settings.load_trusted_channels() if trusted_channels is None else trusted_channels
        )
        self.video_delay = settings.VIDEO_DELAY_SECONDS if video_delay is None else video_delay
        self.phone_delay = settings.PHONE_DELAY_SECONDS if phone_delay is None else phone_delay
        self.max_retry_after = settings.MAX_RETRY_AFTER_SECONDS if max_retry_after is None else max_retry_after
        self.sleep = sleep
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def _back_off(self, error: RateLimitError) -> None:
        wait = error.retry_after if error.retry_after is not None else self.video_delay
        wait = min(wait, self.max_retry_after)
        self._log(f"    [!] Rate limited. Retry after {wait:.0f}s")
        self.sleep(wait)

    def find_trusted_videos(self, phone: Phone) -> list:
        videos = self.youtube_client.search_reviews(phone.brand, phone.model)
        trusted = [v for v in videos if v['channel_id'] in self.trusted_channels]
        self._log(f"    [+] Found {len(trusted)} videos from trusted channels")
        for video in trusted:
            self._log(f"        {video['channel_name']}: \"{video['title']}\"")
        return trusted

    def process_video(self, phone: Phone, video: Dict) -> Optional[int]:
        """
        Analyze and store one video. Returns the review id, or None if skipped.
        """
        video_id = video['video_id']
        self._log(f"\n    [*] Processing: {video['title']}")
        self._log(f"        Channel: {video['channel_name']}")

        stats = self.youtube_client.get_video_stats(video_id)
        transcript = self.youtube_client.get_transcript(video_id)
        analysis = self.analyzer.analyze(transcript)

        if analysis is None:
            self._log("        [!] No transcript available, skipping...")
            return None

        review = Review(
            phone_id=phone.id,
            video_id=video_id,
            channel_id=video['channel_id'],
            channel_name=video['channel_name'],
            title=video['title'],
            url=VIDEO_URL.format(video_id=video_id),
            thumbnail_url=video.get('thumbnail', ''),
            view_count=stats.get('view_count', 0),
            like_count=stats.get('like_count', 0),
            published_at=parse_published_at(video.get('published_at')),
            sentiment_score=analysis['sentiment_score'],
            positive_points=analysis['positive_points'],
            negative_points=analysis['negative_points'],
            summary=analysis['summary'],
            recommendation=analysis['recommendation'],
            transcript_available=True
        )

        review_id = self.phone_client.upsert_review(review)
        self._log(f"        [+] Stored (Sentiment: {review.sentiment_score})")
        return review_id

    def sync_phone(self, phone: Phone) -> SyncStats:
        """Sync reviews for one phone."""
        self._log(f"\n{'=' * 60}\n{phone.name}\n{'=' * 60}")
        stats = SyncStats(phones=1)

        try:
            videos = self.find_trusted_videos(phone)
        except RateLimitError as e:
            self._back_off(e)
            return stats
        except Exception as e:
            self._log(f"[-] YouTube search error: {e}")
            return stats

        if not videos:
            self._log("[!] No videos from trusted channels")
            return stats

        for i, video in enumerate(videos):
            try:
                if self.process_video(phone, video) is not None:
                    stats.success += 1
                else:
                    stats.failed += 1
            except RateLimitError as e:
                stats.failed += 1
                self._back_off(e)
            except Exception as e:
                stats.failed += 1
                self._log(f"        [-] Error: {e}")

            if i < len(videos) - 1:
                self.sleep(self.video_delay)

        self._log(f"\n    [*] {stats.success} success | {stats.failed} failed")
        return stats

    def sync_all(self, limit: Optional[int] = None) -> SyncStats:
        """
        Sync reviews for catalog phones.

        Args:
            limit: Only process the first N phones (brand, model order)
        """
        phones = self.phone_client.list_phones(limit=limit)
        self._log(f"[*] Found {len(phones)} phones to sync")

        total = SyncStats()
        for i, phone in enumerate(phones):
            total.add(self.sync_phone(phone))
            if i < len(phones) - 1:
                self.sleep(self.phone_delay)

        return total
