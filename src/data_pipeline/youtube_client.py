"""
YouTube Review Client - Search review videos, fetch stats and transcripts.

Search and statistics go through the YouTube Data API (quota-limited:
~100 units per search, 1 unit per videos.list). Transcripts are fetched
without using API quota.
"""
from datetime import datetime
from typing import Dict, List, Optional

import httplib2
import requests
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from youtube_transcript_api import (
    YouTubeTranscriptApi,
    CouldNotRetrieveTranscript,
)

from src import settings


class RateLimitError(Exception):
    """The platform asked us to back off."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class TimeoutSession(requests.Session):
    """requests session with a default per-request timeout."""

    def __init__(self, timeout: float):
        super().__init__()
        self.timeout = timeout

    def request(self, method, url, **kwargs):
        kwargs.setdefault('timeout', self.timeout)
        return super().request(method, url, **kwargs)


def _retry_after(error: HttpError) -> Optional[float]:
    value = error.resp.get('retry-after') if error.resp is not None else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def _raise_for_rate_limit(error: HttpError, what: str) -> None:
    if error.resp is not None and error.resp.status == 429:
        raise RateLimitError(f"Rate limited while {what}", retry_after=_retry_after(error)) from error


class YouTubeReviewClient:
    """
    Client for phone review videos.

    Handles:
    - Review search for a brand + model
    - View/like statistics
    - Transcript text
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None, verbose: bool = False):
        api_key = api_key or settings.YOUTUBE_API_KEY
        if not api_key:
            raise ValueError("YouTube API key not found. Set YOUTUBE_API_KEY in .env")

        self.timeout = timeout or settings.EXTERNAL_TIMEOUT_SECONDS
        self.verbose = verbose
        self.quota_used = 0

        self.youtube = build(
            'youtube', 'v3',
            developerKey=api_key,
            http=httplib2.Http(timeout=self.timeout),
            cache_discovery=False
        )
        self.transcripts = YouTubeTranscriptApi(http_client=TimeoutSession(self.timeout))

    def search_reviews(self, brand: str, model: str, max_results: int = 5) -> List[Dict]:
        """
        Search review videos for a phone.

        Returns:
            List of video dicts (video_id, title, channel_id, channel_name,
            published_at, thumbnail). Not filtered by channel.

        Raises:
            RateLimitError: on HTTP 429
            HttpError: on other API failures
        """
        query = f"{brand} {model} review"
        if self.verbose:
            print(f"[*] Searching YouTube for: \"{query}\"")

        try:
            response = self.youtube.search().list(
                part='snippet',
                q=query,
                type='video',
                maxResults=max_results,
                order='relevance',
                relevanceLanguage='en',
                safeSearch='none',
                videoDuration='medium'
            ).execute()
        except HttpError as e:
            _raise_for_rate_limit(e, f"searching '{query}'")
            raise
        self.quota_used += 100

        videos = []
        for item in response.get('items', []):
            snippet = item['snippet']
            thumbnails = snippet.get('thumbnails', {})
            thumbnail = (thumbnails.get('high') or thumbnails.get('default') or {}).get('url', '')
            videos.append({
                'video_id': item['id']['videoId'],
                'title': snippet.get('title', ''),
                'channel_id': snippet.get('channelId', ''),
                'channel_name': snippet.get('channelTitle', ''),
                'published_at': snippet.get('publishedAt'),
                'thumbnail': thumbnail
            })

        if self.verbose:
            print(f"    [*] Total YouTube results: {len(videos)}")

        return videos

    def get_video_stats(self, video_id: str) -> Dict[str, int]:
        """View and like counts (zeros when the video has none)."""
        try:
            response = self.youtube.videos().list(part='statistics', id=video_id).execute()
        except HttpError as e:
            _raise_for_rate_limit(e, f"fetching stats for {video_id}")
            raise
        self.quota_used += 1

        items = response.get('items', [])
        stats = items[0].get('statistics', {}) if items else {}
        return {
            'view_count': int(stats.get('viewCount', 0)),
            'like_count': int(stats.get('likeCount', 0))
        }

    def get_transcript(self, video_id: str) -> Optional[str]:
        """Transcript text, or None when no transcript is available."""
        try:
            transcript = self.transcripts.fetch(video_id, languages=['en', 'en-IN', 'en-US'])
        except CouldNotRetrieveTranscript as e:
            if self.verbose:
                print(f"    [!] No transcript available for {video_id}: {type(e).__name__}")
            return None

        text = ' '.join(snippet.text for snippet in transcript.snippets).strip()
        if self.verbose and text:
            print(f"    [+] Transcript fetched ({len(text)} characters)")
        return text or None


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    """'2024-01-15T10:00:00Z' -> datetime"""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
