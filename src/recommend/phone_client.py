"""
Phone Database Client - Read/write access to the phone catalog and reviews.

Provides access to:
- Phones with raw specs and the five feature scores
- YouTube reviews with sentiment and insight phrases

Writes are keyed upserts (brand+model for phones, phone+video for
reviews), so re-running an ingestion or sync is safe.
"""
from typing import Optional, Dict, List, Any, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

from src import settings
from src.recommend.models import Phone, Review

PHONE_COLUMNS = """
    p.id, p.brand, p.model, p.price, p.memory_and_storage, p.display_info,
    p.processor, p.ram, p.storage, p.battery, p.camera, p.front_camera,
    p.image_url, p.product_url,
    p.camera_score, p.battery_score, p.performance_score,
    p.privacy_score, p.design_score
"""


class PhoneDatabaseClient:
    """
    Client for the phones and youtube_reviews tables.

    Opens a short-lived connection per call; instances hold no
    connection state and can be shared across requests.
    """

    def __init__(self, db_config: Optional[Dict] = None, dsn: Optional[str] = None):
        self.db_config = db_config or settings.DB_CONFIG
        self.dsn = dsn if dsn is not None else settings.DATABASE_URL

    def _connect(self):
        if self.dsn:
            return psycopg2.connect(self.dsn)
        return psycopg2.connect(**self.db_config)

    def _fetch_all(self, query: str, params: Sequence = ()) -> List[Dict[str, Any]]:
        conn = self._connect()
        try:
            cursor = conn.cursor(cursor_factory=RealDictCursor)
            cursor.execute(query, params)
            rows = cursor.fetchall()
            cursor.close()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    def _execute_returning(self, query: str, params: Sequence) -> Optional[Any]:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            row = cursor.fetchone()
            conn.commit()
            cursor.close()
            return row[0] if row else None
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Phones
    # ------------------------------------------------------------------

    def get_phones_in_budget(self, budget: int, tolerance_percent: int = 10) -> List[Phone]:
        """
        Fetch phones priced within ±tolerance of the budget, with review aggregates.

        Args:
            budget: Target price in rupees
            tolerance_percent: Window half-width in percent

        Returns:
            Phones ordered by id
        """
        rows = self._fetch_all(f"""
            SELECT
                {PHONE_COLUMNS},
                COALESCE(AVG(yr.sentiment_score), 0) AS avg_review_score,
                COUNT(yr.id) AS review_count
            FROM phones p
            LEFT JOIN youtube_reviews yr ON p.id = yr.phone_id
            WHERE p.price * 100 >= %s AND p.price * 100 <= %s
            GROUP BY p.id
            ORDER BY p.id;
        """, (budget * (100 - tolerance_percent), budget * (100 + tolerance_percent)))
        return [Phone.from_row(r) for r in rows]

    def count_phones_in_budget(self, budget: int, tolerance_percent: int = 10) -> int:
        """Number of phones inside the same window as get_phones_in_budget."""
        rows = self._fetch_all("""
            SELECT COUNT(*) AS count
            FROM phones
            WHERE price * 100 >= %s AND price * 100 <= %s;
        """, (budget * (100 - tolerance_percent), budget * (100 + tolerance_percent)))
        return int(rows[0]['count']) if rows else 0

    def get_phone(self, phone_id: int) -> Optional[Phone]:
        """Fetch one phone with its review aggregates, or None."""
        rows = self._fetch_all(f"""
            SELECT
                {PHONE_COLUMNS},
                COALESCE(AVG(yr.sentiment_score), 0) AS avg_review_score,
                COUNT(yr.id) AS review_count
            FROM phones p
            LEFT JOIN youtube_reviews yr ON p.id = yr.phone_id
            WHERE p.id = %s
            GROUP BY p.id;
        """, (phone_id,))
        return Phone.from_row(rows[0]) if rows else None

    def list_phones(self, limit: Optional[int] = None) -> List[Phone]:
        """All phones ordered by brand and model."""
        query = f"SELECT {PHONE_COLUMNS} FROM phones p ORDER BY p.brand, p.model"
        params: tuple = ()
        if limit:
            query += " LIMIT %s"
            params = (limit,)
        return [Phone.from_row(r) for r in self._fetch_all(query + ';', params)]

    def upsert_phone(self, phone: Phone) -> Optional[int]:
        """Insert or update a phone keyed by (brand, model). Returns its id."""
        return self._execute_returning("""
            INSERT INTO phones (
                brand, model, price, memory_and_storage, display_info,
                processor, ram, storage, battery, camera, front_camera,
                image_url, product_url,
                camera_score, battery_score, performance_score,
                privacy_score, design_score
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (brand, model) DO UPDATE SET
                price = EXCLUDED.price,
                memory_and_storage = EXCLUDED.memory_and_storage,
                display_info = EXCLUDED.display_info,
                processor = EXCLUDED.processor,
                ram = EXCLUDED.ram,
                storage = EXCLUDED.storage,
                battery = EXCLUDED.battery,
                camera = EXCLUDED.camera,
                front_camera = EXCLUDED.front_camera,
                image_url = EXCLUDED.image_url,
                product_url = EXCLUDED.product_url,
                camera_score = EXCLUDED.camera_score,
                battery_score = EXCLUDED.battery_score,
                performance_score = EXCLUDED.performance_score,
                privacy_score = EXCLUDED.privacy_score,
                design_score = EXCLUDED.design_score,
                updated_at = CURRENT_TIMESTAMP
            RETURNING id;
        """, (
            phone.brand, phone.model, phone.price, phone.memory_and_storage,
            phone.display, phone.processor, phone.ram, phone.storage,
            phone.battery, phone.camera, phone.front_camera,
            phone.image_url, phone.product_url,
            phone.camera_score, phone.battery_score, phone.performance_score,
            phone.privacy_score, phone.design_score
        ))

    def update_battery_score(self, phone_id: int, battery_score: int) -> Optional[int]:
        """Overwrite only the battery score of one phone."""
        return self._execute_returning("""
            UPDATE phones
            SET battery_score = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
            RETURNING id;
        """, (battery_score, phone_id))

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def get_reviews(self, phone_id: int, limit: Optional[int] = None) -> List[Review]:
        """
        Reviews for a phone, highest sentiment first.

        Args:
            phone_id: Phone id
            limit: Optional cap on the number of reviews
        """
        query = """
            SELECT *
            FROM youtube_reviews
            WHERE phone_id = %s
            ORDER BY sentiment_score DESC, view_count DESC
        """
        params: tuple = (phone_id,)
        if limit:
            query += " LIMIT %s"
            params = (phone_id, limit)
        return [Review.from_row(r) for r in self._fetch_all(query + ';', params)]

    def upsert_review(self, review: Review) -> Optional[int]:
        """
        Insert or update a review keyed by (phone_id, video_id).

        On conflict only the sentiment and insight fields are refreshed.
        """
        return self._execute_returning("""
            INSERT INTO youtube_reviews (
                phone_id, video_id, channel_name, channel_id, video_title, video_url,
                thumbnail_url, view_count, like_count, published_at,
                sentiment_score, positive_points, negative_points, key_insights,
                recommendation, transcript_available
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (phone_id, video_id) DO UPDATE SET
                sentiment_score = EXCLUDED.sentiment_score,
                positive_points = EXCLUDED.positive_points,
                negative_points = EXCLUDED.negative_points,
                key_insights = EXCLUDED.key_insights,
                recommendation = EXCLUDED.recommendation,
                transcript_available = EXCLUDED.transcript_available,
                last_updated = CURRENT_TIMESTAMP
            RETURNING id;
        """, (
            review.phone_id, review.video_id, review.channel_name, review.channel_id,
            review.title, review.url, review.thumbnail_url,
            review.view_count, review.like_count, review.published_at,
            review.sentiment_score, list(review.positive_points),
            list(review.negative_points), review.summary,
            review.recommendation, review.transcript_available
        ))

    def get_phone_count(self) -> int:
        rows = self._fetch_all("SELECT COUNT(*) AS count FROM phones;")
        return int(rows[0]['count']) if rows else 0
