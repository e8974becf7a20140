"""
Database setup script.
Creates the phones and youtube_reviews tables and their indexes.

Usage:
    python scripts/setup.py
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommend.phone_client import PhoneDatabaseClient


def setup_catalog_schema(client: PhoneDatabaseClient):
    """Create the phones table."""
    print("\n[*] Setting up catalog schema...")

    conn = client._connect()
    cursor = conn.cursor()

    try:
        print("[*] Creating phones table...")
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS phones (
                id SERIAL PRIMARY KEY,
                brand TEXT NOT NULL,
                model TEXT NOT NULL,
                price INTEGER NOT NULL,
                memory_and_storage TEXT,
                display_info TEXT,
                processor TEXT,
                ram TEXT,
                storage TEXT,
                battery TEXT,
                camera TEXT,
                front_camera TEXT,
                image_url TEXT,
                product_url TEXT,
                camera_score INTEGER NOT NULL,
                battery_score INTEGER NOT NULL,
                performance_score INTEGER NOT NULL,
                privacy_score INTEGER NOT NULL,
                design_score INTEGER NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_phones_brand_model UNIQUE (brand, model)
            );
        """)

        print("[*] Creating indexes...")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_phones_price ON phones(price);")

        conn.commit()
        print("[+] Catalog schema created successfully!")

    except Exception as e:
        print(f"[-] Error setting up catalog schema: {e}")
        conn.rollback()
        return False
    finally:
        cursor.close()
        conn.close()

    return True


def setup_review_schema(client: PhoneDatabaseClient):
    """Create the youtube_reviews table."""
    print("\n[*] Setting up review schema...")

    conn = client._connect()
    cursor = conn.cursor()

    try:
        print("[*] Creating youtube_reviews table...")
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS youtube_reviews (
                id SERIAL PRIMARY KEY,
                phone_id INTEGER NOT NULL REFERENCES phones(id) ON DELETE CASCADE,
                video_id VARCHAR(64) NOT NULL,
                channel_id VARCHAR(64),
                channel_name TEXT,
                video_title TEXT,
                video_url TEXT,
                thumbnail_url TEXT,
                view_count BIGINT DEFAULT 0,
                like_count BIGINT DEFAULT 0,
                published_at TIMESTAMP,
                sentiment_score INTEGER NOT NULL DEFAULT 0
                    CHECK (sentiment_score BETWEEN -100 AND 100),
                positive_points TEXT[],
                negative_points TEXT[],
                key_insights TEXT,
                recommendation VARCHAR(50),
                transcript_available BOOLEAN DEFAULT TRUE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT uq_reviews_phone_video UNIQUE (phone_id, video_id)
            );
        """)

        print("[*] Creating review indexes...")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_youtube_reviews_phone_id ON youtube_reviews(phone_id);")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_youtube_reviews_sentiment ON youtube_reviews(sentiment_score);")

        conn.commit()
        print("[+] Review schema created successfully!")

    except Exception as e:
        print(f"[-] Error setting up review schema: {e}")
        conn.rollback()
        return False
    finally:
        cursor.close()
        conn.close()

    return True


def main():
    """Setup complete database schema and indexes."""
    print("="*60)
    print("Database Setup")
    print("="*60)

    client = PhoneDatabaseClient()
    success = True

    if not setup_catalog_schema(client):
        success = False

    if not setup_review_schema(client):
        success = False

    print("\n" + "="*60)
    if success:
        print("[+] Setup completed successfully!")
        print("\nNext steps:")
        print("  1. Run: python cli.py ingest --csv phone_data.csv   # Import phones")
        print("  2. Run: python cli.py sync                          # Sync YouTube reviews")
        print("  3. Run: python cli.py api                           # Start the API")
    else:
        print("[-] Setup completed with errors")
    print("="*60)

    return success


if __name__ == "__main__":
    main()
