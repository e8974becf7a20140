"""
Configuration for the PhonePick recommendation service.

All values come from the environment (or a local .env file).
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv('DATABASE_URL', '')

DB_CONFIG = {
    'host': os.getenv('DB_HOST', 'localhost'),
    'port': os.getenv('DB_PORT', '5432'),
    'database': os.getenv('DB_NAME', 'phonepick'),
    'user': os.getenv('DB_USER', 'postgres'),
    'password': os.getenv('DB_PASSWORD', 'postgres')
}

# External APIs
YOUTUBE_API_KEY = os.getenv('YOUTUBE_API_KEY', '')
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')

# Sentiment backend: 'afinn' (lexicon) or 'gemini'
SENTIMENT_BACKEND = os.getenv('SENTIMENT_BACKEND', 'afinn')

# Throttling between consecutive calls to the video platform
VIDEO_DELAY_SECONDS = float(os.getenv('VIDEO_DELAY_SECONDS', '3.0'))
PHONE_DELAY_SECONDS = float(os.getenv('PHONE_DELAY_SECONDS', '5.0'))
EXTERNAL_TIMEOUT_SECONDS = float(os.getenv('EXTERNAL_TIMEOUT_SECONDS', '30'))
MAX_RETRY_AFTER_SECONDS = float(os.getenv('MAX_RETRY_AFTER_SECONDS', '120'))

# Trusted reviewer channels (English only)
DEFAULT_TRUSTED_CHANNELS = {
    'UCOhHO2ICt0ti9KAh-QHvttQ': 'Mrwhosetheboss',
    'UCBJycsmduvYEL83R_U4JriQ': 'MKBHD',
    'UC7cs6Hdf2JWPV_rRgvg-wSg': 'Trakin Tech',
    'UCf_suVenvfMZ4JYSbmalKNQ': 'Geeky Ranjit',
    'UCYSt6V_ta00dS_g52MliaIg': 'C4ETech',
    'UCDLUxbvomVR-TdBnLXM4p3Q': 'Beebom',
    'UCxvLs6GdK4HLj4JOoGqvsLg': 'TechBar',
    'UCdp6GUwjKscp5ST4M4WgIpw': 'TechWiser',
}


def load_trusted_channels() -> frozenset:
    """Trusted channel ids, from TRUSTED_CHANNEL_IDS if set."""
    override = os.getenv('TRUSTED_CHANNEL_IDS', '')
    if override.strip():
        return frozenset(c.strip() for c in override.split(',') if c.strip())
    return frozenset(DEFAULT_TRUSTED_CHANNELS)


# API
API_KEY = os.getenv('API_KEY', '')
RECOMMENDATION_LIMIT = int(os.getenv('RECOMMENDATION_LIMIT', '5'))
REVIEWS_PER_RECOMMENDATION = int(os.getenv('REVIEWS_PER_RECOMMENDATION', '3'))
