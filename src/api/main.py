"""
FastAPI application for the phone recommendation service.
"""
from fastapi import FastAPI, HTTPException, Depends, Header, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from src import settings
from src.recommend.models import Phone, Review
from src.recommend.phone_client import PhoneDatabaseClient
from src.recommend.ranker import RankedResult
from src.recommend.recommender import PhoneRecommender
from src.recommend.spec_normalizer import format_price

# Initialize FastAPI app
app = FastAPI(
    title="PhonePick API",
    description="Smartphone recommendations from weighted feature priorities and reviewer sentiment",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Lazily initialized
phone_client = None


def verify_api_key(authorization: Optional[str] = Header(None)):
    """Verify API key in Authorization header."""
    if not settings.API_KEY:
        return True
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid Authorization format. Use: Bearer <API_KEY>")
    provided_key = authorization.replace("Bearer ", "").strip()
    if provided_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return True


def get_phone_client():
    """Get or initialize the phone database client."""
    global phone_client
    if phone_client is None:
        phone_client = PhoneDatabaseClient()
    return phone_client


# Request/Response Models
class RecommendationRequest(BaseModel):
    """Budget and feature priorities, most important first."""
    budget: int = Field(..., gt=0, description="Target price in rupees")
    priorities: List[str] = Field(..., description="All five features: camera, battery, performance, privacy, design")

    class Config:
        json_schema_extra = {
            "example": {
                "budget": 60000,
                "priorities": ["camera", "battery", "performance", "privacy", "design"]
            }
        }


class ReviewSummary(BaseModel):
    channel: str
    title: str
    url: str
    thumbnail: Optional[str] = None
    views: int = 0
    sentiment: int
    recommendation: str
    positive: List[str]
    negative: List[str]
    insights: str


class PhoneDetail(BaseModel):
    id: Optional[int]
    brand: str
    model: str
    price: str
    price_raw: int
    image_url: str
    display: str
    processor: str
    ram: str
    storage: str
    battery: str
    camera: str
    camera_score: Optional[int]
    battery_score: Optional[int]
    performance_score: Optional[int]
    privacy_score: Optional[int]
    design_score: Optional[int]
    review_count: int
    avg_review_score: int


class PhoneRecommendation(PhoneDetail):
    """Single phone recommendation."""
    rank: int
    match_score: int
    match_percentage: int
    why_picked: str
    what_to_know: str
    reviews: List[ReviewSummary]


class RecommendationResponse(BaseModel):
    """Response containing phone recommendations."""
    budget: int
    budget_range: str
    priorities: List[str]
    total_found: int
    message: Optional[str] = None
    recommendations: List[PhoneRecommendation]


def _review_summary(review: Review) -> ReviewSummary:
    return ReviewSummary(
        channel=review.channel_name,
        title=review.title,
        url=review.url,
        thumbnail=review.thumbnail_url or None,
        views=review.view_count,
        sentiment=review.sentiment_score,
        recommendation=review.recommendation,
        positive=review.positive_points,
        negative=review.negative_points,
        insights=review.summary
    )


def _phone_fields(phone: Phone) -> dict:
    return {
        'id': phone.id,
        'brand': phone.brand,
        'model': phone.model,
        'price': format_price(phone.price),
        'price_raw': phone.price,
        'image_url': phone.image_url,
        'display': phone.display,
        'processor': phone.processor,
        'ram': phone.ram,
        'storage': phone.storage,
        'battery': phone.battery,
        'camera': phone.camera,
        'camera_score': phone.camera_score,
        'battery_score': phone.battery_score,
        'performance_score': phone.performance_score,
        'privacy_score': phone.privacy_score,
        'design_score': phone.design_score,
        'review_count': phone.review_count,
        'avg_review_score': round(phone.avg_review_score)
    }


def _recommendation(ranked: RankedResult) -> PhoneRecommendation:
    return PhoneRecommendation(
        **_phone_fields(ranked.phone),
        rank=ranked.rank,
        match_score=ranked.match_score,
        match_percentage=ranked.match_percentage,
        why_picked=ranked.why_picked,
        what_to_know=ranked.what_to_know,
        reviews=[_review_summary(r) for r in ranked.reviews]
    )


def _recommend(client, budget: int, priorities: List[str]) -> RecommendationResponse:
    recommender = PhoneRecommender(
        client,
        top_k=settings.RECOMMENDATION_LIMIT,
        reviews_per_phone=settings.REVIEWS_PER_RECOMMENDATION
    )
    try:
        result = recommender.recommend(budget, priorities)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating recommendations: {str(e)}")

    return RecommendationResponse(
        budget=result.budget,
        budget_range=result.budget_range,
        priorities=result.priorities,
        total_found=result.total_found,
        message=result.message,
        recommendations=[_recommendation(r) for r in result.recommendations]
    )


# API Endpoints (catalog and recommend routes are also mounted under /api for the web client)
@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "PhonePick API",
        "status": "healthy",
        "version": "1.0.0",
        "endpoints": {
            "recommendations": "GET /api/recommendations?budget=60000&priorities=camera,battery,performance,privacy,design",
            "recommend": "POST /recommend",
            "phones": "GET /phones",
            "count": "GET /phones/count?budget=60000",
            "phone": "GET /phones/{id}",
            "reviews": "GET /phones/{id}/reviews"
        }
    }


@app.get("/health")
async def health_check(client=Depends(get_phone_client)):
    """Detailed health check."""
    try:
        count = client.get_phone_count()
        return {"status": "healthy", "database": "ready", "phones": count}
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Service unhealthy: {str(e)}")


@app.post("/recommend", response_model=RecommendationResponse)
@app.post("/api/recommend", response_model=RecommendationResponse)
def post_recommendations(
    request: RecommendationRequest,
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """
    Get phone recommendations for a budget and priority order.

    Requires API key authentication if API_KEY is set in environment.
    """
    return _recommend(client, request.budget, request.priorities)


@app.get("/api/recommendations", response_model=RecommendationResponse)
def get_recommendations(
    budget: Optional[int] = Query(None),
    priorities: Optional[str] = Query(None, description="Comma-separated, most important first"),
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """
    Get phone recommendations via query string.

    Example: /api/recommendations?budget=60000&priorities=camera,battery,performance,privacy,design
    """
    if not budget or not priorities:
        raise HTTPException(status_code=400, detail="Missing required parameters: budget and priorities")
    return _recommend(client, budget, priorities.split(','))


@app.get("/phones", response_model=List[PhoneDetail])
@app.get("/api/phones", response_model=List[PhoneDetail])
def list_phones(
    limit: Optional[int] = Query(None, gt=0),
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """All catalog phones ordered by brand and model."""
    try:
        phones = client.list_phones(limit=limit)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error listing phones: {str(e)}")
    return [PhoneDetail(**_phone_fields(p)) for p in phones]


@app.get("/phones/count")
@app.get("/api/phones/count")
def count_phones(
    budget: Optional[int] = Query(None, gt=0, description="Count only phones within ±10% of this budget"),
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """
    Phone count, optionally restricted to a budget window.

    Example: /phones/count?budget=60000 -> {"count": 12, "budget": 60000}
    """
    try:
        if budget is None:
            return {"count": client.get_phone_count()}
        return {"count": client.count_phones_in_budget(budget), "budget": budget}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error counting phones: {str(e)}")


@app.get("/phones/{phone_id}", response_model=PhoneDetail)
@app.get("/api/phones/{phone_id}", response_model=PhoneDetail)

def get_phone(
    phone_id: int,
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """Single phone with scores and review aggregates."""
    try:
        phone = client.get_phone(phone_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching phone: {str(e)}")
    if phone is None:
        raise HTTPException(status_code=404, detail="Phone not found")
    return PhoneDetail(**_phone_fields(phone))


@app.get("/phones/{phone_id}/reviews")
@app.get("/api/phones/{phone_id}/reviews")
def get_phone_reviews(
    phone_id: int,
    client=Depends(get_phone_client),
    authenticated: bool = Depends(verify_api_key)
):
    """All reviews for a phone, highest sentiment first."""
    try:
        reviews = client.get_reviews(phone_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching reviews: {str(e)}")
    return {"reviews": [_review_summary(r).model_dump() for r in reviews]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
