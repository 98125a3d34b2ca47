from fastapi import APIRouter

from aqar.api.v1 import ai, health, inquiries, market, preferences, properties, reviews

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(reviews.router, prefix="/properties", tags=["reviews"])
api_router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
api_router.include_router(inquiries.router, prefix="/inquiries", tags=["inquiries"])
api_router.include_router(market.router, prefix="/market", tags=["market"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
