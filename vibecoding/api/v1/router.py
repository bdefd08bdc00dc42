from fastapi import APIRouter
from vibecoding.api.v1.endpoints import chat, vibecoding

api_router = APIRouter()


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "vibecoding-backend"}


api_router.include_router(vibecoding.router)
api_router.include_router(chat.router)
