"""API routes."""

from fastapi import APIRouter

from coursehub.api.routes import discussions

api_router = APIRouter()

# Protected routes (auth required)
api_router.include_router(discussions.router, prefix="/discussions", tags=["discussions"])
