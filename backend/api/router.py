"""Main API router

Combines the API routers under the /api prefix.
"""
from fastapi import APIRouter

from backend.api.v1 import generate

api_router = APIRouter(prefix="/api")
api_router.include_router(generate.router, tags=["Generation"])
