"""Aggregate all REST sub-routers into `api_router` for fast import."""

from fastapi import APIRouter

from .acls import router as acls_router
from .topics import router as topics_router

api_router = APIRouter()
api_router.include_router(topics_router, prefix="/topics", tags=["topics"])
api_router.include_router(acls_router, prefix="/acls", tags=["acls"])
