"""API v1 routes."""

from fastapi import APIRouter

from pictura.api.v1 import admin, auth, health, posts

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
