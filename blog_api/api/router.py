"""API router aggregator."""

from fastapi import APIRouter

from blog_api.api.endpoints import auth, categories, events, posts, tags, uploads, users, youtube

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(categories.router)
api_router.include_router(tags.router)
api_router.include_router(events.router)
api_router.include_router(uploads.router)
api_router.include_router(youtube.router)

__all__ = ["api_router"]
