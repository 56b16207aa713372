"""API route registration."""

from fastapi import APIRouter

from weblist.api.routes import archive, auth, browse, download, health, listing, upload

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(listing.router, tags=["files"])

web_router = APIRouter()

web_router.include_router(auth.router, tags=["auth"])
web_router.include_router(browse.router, tags=["browse"])
web_router.include_router(archive.router, tags=["files"])
web_router.include_router(upload.router, tags=["files"])
# catch-all, must stay last
web_router.include_router(download.router, tags=["files"])
