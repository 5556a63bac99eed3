"""HTTP routes."""

from fastapi import APIRouter

from photogallery.api import auth, gallery, health

router = APIRouter()
router.include_router(gallery.router, tags=["gallery"])
router.include_router(auth.router, tags=["auth"])
router.include_router(health.router, tags=["health"])
