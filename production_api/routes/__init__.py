"""
HTTP routes for the site API.
"""

from fastapi import APIRouter

from production_api.routes import admin, box, email, media, partners, projects, stats

router = APIRouter()
router.include_router(projects.router)
router.include_router(partners.router)
router.include_router(stats.router)
router.include_router(box.router)
router.include_router(admin.router)
router.include_router(email.router)
router.include_router(media.image_router)
router.include_router(media.video_router)
