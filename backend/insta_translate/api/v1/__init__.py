"""API v1 路由。"""

from fastapi import APIRouter

from insta_translate.api.v1 import history, translate, user_settings

router = APIRouter(prefix="/api/v1", tags=["v1"])
router.include_router(translate.router, prefix="", tags=["translate"])
router.include_router(history.router, prefix="", tags=["history"])
router.include_router(user_settings.router, prefix="", tags=["settings"])
