"""FastAPI 应用入口。"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from insta_translate.api.deps import Container, build_container
from insta_translate.api.v1 import router as api_v1_router
from insta_translate.config import settings


def _setup_loguru() -> None:
    """配置 Loguru 日志。"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level.upper(),
    )


def create_app(container: Container | None = None) -> FastAPI:
    """创建应用；未传入 container 时在启动阶段按配置构建并在关闭时释放。"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期：配置日志，初始化数据库与外部客户端。"""
        _setup_loguru()
        owned = container is None
        if owned:
            app.state.container = build_container(settings)
        logger.info("insta-translate backend started")
        yield
        if owned:
            await app.state.container.aclose()
        logger.info("insta-translate backend shutdown")

    app = FastAPI(
        title="insta-translate",
        description="语音翻译 API：转写、翻译、润色并去重保存",
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_v1_router)

    @app.get("/health")
    def health() -> dict:
        """健康检查。"""
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    """启动 uvicorn。"""
    _setup_loguru()
    import uvicorn

    uvicorn.run(
        "insta_translate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
