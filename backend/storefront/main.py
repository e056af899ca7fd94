"""FastAPI 应用入口"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__
from storefront.core.config import settings
from storefront.core.database import init_db
from storefront.core.db import close_database_provider
from storefront.core.dependencies import get_services
from storefront.core.errors import AppError, app_error_handler
from storefront.core.logging import logger
from storefront.routers import categories, compatibility, filters, health, products, specifications, templates


async def _auto_init_templates() -> None:
    """启动时为所有分类补齐预设模板"""
    async with get_services() as services:
        result = await services.templates.initialize_all_category_templates()
    logger.info(
        "启动时初始化规格模板",
        module="app",
        success=result.success,
        processed=result.processed_categories,
        applied=result.applied_templates,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    # 启动时配置日志（确保最先执行）
    logger.configure()
    logger.info("应用启动中", module="app", version=__version__, database=settings.DATABASE_BACKEND)

    await init_db()

    if settings.SPEC_TEMPLATES_AUTO_INIT:
        await _auto_init_templates()

    logger.info("应用启动完成", module="app")
    yield

    await close_database_provider()
    logger.info("应用已关闭", module="app")


app = FastAPI(
    title="商城规格与筛选服务",
    description="分类规格模板、商品规格存储、规格筛选与对比",
    version=__version__,
    lifespan=lifespan,
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)

# 注册路由
app.include_router(health.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(templates.router)
app.include_router(specifications.router)
app.include_router(filters.router)
app.include_router(compatibility.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
    )
