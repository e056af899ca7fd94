"""健康检查 API"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront import __version__
from storefront.core.db import get_database_provider
from storefront.core.dependencies import get_db_session
from storefront.core.logging import get_logger

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger("api.health")


@router.get("")
async def health_check():
    """基础健康检查"""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db_session)):
    """就绪检查（数据库可用）"""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("数据库不可用", error=str(e))
        return {"ready": False, "reason": "database_unavailable"}
    return {"ready": True, "database": get_database_provider().backend_name}
