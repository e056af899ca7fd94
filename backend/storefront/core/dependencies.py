"""FastAPI 依赖注入

1. 路由层使用 Depends(get_service_container) 获取服务
2. 脚本与启动任务使用 get_services()（无 request 上下文）
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db, get_db_context

if TYPE_CHECKING:
    from storefront.services.catalog import CategoryService, ProductService
    from storefront.services.specification import (
        CompatibilityService,
        FilterEngine,
        SpecificationStore,
        TemplateRegistry,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话（用于 FastAPI 路由依赖注入）"""
    async for session in get_db():
        yield session


@dataclass
class ServiceContainer:
    """服务容器，同一请求内的服务共享一个会话

    使用方式：
    ```python
    @router.get("/filters/{category_id}")
    async def filters(services: ServiceContainer = Depends(get_service_container)):
        return await services.filters.get_filters_for_category(category_id)
    ```
    """

    db: AsyncSession

    _templates: "TemplateRegistry | None" = None
    _specifications: "SpecificationStore | None" = None
    _filters: "FilterEngine | None" = None
    _compatibility: "CompatibilityService | None" = None
    _categories: "CategoryService | None" = None
    _products: "ProductService | None" = None

    @property
    def templates(self) -> "TemplateRegistry":
        """模板注册表"""
        if self._templates is None:
            from storefront.services.specification import TemplateRegistry
            self._templates = TemplateRegistry(self.db)
        return self._templates

    @property
    def specifications(self) -> "SpecificationStore":
        """商品规格服务"""
        if self._specifications is None:
            from storefront.services.specification import SpecificationStore
            self._specifications = SpecificationStore(self.db)
        return self._specifications

    @property
    def filters(self) -> "FilterEngine":
        """筛选与对比服务"""
        if self._filters is None:
            from storefront.services.specification import FilterEngine
            self._filters = FilterEngine(self.db)
        return self._filters

    @property
    def compatibility(self) -> "CompatibilityService":
        """装机兼容性服务"""
        if self._compatibility is None:
            from storefront.services.specification import CompatibilityService
            self._compatibility = CompatibilityService(self.db)
        return self._compatibility

    @property
    def categories(self) -> "CategoryService":
        """分类服务"""
        if self._categories is None:
            from storefront.services.catalog import CategoryService
            self._categories = CategoryService(self.db, registry=self.templates)
        return self._categories

    @property
    def products(self) -> "ProductService":
        """商品服务"""
        if self._products is None:
            from storefront.services.catalog import ProductService
            self._products = ProductService(self.db, store=self.specifications)
        return self._products


@asynccontextmanager
async def get_services() -> AsyncGenerator[ServiceContainer, None]:
    """获取服务容器（上下文管理器，退出时自动提交/回滚）"""
    async with get_db_context() as session:
        yield ServiceContainer(db=session)


async def get_service_container(
    db: AsyncSession = Depends(get_db_session),
) -> ServiceContainer:
    """获取服务容器（用于 FastAPI 路由依赖注入）"""
    return ServiceContainer(db=db)
