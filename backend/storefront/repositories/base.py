"""Repository 基类

所有写操作都放在 SAVEPOINT 中执行：失败时只回滚当前单元，
外层请求事务保持可用，服务层可以把异常转换成结果信封。
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """通用 CRUD"""

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id_: Any) -> ModelT | None:
        """根据主键获取"""
        return await self.session.get(self.model, id_)

    async def get_all(self) -> list[ModelT]:
        """获取全部记录"""
        result = await self.session.execute(select(self.model))
        return list(result.scalars().all())

    async def create(self, obj: ModelT) -> ModelT:
        """新增记录"""
        async with self.session.begin_nested():
            self.session.add(obj)
            await self.session.flush()
        return obj

    async def update(self, obj: ModelT, **values: Any) -> ModelT:
        """更新记录字段"""
        async with self.session.begin_nested():
            for key, value in values.items():
                setattr(obj, key, value)
            await self.session.flush()
        return obj

    async def delete(self, obj: ModelT) -> None:
        """删除记录"""
        async with self.session.begin_nested():
            await self.session.delete(obj)
            await self.session.flush()
