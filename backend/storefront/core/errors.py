"""统一错误处理

提供标准化的错误响应结构和自定义异常类。
服务层不抛出存储异常（统一返回结果信封），这里的异常仅用于请求级错误。
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorPayload(BaseModel):
    """标准错误响应结构"""

    code: str
    message: str
    data: dict[str, Any] | None = None
    timestamp: str


class AppError(HTTPException):
    """应用自定义异常

    使用示例:
        raise AppError(
            code="category_not_found",
            message="Category not found",
            status_code=404,
            data={"category_id": category_id}
        )
    """

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        data: dict[str, Any] | None = None,
    ):
        self.code = code
        self.error_message = message
        self.data = data
        super().__init__(status_code=status_code, detail=message)


def create_error_response(
    code: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """创建标准错误响应"""
    payload = ErrorPayload(
        code=code,
        message=message,
        data=data,
        timestamp=datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
    )
    return {"error": payload.model_dump()}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """AppError -> 标准错误响应"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.code, exc.error_message, exc.data),
    )


def raise_not_found(resource: str, resource_id: str | None = None) -> None:
    """抛出资源不存在错误"""
    raise AppError(
        code=f"{resource}_not_found",
        message=f"{resource.capitalize()} not found",
        status_code=status.HTTP_404_NOT_FOUND,
        data={"resource": resource, "id": resource_id} if resource_id else {"resource": resource},
    )


def raise_bad_request(code: str, message: str, data: dict[str, Any] | None = None) -> None:
    """抛出请求参数错误"""
    raise AppError(
        code=code,
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        data=data,
    )


def raise_conflict(code: str, message: str, data: dict[str, Any] | None = None) -> None:
    """抛出资源冲突错误"""
    raise AppError(
        code=code,
        message=message,
        status_code=status.HTTP_409_CONFLICT,
        data=data,
    )
