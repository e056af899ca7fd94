"""配件兼容性 Schema"""

from enum import Enum

from pydantic import BaseModel, Field


class ComponentRole(str, Enum):
    """装机配件角色"""

    CPU = "cpu"
    MOTHERBOARD = "motherboard"
    RAM = "ram"
    GPU = "gpu"
    PSU = "psu"
    CASE = "case"


class CompatibilitySeverity(str, Enum):
    """冲突级别：error 不可组合，warn 仅提示"""

    ERROR = "error"
    WARN = "warn"


class CompatibilityReason(BaseModel):
    """单条兼容性冲突"""

    code: str
    message: str
    severity: CompatibilitySeverity


class CompatibilityCheck(BaseModel):
    """候选配件与当前配置的兼容性结果"""

    ok: bool = True
    reasons: list[CompatibilityReason] = Field(default_factory=list)


class CompatibilityCheckRequest(BaseModel):
    """兼容性检查请求

    build 为当前配置：角色 -> 已选商品 ID。
    """

    build: dict[ComponentRole, str] = Field(default_factory=dict)
    candidate_id: str = Field(..., min_length=1)


class CompatibleProductsRequest(BaseModel):
    """按当前配置筛选分类商品请求"""

    build: dict[ComponentRole, str] = Field(default_factory=dict)
