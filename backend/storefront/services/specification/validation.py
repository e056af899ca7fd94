"""规格值校验（纯函数，不访问数据库）"""

from typing import Any, Protocol

from storefront.models.specification import SpecDataType
from storefront.schemas.specification import SpecificationValidationResult
from storefront.services.specification.values import parse_boolean, parse_number


class TemplateLike(Protocol):
    """校验所需的模板字段（ORM 模型与 Schema 均满足）"""

    display_name: str
    data_type: Any
    is_required: bool
    enum_values: list[str] | None


def validate_specification_value(template: TemplateLike, raw: str | None) -> SpecificationValidationResult:
    """按模板校验单个规格值

    Returns:
        is_valid / errors / normalized_value（仅在通过时给出，
        number 为 float、boolean 为 bool，可选项留空为 None）
    """
    value = raw or ""
    label = template.display_name
    try:
        data_type = SpecDataType(template.data_type)
    except ValueError:
        data_type = SpecDataType.TEXT

    if not value.strip():
        if template.is_required:
            return SpecificationValidationResult(is_valid=False, errors=[f"{label} is required"])
        return SpecificationValidationResult(is_valid=True, normalized_value=None)

    normalized: bool | float | str = value
    errors: list[str] = []

    if data_type == SpecDataType.NUMBER:
        number = parse_number(value)
        if number is None:
            errors.append(f"{label} must be a number")
        else:
            normalized = number
    elif data_type == SpecDataType.BOOLEAN:
        flag = parse_boolean(value)
        if flag is None:
            errors.append(f"{label} must be true or false")
        else:
            normalized = flag
    elif data_type == SpecDataType.ENUM:
        if template.enum_values and value not in template.enum_values:
            errors.append(f"{label} must be one of: {', '.join(template.enum_values)}")

    if errors:
        return SpecificationValidationResult(is_valid=False, errors=errors)
    return SpecificationValidationResult(is_valid=True, normalized_value=normalized)
