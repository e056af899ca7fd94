"""装机配件兼容性

根据已选配件的规格判断候选配件能否组合：
- CPU 与主板插槽一致
- 主板与内存类型一致
- 机箱支持主板板型
- 电源功率不低于显卡功耗的 1.5 倍（仅提示）

规格缺失时不判定冲突。分类通过 slug 对应到配件角色。
"""

import math
import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.logging import get_logger
from storefront.models.product import Product
from storefront.repositories.category import CategoryRepository
from storefront.repositories.product import ProductRepository
from storefront.schemas.compatibility import (
    CompatibilityCheck,
    CompatibilityReason,
    CompatibilitySeverity,
    ComponentRole,
)
from storefront.schemas.specification import ServiceResult
from storefront.services.specification.values import parse_number

logger = get_logger("specification.compatibility")

Specs = dict[str, str]
Build = dict[ComponentRole, Specs]

CATEGORY_ROLES: dict[str, ComponentRole] = {
    "processors": ComponentRole.CPU,
    "motherboards": ComponentRole.MOTHERBOARD,
    "memory": ComponentRole.RAM,
    "graphics-cards": ComponentRole.GPU,
    "power-supplies": ComponentRole.PSU,
    "cases": ComponentRole.CASE,
}

# 同一含义的规格可能使用不同键名，按顺序取第一个非空值
_BOARD_MEMORY_KEYS = ("memory_type", "ram_type")
_RAM_TYPE_KEYS = ("memory_type", "type")
_CASE_SUPPORT_KEYS = ("motherboard_support", "supported_mobo_form_factors")
_GPU_DRAW_KEYS = ("power_consumption", "power_draw", "power_draw_w")

PSU_HEADROOM = 1.5

_LIST_SEPARATORS = re.compile(r"[,;|]")


def role_for_category(slug: str | None) -> ComponentRole | None:
    """分类 slug 对应的配件角色（也接受角色名本身）"""
    if not slug:
        return None
    if slug in CATEGORY_ROLES:
        return CATEGORY_ROLES[slug]
    try:
        return ComponentRole(slug)
    except ValueError:
        return None


def _first(specs: Specs | None, keys: tuple[str, ...]) -> str | None:
    if not specs:
        return None
    for key in keys:
        value = specs.get(key)
        if value:
            return value
    return None


def _supports_form_factor(support: str | None, form_factor: str | None) -> bool | None:
    """机箱支持列表是否包含板型，任一缺失返回 None"""
    if not support or not form_factor:
        return None
    listed = {item.strip().lower() for item in _LIST_SEPARATORS.split(support)}
    return form_factor.strip().lower() in listed


def _required_wattage(gpu: Specs | None) -> int | None:
    draw = parse_number(_first(gpu, _GPU_DRAW_KEYS) or "")
    if not draw:
        return None
    return math.ceil(draw * PSU_HEADROOM)


def is_derived_match(role: ComponentRole | None, candidate: Specs, build: Build) -> bool:
    """候选配件是否满足由当前配置推导出的约束

    主板、内存要求规格存在且一致；机箱、电源缺少相关规格时保留。
    """
    if role == ComponentRole.MOTHERBOARD:
        socket = (build.get(ComponentRole.CPU) or {}).get("socket")
        return not socket or candidate.get("socket") == socket

    if role == ComponentRole.RAM:
        memory_type = _first(build.get(ComponentRole.MOTHERBOARD), _BOARD_MEMORY_KEYS)
        return not memory_type or _first(candidate, _RAM_TYPE_KEYS) == memory_type

    if role == ComponentRole.CASE:
        form_factor = (build.get(ComponentRole.MOTHERBOARD) or {}).get("form_factor")
        return _supports_form_factor(_first(candidate, _CASE_SUPPORT_KEYS), form_factor) is not False

    if role == ComponentRole.PSU:
        required = _required_wattage(build.get(ComponentRole.GPU))
        wattage = parse_number(candidate.get("wattage") or "")
        return required is None or wattage is None or wattage >= required

    return True


def check_candidate(role: ComponentRole | None, candidate: Specs, build: Build) -> CompatibilityCheck:
    """逐项检查候选配件与已选配件，返回冲突原因

    存在 error 级别原因时 ok 为 False。
    """
    reasons: list[CompatibilityReason] = []

    def error(code: str, message: str) -> None:
        reasons.append(CompatibilityReason(code=code, message=message, severity=CompatibilitySeverity.ERROR))

    def warn(code: str, message: str) -> None:
        reasons.append(CompatibilityReason(code=code, message=message, severity=CompatibilitySeverity.WARN))

    cpu = build.get(ComponentRole.CPU)
    board = build.get(ComponentRole.MOTHERBOARD)
    ram = build.get(ComponentRole.RAM)
    gpu = build.get(ComponentRole.GPU)
    psu = build.get(ComponentRole.PSU)
    case = build.get(ComponentRole.CASE)

    # 统一为 (cpu, 主板) 等配对后比较，候选配件占据自己的角色位置
    if role == ComponentRole.MOTHERBOARD:
        cpu_specs, board_specs, ram_specs, case_specs = cpu, candidate, ram, case
    elif role == ComponentRole.CPU:
        cpu_specs, board_specs, ram_specs, case_specs = candidate, board, None, None
    elif role == ComponentRole.RAM:
        cpu_specs, board_specs, ram_specs, case_specs = None, board, candidate, None
    elif role == ComponentRole.CASE:
        cpu_specs, board_specs, ram_specs, case_specs = None, board, None, candidate
    else:
        cpu_specs = board_specs = ram_specs = case_specs = None

    cpu_socket = (cpu_specs or {}).get("socket")
    board_socket = (board_specs or {}).get("socket")
    if cpu_socket and board_socket and cpu_socket != board_socket:
        error("socket_mismatch", f"CPU socket {cpu_socket} does not match motherboard socket {board_socket}")

    ram_type = _first(ram_specs, _RAM_TYPE_KEYS)
    board_memory = _first(board_specs, _BOARD_MEMORY_KEYS)
    if ram_type and board_memory and ram_type != board_memory:
        error("ram_type", f"RAM {ram_type} is not supported by motherboard ({board_memory})")

    form_factor = (board_specs or {}).get("form_factor")
    if _supports_form_factor(_first(case_specs, _CASE_SUPPORT_KEYS), form_factor) is False:
        error("case_form_factor", f"Case does not support motherboard form factor {form_factor}")

    if role in (ComponentRole.PSU, ComponentRole.GPU):
        gpu_specs, psu_specs = (gpu, candidate) if role == ComponentRole.PSU else (candidate, psu)
        required = _required_wattage(gpu_specs)
        wattage = parse_number((psu_specs or {}).get("wattage") or "")
        if required and wattage and wattage < required:
            draw = parse_number(_first(gpu_specs, _GPU_DRAW_KEYS) or "")
            warn(
                "psu_wattage",
                f"PSU wattage {wattage:g}W may be low for GPU draw {draw:g}W (recommended {required}W)",
            )

    return CompatibilityCheck(
        ok=all(r.severity != CompatibilitySeverity.ERROR for r in reasons),
        reasons=reasons,
    )


def _spec_map(product: Product) -> Specs:
    return {s.name: s.value for s in product.specifications if s.value}


class CompatibilityService:
    """装机兼容性服务（基于已保存的商品规格）"""

    def __init__(
        self,
        session: AsyncSession,
        product_repo: ProductRepository | None = None,
        category_repo: CategoryRepository | None = None,
    ):
        self.session = session
        self.product_repo = product_repo or ProductRepository(session)
        self.category_repo = category_repo or CategoryRepository(session)

    async def _load_build(self, build: dict[ComponentRole, str]) -> tuple[Build, list[str]]:
        products = await self.product_repo.get_many_with_specifications(list(build.values()))
        by_id = {p.id: p for p in products}
        missing = [product_id for product_id in build.values() if product_id not in by_id]
        return {role: _spec_map(by_id[pid]) for role, pid in build.items() if pid in by_id}, missing

    async def check_compatibility(
        self,
        build: dict[ComponentRole, str],
        candidate_id: str,
    ) -> ServiceResult[CompatibilityCheck]:
        """检查候选商品与当前配置的兼容性"""
        try:
            candidates = await self.product_repo.get_many_with_specifications([candidate_id])
            if not candidates:
                return ServiceResult.fail("Product not found")
            selected, missing = await self._load_build(build)
        except SQLAlchemyError as e:
            logger.error("兼容性检查失败", candidate_id=candidate_id, error=str(e))
            return ServiceResult.fail(str(e))
        if missing:
            return ServiceResult.fail(*(f"Product not found: {product_id}" for product_id in missing))

        candidate = candidates[0]
        role = role_for_category(candidate.category.slug if candidate.category else None)
        result = check_candidate(role, _spec_map(candidate), selected)
        logger.debug(
            "兼容性检查",
            candidate_id=candidate_id,
            role=role.value if role else None,
            ok=result.ok,
            reasons=len(result.reasons),
        )
        return ServiceResult.ok(result)

    async def filter_compatible_products(
        self,
        category_id: str,
        build: dict[ComponentRole, str],
    ) -> ServiceResult[list[str]]:
        """按当前配置筛选分类内可选商品，返回商品 ID"""
        try:
            category = await self.category_repo.get_by_id(category_id)
            if category is None:
                return ServiceResult.fail("Category not found")
            products = await self.product_repo.get_by_category_with_specifications(category_id)
            selected, missing = await self._load_build(build)
        except SQLAlchemyError as e:
            logger.error("兼容商品筛选失败", category_id=category_id, error=str(e))
            return ServiceResult.fail(str(e))
        if missing:
            return ServiceResult.fail(*(f"Product not found: {product_id}" for product_id in missing))

        role = role_for_category(category.slug)
        matched = [p.id for p in products if is_derived_match(role, _spec_map(p), selected)]
        logger.debug(
            "兼容商品筛选",
            category_id=category_id,
            role=role.value if role else None,
            scanned=len(products),
            matched=len(matched),
        )
        return ServiceResult.ok(matched)

    @staticmethod
    def explain_conflicts(reasons: list[CompatibilityReason]) -> list[str]:
        """冲突原因的说明文本"""
        return [r.message for r in reasons]
