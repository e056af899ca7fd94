"""规格模板初始化脚本 - 为所有已有分类补齐预设规格模板

用法:
    python scripts/init_spec_templates.py          # 初始化全部分类
    python scripts/init_spec_templates.py --list   # 列出内置/配置的预设
"""

import asyncio
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.core.database import init_db
from storefront.core.db import close_database_provider
from storefront.core.dependencies import get_services
from storefront.services.specification.presets import get_category_presets


def list_presets() -> None:
    """打印所有预设"""
    for slug, preset in get_category_presets().items():
        print(f"[preset] {slug:<16} {preset.category_name:<16} {len(preset.templates)} 个模板")


async def initialize_templates() -> bool:
    """初始化全部分类的模板"""
    await init_db()
    try:
        async with get_services() as services:
            result = await services.templates.initialize_all_category_templates()
    finally:
        await close_database_provider()

    print(f"[init] 处理分类: {result.processed_categories}")
    print(f"[init] 写入模板: {result.applied_templates}")
    for error in result.errors or []:
        print(f"[error] {error}")
    return result.success


def main():
    """主函数"""
    if "--list" in sys.argv[1:]:
        list_presets()
        sys.exit(0)

    try:
        ok = asyncio.run(initialize_templates())
    except KeyboardInterrupt:
        print("\n[init] 已取消")
        sys.exit(1)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
