"""分类预设模板

内置一组 PC 配件分类的规格模板，分类首次配置时写入数据库。
可通过 CATEGORY_PRESETS_JSON 追加或覆盖（同 slug 以配置为准）。
"""

from typing import Any

from pydantic import ValidationError

from storefront.core.config import settings
from storefront.core.logging import get_logger
from storefront.schemas.specification import CategoryTemplatePreset, TemplatePresetEntry

logger = get_logger("specification.presets")


def _spec(name: str, display_name: str, data_type: str = "text", order: int = 0, **extra: Any) -> dict[str, Any]:
    return {"name": name, "display_name": display_name, "data_type": data_type, "display_order": order, **extra}


_BUILTIN_PRESETS: list[dict[str, Any]] = [
    {
        "category_name": "Processors",
        "category_slug": "processors",
        "templates": [
            _spec("brand", "Brand", "enum", 1, is_required=True, enum_values=["AMD", "Intel"]),
            _spec("socket", "Socket", "enum", 2, is_required=True,
                  enum_values=["AM4", "AM5", "LGA1200", "LGA1700", "LGA1851"]),
            _spec("cores", "Cores", "number", 3, is_required=True),
            _spec("threads", "Threads", "number", 4),
            _spec("base_clock", "Base Clock", "number", 5, unit="GHz", placeholder="3.6"),
            _spec("boost_clock", "Boost Clock", "number", 6, unit="GHz", placeholder="5.0"),
            _spec("cache_l3", "L3 Cache", "number", 7, unit="MB"),
            _spec("tdp", "TDP", "number", 8, unit="W"),
            _spec("integrated_graphics", "Integrated Graphics", "boolean", 9),
        ],
    },
    {
        "category_name": "Graphics Cards",
        "category_slug": "graphics-cards",
        "templates": [
            _spec("brand", "Brand", "enum", 1, is_required=True, enum_values=["NVIDIA", "AMD", "Intel"]),
            _spec("chipset", "Chipset", "text", 2, is_required=True, placeholder="RTX 4070"),
            _spec("memory_size", "Memory", "number", 3, is_required=True, unit="GB"),
            _spec("memory_type", "Memory Type", "enum", 4, enum_values=["GDDR6", "GDDR6X", "GDDR7"]),
            _spec("memory_bus", "Memory Bus", "number", 5, unit="bit"),
            _spec("boost_clock", "Boost Clock", "number", 6, unit="MHz"),
            _spec("power_consumption", "Power Consumption", "number", 7, unit="W"),
            _spec("ray_tracing", "Ray Tracing", "boolean", 8),
        ],
    },
    {
        "category_name": "Motherboards",
        "category_slug": "motherboards",
        "templates": [
            _spec("socket", "Socket", "enum", 1, is_required=True,
                  enum_values=["AM4", "AM5", "LGA1200", "LGA1700", "LGA1851"]),
            _spec("chipset", "Chipset", "text", 2, is_required=True, placeholder="B650"),
            _spec("form_factor", "Form Factor", "enum", 3, is_required=True,
                  enum_values=["ATX", "Micro-ATX", "Mini-ITX", "E-ATX"]),
            _spec("memory_type", "Memory Type", "enum", 4, enum_values=["DDR4", "DDR5"]),
            _spec("memory_slots", "Memory Slots", "number", 5),
            _spec("max_memory", "Max Memory", "number", 6, unit="GB"),
            _spec("wifi_support", "Wi-Fi", "boolean", 7),
        ],
    },
    {
        "category_name": "Memory",
        "category_slug": "memory",
        "templates": [
            _spec("memory_type", "Memory Type", "enum", 1, is_required=True, enum_values=["DDR4", "DDR5"]),
            _spec("memory_size", "Capacity", "number", 2, is_required=True, unit="GB"),
            _spec("memory_speed", "Speed", "number", 3, unit="MHz"),
            _spec("modules", "Modules", "number", 4, placeholder="2"),
            _spec("cas_latency", "CAS Latency", "number", 5),
            _spec("rgb_lighting", "RGB Lighting", "boolean", 6, is_filter=False),
        ],
    },
    {
        "category_name": "Storage",
        "category_slug": "storage",
        "templates": [
            _spec("storage_type", "Type", "enum", 1, is_required=True, enum_values=["NVMe SSD", "SATA SSD", "HDD"]),
            _spec("capacity", "Capacity", "number", 2, is_required=True, unit="GB"),
            _spec("interface", "Interface", "enum", 3, enum_values=["PCIe 3.0", "PCIe 4.0", "PCIe 5.0", "SATA III"]),
            _spec("form_factor", "Form Factor", "enum", 4, enum_values=["M.2 2280", "2.5\"", "3.5\""]),
            _spec("read_speed", "Read Speed", "number", 5, unit="MB/s"),
            _spec("write_speed", "Write Speed", "number", 6, unit="MB/s"),
        ],
    },
    {
        "category_name": "Power Supplies",
        "category_slug": "power-supplies",
        "templates": [
            _spec("wattage", "Wattage", "number", 1, is_required=True, unit="W"),
            _spec("efficiency_rating", "Efficiency Rating", "enum", 2,
                  enum_values=["80+ Bronze", "80+ Gold", "80+ Platinum", "80+ Titanium"]),
            _spec("modular", "Modular", "enum", 3, enum_values=["Full", "Semi", "Non-modular"]),
            _spec("form_factor", "Form Factor", "enum", 4, enum_values=["ATX", "SFX", "SFX-L"]),
        ],
    },
    {
        "category_name": "Cases",
        "category_slug": "cases",
        "templates": [
            _spec("form_factor", "Form Factor", "enum", 1, is_required=True,
                  enum_values=["Full Tower", "Mid Tower", "Mini Tower", "Small Form Factor"]),
            _spec("motherboard_support", "Motherboard Support", "text", 2, placeholder="ATX, Micro-ATX, Mini-ITX"),
            _spec("max_gpu_length", "Max GPU Length", "number", 3, unit="mm"),
            _spec("side_panel", "Side Panel", "enum", 4, enum_values=["Tempered Glass", "Solid", "Mesh"]),
            _spec("color", "Color", "text", 5, is_filter=False),
        ],
    },
    {
        "category_name": "CPU Coolers",
        "category_slug": "cpu-coolers",
        "templates": [
            _spec("cooler_type", "Type", "enum", 1, is_required=True, enum_values=["Air", "Liquid"]),
            _spec("socket_support", "Socket Support", "text", 2, placeholder="AM5, LGA1700"),
            _spec("radiator_size", "Radiator Size", "number", 3, unit="mm"),
            _spec("max_tdp", "Max TDP", "number", 4, unit="W"),
            _spec("noise_level", "Noise Level", "number", 5, unit="dB"),
        ],
    },
    {
        "category_name": "Laptops",
        "category_slug": "laptops",
        "templates": [
            _spec("processor", "Processor", "text", 1, is_required=True, placeholder="Intel Core i7-13700H"),
            _spec("ram", "RAM", "number", 2, is_required=True, unit="GB"),
            _spec("storage", "Storage", "number", 3, unit="GB"),
            _spec("screen_size", "Screen Size", "number", 4, unit="in"),
            _spec("operating_system", "Operating System", "enum", 5,
                  enum_values=["Windows 11", "macOS", "Linux", "No OS"]),
        ],
    },
    {
        "category_name": "Monitors",
        "category_slug": "monitors",
        "templates": [
            _spec("screen_size", "Screen Size", "number", 1, is_required=True, unit="in"),
            _spec("resolution", "Resolution", "enum", 2, is_required=True,
                  enum_values=["1920x1080", "2560x1440", "3440x1440", "3840x2160"]),
            _spec("refresh_rate", "Refresh Rate", "number", 3, unit="Hz"),
            _spec("panel_type", "Panel Type", "enum", 4, enum_values=["IPS", "VA", "TN", "OLED"]),
            _spec("response_time", "Response Time", "number", 5, unit="ms"),
            _spec("hdr", "HDR", "boolean", 6),
        ],
    },
]


def _load_presets() -> dict[str, CategoryTemplatePreset]:
    presets = {
        item["category_slug"]: CategoryTemplatePreset.model_validate(item) for item in _BUILTIN_PRESETS
    }
    for item in settings.category_presets:
        try:
            preset = CategoryTemplatePreset.model_validate(item)
        except ValidationError as e:
            logger.warning("忽略无效的分类预设配置", slug=item.get("category_slug"), error=str(e))
            continue
        presets[preset.category_slug] = preset
    return presets


def get_category_presets() -> dict[str, CategoryTemplatePreset]:
    """获取全部分类预设（slug -> 预设）"""
    return _load_presets()


def get_templates_for_category_slug(slug: str) -> list[TemplatePresetEntry] | None:
    """根据分类 slug 获取预设模板，不存在返回 None"""
    preset = get_category_presets().get(slug)
    if preset is None:
        return None
    return list(preset.templates)


def has_templates_for_category(slug: str) -> bool:
    """分类是否有可用的预设模板"""
    templates = get_templates_for_category_slug(slug)
    return bool(templates)


def get_available_category_slugs() -> list[str]:
    """获取所有有预设模板的分类 slug"""
    return list(get_category_presets())
