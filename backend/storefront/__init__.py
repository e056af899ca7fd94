"""商城规格与筛选服务"""

__version__ = "0.1.0"
