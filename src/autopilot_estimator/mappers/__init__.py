from .usage_mapper import UsageMapper
from .sku_mapper import SkuMapper

__all__ = [
    "UsageMapper",
    "SkuMapper"
]
