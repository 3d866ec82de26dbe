"""Domain models for ocget."""

from ocget.core.models.product import (
    ALL_PRODUCTS,
    LATEST,
    PRODUCT_SPECS,
    Product,
    ProductSpec,
    VersionSource,
    get_spec,
)
from ocget.core.models.result import InstallReport, ProductResult
from ocget.core.models.run_config import RunConfig

__all__ = [
    "ALL_PRODUCTS",
    "LATEST",
    "PRODUCT_SPECS",
    "Product",
    "ProductSpec",
    "VersionSource",
    "get_spec",
    "InstallReport",
    "ProductResult",
    "RunConfig",
]
