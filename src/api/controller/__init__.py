"""HTTP controllers."""

from src.api.controller.product_controller import (
    ProductRequest,
    create_product_router,
    parse_product,
)

__all__ = ["ProductRequest", "create_product_router", "parse_product"]
