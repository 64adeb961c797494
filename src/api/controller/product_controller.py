"""HTTP controller for the product catalog.

Routes (all under /products):
    GET    /products?page&size  list products sorted by name, optionally paginated
    GET    /products/{id}       fetch one product
    POST   /products            create a product
    PUT    /products/{id}       replace a product, the path id wins over the body id
    DELETE /products/{id}       delete a product

Each handler maps store results and failures to a status code itself.
Blocking store calls run on the server thread pool.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError
from typing_extensions import Annotated

from src.catalog.models import Product, Sort
from src.catalog.services import PersistenceError, ProductStore

logger = logging.getLogger(__name__)

SORT_BY_NAME = Sort.by("name")

# Largest value an SQLite INTEGER column holds
SQLITE_MAX_INTEGER = 2**63 - 1


class ProductRequest(BaseModel):
    """Incoming product body for create and update requests."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    description: Optional[Annotated[str, StringConstraints(max_length=255)]] = None
    price: float = Field(ge=0, allow_inf_nan=False)
    stock: int = Field(default=0, ge=0, le=SQLITE_MAX_INTEGER)

    def to_product(self, product_id: Optional[int] = None) -> Product:
        return Product(
            id=product_id,
            name=self.name,
            description=self.description,
            price=self.price,
            stock=self.stock,
        )


def _format_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def parse_product(raw_body: bytes) -> Tuple[Optional[ProductRequest], List[str]]:
    """Parse and validate a product JSON body.

    Returns:
        The parsed request and an empty list, or None and the violation messages.
    """
    try:
        return ProductRequest.model_validate_json(raw_body), []
    except ValidationError as e:
        return None, [_format_error(error) for error in e.errors()]


def _fatal_error(e: PersistenceError) -> JSONResponse:
    return JSONResponse(
        {"errorGrave": f"A fatal error occurred. The most likely cause is: {e.most_specific_cause}"},
        status_code=500,
    )


def create_product_router(store: ProductStore) -> APIRouter:
    """Build the /products router bound to the given store."""
    router = APIRouter(prefix="/products", tags=["products"])

    @router.get("")
    async def find_all(page: Optional[str] = None, size: Optional[str] = None) -> Response:
        """List products sorted by name, paginated when both page and size are given."""
        if page is not None and size is not None:
            try:
                result = await run_in_threadpool(store.find_page, int(page), int(size), SORT_BY_NAME)
            except Exception as e:
                logger.warning(f"Paginated listing failed (page={page}, size={size}): {e}")
                return Response(status_code=400)

            return JSONResponse(
                [product.to_dict() for product in result.items],
                headers={
                    "X-Total-Count": str(result.total),
                    "X-Total-Pages": str(result.total_pages),
                },
            )

        try:
            products = await run_in_threadpool(store.find_all, SORT_BY_NAME)
        except Exception as e:
            # Failures on the unpaginated listing are reported as "no content"
            logger.exception(f"Listing products failed: {e}")
            return Response(status_code=204)

        return JSONResponse([product.to_dict() for product in products])

    @router.get("/{product_id}")
    async def find_by_id(product_id: int) -> JSONResponse:
        """Fetch a single product."""
        try:
            product = await run_in_threadpool(store.find_by_id, product_id)
        except Exception as e:
            logger.exception(f"Looking up product {product_id} failed: {e}")
            return JSONResponse({"message": "Server error"}, status_code=500)

        if product is None:
            return JSONResponse(
                {"message": f"Product with id {product_id} was not found"},
                status_code=404,
            )

        return JSONResponse(
            {"message": f"Found product with id {product_id}", "product": product.to_dict()}
        )

    @router.post("")
    async def insert(request: Request) -> JSONResponse:
        """Create a product; the store assigns its id."""
        payload, errors = parse_product(await request.body())
        if payload is None:
            return JSONResponse({"errors": errors}, status_code=400)

        try:
            saved = await run_in_threadpool(store.save, payload.to_product())
        except PersistenceError as e:
            logger.error(f"Saving new product failed: {e.most_specific_cause}")
            return _fatal_error(e)

        if saved is None:
            return JSONResponse({"message": "The product could not be saved"}, status_code=500)

        logger.info(f"Created product {saved.id}")
        return JSONResponse(
            {"message": "The product was saved successfully", "product": saved.to_dict()},
            status_code=201,
        )

    @router.put("/{product_id}")
    async def update(product_id: int, request: Request) -> JSONResponse:
        """Replace the product stored under the path id."""
        payload, errors = parse_product(await request.body())
        if payload is None:
            return JSONResponse({"errors": errors}, status_code=400)

        try:
            saved = await run_in_threadpool(store.save, payload.to_product(product_id))
        except PersistenceError as e:
            logger.error(f"Updating product {product_id} failed: {e.most_specific_cause}")
            return _fatal_error(e)

        if saved is None:
            return JSONResponse({"message": "The product was not updated"}, status_code=500)

        return JSONResponse(
            {"message": "The product was updated successfully", "product": saved.to_dict()}
        )

    @router.delete("/{product_id}")
    async def delete(product_id: int) -> PlainTextResponse:
        """Delete a product if it exists."""
        try:
            product = await run_in_threadpool(store.find_by_id, product_id)
            if product is None:
                return PlainTextResponse("The requested product does not exist", status_code=404)

            await run_in_threadpool(store.delete, product)
        except PersistenceError as e:
            logger.error(f"Deleting product {product_id} failed: {e.most_specific_cause}")
            return PlainTextResponse("Fatal error", status_code=500)

        return PlainTextResponse("The product was deleted successfully")

    return router
