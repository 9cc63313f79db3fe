"""FastAPI endpoints for the Catalogue context."""

from uuid import UUID

from fastapi import APIRouter, Query, Response
from protean.utils.globals import current_domain

from storefront.catalogue import category_management, product_management
from storefront.catalogue.api.schemas import (
    AdjustStockRequest,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from storefront.catalogue.category_management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.product_management import AdjustStock, CreateProduct, DeleteProduct, UpdateProduct
from storefront.dependencies import ContextDep, PageDep
from storefront.shared.schemas import PageResponse

product_router = APIRouter(prefix="/api/products", tags=["products"])
category_router = APIRouter(prefix="/api/categories", tags=["categories"])


def _id(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


# --- Category endpoints ---


@category_router.post("", status_code=201, response_model=CategoryResponse)
def create_category(body: CreateCategoryRequest, context: ContextDep) -> CategoryResponse:
    command = CreateCategory(name=body.name, description=body.description, parent_id=_id(body.parent_id))
    return CategoryResponse.from_category(current_domain.process(command, asynchronous=False))


@category_router.get("", response_model=list[CategoryResponse])
def list_categories() -> list[CategoryResponse]:
    return [CategoryResponse.from_category(c) for c in category_management.list_categories()]


@category_router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: UUID) -> CategoryResponse:
    return CategoryResponse.from_category(category_management.get_category(str(category_id)))


@category_router.get("/{category_id}/children", response_model=list[CategoryResponse])
def list_children(category_id: UUID) -> list[CategoryResponse]:
    return [CategoryResponse.from_category(c) for c in category_management.list_children(str(category_id))]


@category_router.put("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: UUID, body: UpdateCategoryRequest, context: ContextDep) -> CategoryResponse:
    command = UpdateCategory(
        category_id=str(category_id),
        name=body.name,
        description=body.description,
        parent_id=_id(body.parent_id),
    )
    return CategoryResponse.from_category(current_domain.process(command, asynchronous=False))


@category_router.delete("/{category_id}", status_code=204)
def delete_category(category_id: UUID, context: ContextDep) -> Response:
    current_domain.process(DeleteCategory(category_id=str(category_id)), asynchronous=False)
    return Response(status_code=204)


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductResponse)
def create_product(body: CreateProductRequest, context: ContextDep) -> ProductResponse:
    command = CreateProduct(
        sku=body.sku,
        name=body.name,
        description=body.description,
        price=body.price,
        stock_quantity=body.stock_quantity,
        category_id=_id(body.category_id),
        is_active=body.is_active,
        images=body.images,
    )
    return ProductResponse.from_view(current_domain.process(command, asynchronous=False))


@product_router.get("", response_model=PageResponse[ProductResponse])
def list_products(page: PageDep) -> PageResponse[ProductResponse]:
    return PageResponse[ProductResponse].from_page(product_management.list_products(page), ProductResponse.from_view)


@product_router.get("/active", response_model=PageResponse[ProductResponse])
def list_active_products(page: PageDep) -> PageResponse[ProductResponse]:
    result = product_management.list_products(page, active_only=True)
    return PageResponse[ProductResponse].from_page(result, ProductResponse.from_view)


@product_router.get("/search", response_model=PageResponse[ProductResponse])
def search_products(page: PageDep, keyword: str = Query(..., min_length=1)) -> PageResponse[ProductResponse]:
    result = product_management.search_products(keyword, page)
    return PageResponse[ProductResponse].from_page(result, ProductResponse.from_view)


@product_router.get("/category/{category_id}", response_model=PageResponse[ProductResponse])
def list_products_by_category(category_id: UUID, page: PageDep) -> PageResponse[ProductResponse]:
    result = product_management.list_by_category(str(category_id), page)
    return PageResponse[ProductResponse].from_page(result, ProductResponse.from_view)


@product_router.get("/sku/{sku}", response_model=ProductResponse)
def get_product_by_sku(sku: str) -> ProductResponse:
    return ProductResponse.from_view(product_management.get_product_by_sku(sku))


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: UUID) -> ProductResponse:
    return ProductResponse.from_view(product_management.get_product(str(product_id)))


@product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: UUID, body: UpdateProductRequest, context: ContextDep) -> ProductResponse:
    # Omitted fields stay unchanged
    changes = body.model_dump(exclude_none=True)
    if "category_id" in changes:
        changes["category_id"] = str(changes["category_id"])
    command = UpdateProduct(product_id=str(product_id), **changes)
    return ProductResponse.from_view(current_domain.process(command, asynchronous=False))


@product_router.patch("/{product_id}/stock", response_model=ProductResponse)
def adjust_stock(product_id: UUID, body: AdjustStockRequest, context: ContextDep) -> ProductResponse:
    command = AdjustStock(product_id=str(product_id), delta=body.delta)
    return ProductResponse.from_view(current_domain.process(command, asynchronous=False))


@product_router.delete("/{product_id}", status_code=204)
def delete_product(product_id: UUID, context: ContextDep) -> Response:
    current_domain.process(DeleteProduct(product_id=str(product_id)), asynchronous=False)
    return Response(status_code=204)
