"""Product management: commands, handler and queries."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Decimal, Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category_management import require_category
from storefront.catalogue.product import Product
from storefront.catalogue.views import ProductView, build_product_view, build_product_views
from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.shared.pagination import Page, PageRequest
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    sku: String(required=True, max_length=64)
    name: String(required=True, max_length=255)
    price: Decimal(required=True)
    stock_quantity: Integer(default=0)
    description: Text()
    category_id: Identifier()
    is_active: Boolean(default=True)
    images: List(content_type=String(max_length=500))


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price: Decimal()
    category_id: Identifier()
    images: List(content_type=String(max_length=500), default=None)
    is_active: Boolean()


@storefront.command(part_of="Product")
class AdjustStock:
    """Add (positive delta) or remove (negative delta) units of stock."""

    product_id: Identifier(required=True)
    delta: Integer(required=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def require_product(product_id) -> Product:
    return current_domain.repository_for(Product).get(product_id)


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command: CreateProduct) -> ProductView:
        repo = current_domain.repository_for(Product)
        product = Product.create(
            sku=command.sku,
            name=command.name,
            price=command.price,
            stock_quantity=command.stock_quantity,
            description=command.description,
            category_id=command.category_id,
            is_active=command.is_active,
            images=command.images,
        )
        if repo.get_by_sku(product.sku) is not None:
            raise DuplicateResourceError({"sku": [f"Product with SKU already exists: {product.sku}"]})
        if product.category_id is not None:
            require_category(product.category_id)
        repo.add(product)

        logger.info("product_created", product_id=product.id, sku=product.sku)
        return build_product_view(product)

    @handle(UpdateProduct)
    def update_product(self, command: UpdateProduct) -> ProductView:
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if command.category_id is not None:
            require_category(command.category_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
            images=command.images,
            is_active=command.is_active,
        )
        repo.add(product)

        logger.info("product_updated", product_id=product.id)
        return build_product_view(product)

    @handle(AdjustStock)
    def adjust_stock(self, command: AdjustStock) -> ProductView:
        if command.delta == 0:
            raise ValidationError({"delta": ["Stock adjustment must not be zero"]})

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.delta)
        repo.add(product)

        logger.info(
            "product_stock_adjusted",
            product_id=product.id,
            delta=command.delta,
            stock_quantity=product.stock_quantity,
        )
        return build_product_view(product)

    @handle(DeleteProduct)
    def delete_product(self, command: DeleteProduct) -> None:
        repo = current_domain.repository_for(Product)
        repo.get(command.product_id)
        repo.delete(command.product_id)

        logger.info("product_deleted", product_id=command.product_id)


# --- Queries ---


def get_product(product_id) -> ProductView:
    return build_product_view(require_product(product_id))


def get_product_by_sku(sku: str) -> ProductView:
    product = current_domain.repository_for(Product).get_by_sku(sku)
    if product is None:
        raise ObjectNotFoundError({"sku": [f"Product not found: {sku}"]})
    return build_product_view(product)


def list_products(request: PageRequest, active_only: bool = False) -> Page[ProductView]:
    repo = current_domain.repository_for(Product)
    page = repo.list_active(request) if active_only else repo.list_all(request)
    return _with_views(page)


def list_by_category(category_id, request: PageRequest) -> Page[ProductView]:
    require_category(category_id)
    return _with_views(current_domain.repository_for(Product).list_by_category(category_id, request))


def search_products(keyword: str, request: PageRequest) -> Page[ProductView]:
    if not keyword or not keyword.strip():
        raise ValidationError({"keyword": ["Search keyword is required"]})
    return _with_views(current_domain.repository_for(Product).search(keyword, request))


def _with_views(page: Page[Product]) -> Page[ProductView]:
    return Page(
        content=build_product_views(page.content),
        page_number=page.page_number,
        page_size=page.page_size,
        total_elements=page.total_elements,
    )
