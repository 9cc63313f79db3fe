"""FastAPI endpoints for the Wishlist context."""

from uuid import UUID

from fastapi import APIRouter, Response
from protean.utils.globals import current_domain

from storefront.dependencies import ContextDep, PageDep
from storefront.ordering.api.schemas import CartResponse
from storefront.shared.schemas import CountResponse, PageResponse
from storefront.wishlist import management
from storefront.wishlist.api.schemas import (
    AddToWishlistRequest,
    ClearWishlistResponse,
    WishlistCheckResponse,
    WishlistItemResponse,
)
from storefront.wishlist.management import (
    AddToWishlist,
    ClearWishlist,
    MoveToCart,
    RemoveFromWishlist,
    RemoveProductFromWishlist,
)

wishlist_router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@wishlist_router.post("", status_code=201, response_model=WishlistItemResponse)
def add_to_wishlist(body: AddToWishlistRequest, context: ContextDep) -> WishlistItemResponse:
    command = AddToWishlist(user_id=str(body.user_id), product_id=str(body.product_id))
    return WishlistItemResponse.from_view(current_domain.process(command, asynchronous=False))


@wishlist_router.get("/user/{user_id}", response_model=list[WishlistItemResponse])
def list_wishlist(user_id: UUID) -> list[WishlistItemResponse]:
    return [WishlistItemResponse.from_view(v) for v in management.list_for_user(str(user_id))]


@wishlist_router.get("/user/{user_id}/paged", response_model=PageResponse[WishlistItemResponse])
def page_wishlist(user_id: UUID, page: PageDep) -> PageResponse[WishlistItemResponse]:
    result = management.page_for_user(str(user_id), page)
    return PageResponse[WishlistItemResponse].from_page(result, WishlistItemResponse.from_view)


@wishlist_router.get("/user/{user_id}/count", response_model=CountResponse)
def count_wishlist(user_id: UUID) -> CountResponse:
    return CountResponse(count=management.count_for_user(str(user_id)))


@wishlist_router.get("/user/{user_id}/product/{product_id}", response_model=WishlistCheckResponse)
def check_wishlist(user_id: UUID, product_id: UUID) -> WishlistCheckResponse:
    return WishlistCheckResponse(in_wishlist=management.contains(str(user_id), str(product_id)))


@wishlist_router.delete("/user/{user_id}/product/{product_id}", status_code=204)
def remove_product_from_wishlist(user_id: UUID, product_id: UUID, context: ContextDep) -> Response:
    command = RemoveProductFromWishlist(user_id=str(user_id), product_id=str(product_id))
    current_domain.process(command, asynchronous=False)
    return Response(status_code=204)


@wishlist_router.delete("/user/{user_id}", response_model=ClearWishlistResponse)
def clear_wishlist(user_id: UUID, context: ContextDep) -> ClearWishlistResponse:
    removed = current_domain.process(ClearWishlist(user_id=str(user_id)), asynchronous=False)
    return ClearWishlistResponse(removed=removed)


@wishlist_router.post("/{item_id}/move-to-cart", response_model=CartResponse)
def move_to_cart(item_id: UUID, context: ContextDep) -> CartResponse:
    return CartResponse.from_view(current_domain.process(MoveToCart(item_id=str(item_id)), asynchronous=False))


@wishlist_router.delete("/{item_id}", status_code=204)
def remove_from_wishlist(item_id: UUID, context: ContextDep) -> Response:
    current_domain.process(RemoveFromWishlist(item_id=str(item_id)), asynchronous=False)
    return Response(status_code=204)
