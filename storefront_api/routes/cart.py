"""Cart endpoints. Quantities reserve stock as they change."""

from fastapi import APIRouter, Depends, status

from storefront.application.dtos.cart_dto import (
    AddToCartRequest,
    CartDTO,
    PriceQuoteDTO,
    UpdateCartItemRequest,
)
from storefront.application.services import CartService
from storefront_api.dependencies import get_cart_service, get_current_user

router = APIRouter()


@router.get("", response_model=CartDTO, summary="Get the caller's cart")
async def get_cart(
    user_id: str = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.get_cart(user_id)


@router.post(
    "/items",
    response_model=CartDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product to the cart",
)
async def add_item(
    request: AddToCartRequest,
    user_id: str = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.add_item(user_id, request.product_id, request.quantity)


@router.patch("/items/{product_id}", response_model=CartDTO, summary="Change item quantity")
async def update_item(
    product_id: str,
    request: UpdateCartItemRequest,
    user_id: str = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.update_quantity(user_id, product_id, request.delta)


@router.delete("/items/{product_id}", response_model=CartDTO, summary="Remove an item")
async def remove_item(
    product_id: str,
    user_id: str = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.remove_item(user_id, product_id)


@router.get(
    "/products/{product_id}/price",
    response_model=PriceQuoteDTO,
    summary="Best current price for a product",
)
async def quote_price(
    product_id: str,
    service: CartService = Depends(get_cart_service),
):
    return await service.quote_price(product_id)
