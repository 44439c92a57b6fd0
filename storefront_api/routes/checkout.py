"""
Checkout endpoints.

Order placement for every payment method plus the gateway callbacks.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from storefront.application.dtos.coupon_dto import (
    AvailableCouponListDTO,
    CouponPreviewDTO,
    CouponPreviewRequest,
)
from storefront.application.dtos.order_dto import (
    OrderDTO,
    PaymentFailedRequest,
    PlaceOrderRequest,
    PlaceOrderResponse,
    VerifyPaymentRequest,
)
from storefront.application.services import CheckoutService
from storefront_api.dependencies import (
    get_checkout_service,
    get_current_email,
    get_current_user,
)

router = APIRouter()


@router.post("/coupon/preview", response_model=CouponPreviewDTO, summary="Try a coupon")
async def preview_coupon(
    request: CouponPreviewRequest,
    user_id: str = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.preview_coupon(user_id, request.code)


@router.get("/coupons", response_model=AvailableCouponListDTO, summary="Coupons open to the caller")
async def available_coupons(
    user_id: str = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.available_coupons(user_id)


@router.post(
    "/orders",
    response_model=PlaceOrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order from the cart",
)
async def place_order(
    request: PlaceOrderRequest,
    user_id: str = Depends(get_current_user),
    email: Optional[str] = Depends(get_current_email),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Place an order.

    - `cod` / `wallet`: confirmed immediately
    - `razorpay`: returns the gateway order the client must pay
    """
    return await service.place_order(user_id, request, email=email)


@router.post("/payments/verify", response_model=OrderDTO, summary="Confirm a gateway payment")
async def verify_payment(
    request: VerifyPaymentRequest,
    user_id: str = Depends(get_current_user),
    email: Optional[str] = Depends(get_current_email),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.verify_payment(
        user_id,
        request.remote_order_id,
        request.remote_payment_id,
        request.signature,
        email=email,
    )


@router.post("/payments/failed", response_model=OrderDTO, summary="Record a failed payment")
async def payment_failed(
    request: PaymentFailedRequest,
    user_id: str = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.mark_payment_failed(user_id, request.remote_order_id)


@router.post(
    "/orders/{order_id}/retry-payment",
    response_model=PlaceOrderResponse,
    summary="Open a new gateway order for an unpaid order",
)
async def retry_payment(
    order_id: str,
    user_id: str = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.retry_payment(user_id, order_id)
