"""Customer order endpoints: history, cancellation and returns."""

from fastapi import APIRouter, Depends, Query, status

from storefront.application.dtos.order_dto import (
    CancelRequest,
    OrderDTO,
    OrderListDTO,
    ReturnCreateRequest,
    ReturnRequestDTO,
)
from storefront.application.services import OrderService, ReturnService
from storefront_api.dependencies import (
    get_current_user,
    get_order_service,
    get_return_service,
)

router = APIRouter()


@router.get("", response_model=OrderListDTO, summary="List the caller's orders")
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_orders(user_id, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderDTO, summary="Get one order")
async def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_order(order_id, user_id=user_id)


@router.post("/{order_id}/cancel", response_model=OrderDTO, summary="Cancel the whole order")
async def cancel_order(
    order_id: str,
    request: CancelRequest = CancelRequest(),
    user_id: str = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_order(order_id, request.reason, user_id=user_id)


@router.post(
    "/{order_id}/lines/{line_id}/cancel",
    response_model=OrderDTO,
    summary="Cancel one order line",
)
async def cancel_line(
    order_id: str,
    line_id: str,
    request: CancelRequest = CancelRequest(),
    user_id: str = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_line(order_id, line_id, request.reason, user_id=user_id)


@router.post(
    "/{order_id}/returns",
    response_model=ReturnRequestDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Request a return for a line or the whole order",
)
async def request_return(
    order_id: str,
    request: ReturnCreateRequest,
    user_id: str = Depends(get_current_user),
    service: ReturnService = Depends(get_return_service),
):
    return await service.request_return(
        user_id, order_id, request.reason, line_id=request.line_id
    )
