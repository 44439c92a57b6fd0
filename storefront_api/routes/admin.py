"""
Admin back-office endpoints.

Every route requires the `X-Admin-Token` header.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from storefront.application.dtos.coupon_dto import CouponDTO, CreateCouponRequest
from storefront.application.dtos.order_dto import (
    CancelRequest,
    OrderDTO,
    OrderListDTO,
    ReturnRequestDTO,
    StatusUpdateRequest,
)
from storefront.application.dtos.report_dto import SalesSummaryDTO
from storefront.application.dtos.wallet_dto import WalletReconciliationDTO
from storefront.application.services import (
    CouponService,
    OrderService,
    ReportService,
    ReturnService,
    WalletService,
)
from storefront_api.dependencies import (
    get_coupon_service,
    get_order_service,
    get_report_service,
    get_return_service,
    get_wallet_service,
    require_admin,
)

router = APIRouter(dependencies=[Depends(require_admin)])

ADMIN_LINE_CANCEL_REASON = "Cancelled by admin"


# =============================================================================
# ORDERS
# =============================================================================

@router.get("/orders", response_model=OrderListDTO, summary="All orders, filterable")
async def list_orders(
    order_status: Optional[str] = Query(default=None, alias="status"),
    payment_status: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_all_orders(
        status=order_status, payment_status=payment_status, page=page, limit=limit
    )


@router.patch("/orders/{order_id}/status", response_model=OrderDTO, summary="Change order status")
async def update_status(
    order_id: str,
    request: StatusUpdateRequest,
    service: OrderService = Depends(get_order_service),
):
    return await service.update_status(order_id, request.status)


@router.post(
    "/orders/{order_id}/lines/{line_id}/cancel",
    response_model=OrderDTO,
    summary="Cancel one line on behalf of the customer",
)
async def cancel_line(
    order_id: str,
    line_id: str,
    request: CancelRequest = CancelRequest(reason=ADMIN_LINE_CANCEL_REASON),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_line(order_id, line_id, request.reason)


# =============================================================================
# RETURNS
# =============================================================================

@router.get("/returns", response_model=List[ReturnRequestDTO], summary="Return requests")
async def list_returns(
    return_status: Optional[str] = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    service: ReturnService = Depends(get_return_service),
):
    return await service.list_returns(status=return_status, page=page, limit=limit)


@router.post("/returns/{return_id}/approve", response_model=ReturnRequestDTO)
async def approve_return(
    return_id: str,
    service: ReturnService = Depends(get_return_service),
):
    return await service.approve(return_id)


@router.post("/returns/{return_id}/reject", response_model=ReturnRequestDTO)
async def reject_return(
    return_id: str,
    service: ReturnService = Depends(get_return_service),
):
    return await service.reject(return_id)


# =============================================================================
# COUPONS
# =============================================================================

@router.get("/coupons", response_model=List[CouponDTO])
async def list_coupons(
    active_only: bool = Query(default=False),
    service: CouponService = Depends(get_coupon_service),
):
    return await service.list_coupons(active_only=active_only)


@router.post("/coupons", response_model=CouponDTO, status_code=status.HTTP_201_CREATED)
async def create_coupon(
    request: CreateCouponRequest,
    service: CouponService = Depends(get_coupon_service),
):
    return await service.create_coupon(request)


# =============================================================================
# WALLETS & REPORTS
# =============================================================================

@router.get("/wallets/{user_id}/reconcile", response_model=WalletReconciliationDTO)
async def reconcile_wallet(
    user_id: str,
    service: WalletService = Depends(get_wallet_service),
):
    return await service.reconcile(user_id)


@router.get("/reports/sales", response_model=SalesSummaryDTO, summary="Sales summary")
async def sales_summary(
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    service: ReportService = Depends(get_report_service),
):
    return await service.sales_summary(start, end)
