"""Wallet endpoints (read-only)."""

from fastapi import APIRouter, Depends, Query

from storefront.application.dtos.wallet_dto import WalletDTO, WalletTransactionListDTO
from storefront.application.services import WalletService
from storefront_api.dependencies import get_current_user, get_wallet_service

router = APIRouter()


@router.get("", response_model=WalletDTO, summary="Wallet balance")
async def get_wallet(
    user_id: str = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    return await service.get_wallet(user_id)


@router.get(
    "/transactions",
    response_model=WalletTransactionListDTO,
    summary="Ledger entries, newest first",
)
async def list_transactions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    return await service.list_transactions(user_id, page=page, limit=limit)
