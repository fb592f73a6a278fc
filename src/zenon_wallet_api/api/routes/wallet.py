# File: src/zenon_wallet_api/api/routes/wallet.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from ..dependencies import Policy, WalletServices, get_services, require_policy
from ..models import (
    GetWalletAccountsRequest,
    InitWalletRequest,
    InitWalletResponse,
    RestoreWalletRequest,
    UnlockWalletRequest,
    WalletStatusResponse,
)

router = APIRouter(prefix="/api/wallet", tags=["Wallet"])

@router.get("/status", response_model=WalletStatusResponse, dependencies=[Depends(require_policy(Policy.USER))])
async def get_wallet_status(services: WalletServices = Depends(get_services)):
    """Reports whether the wallet is initialized and unlocked"""
    return services.wallet.info()

@router.post("/init", response_model=InitWalletResponse, dependencies=[Depends(require_policy(Policy.ADMIN))])
async def init_wallet(request: InitWalletRequest, services: WalletServices = Depends(get_services)):
    """Initializes a new wallet and returns its mnemonic.

    Requires Admin authorization policy.
    """
    mnemonic = await services.wallet.init(request.password)
    return InitWalletResponse(mnemonic=mnemonic)

@router.post("/restore", response_class=PlainTextResponse, dependencies=[Depends(require_policy(Policy.ADMIN))])
async def restore_wallet(request: RestoreWalletRequest, services: WalletServices = Depends(get_services)):
    """Restores an existing wallet.

    Requires Admin authorization policy.
    """
    await services.wallet.restore(request.password, request.mnemonic)
    return "Wallet restored"

@router.post("/unlock", response_class=PlainTextResponse, dependencies=[Depends(require_policy(Policy.USER))])
async def unlock_wallet(request: UnlockWalletRequest, services: WalletServices = Depends(get_services)):
    """Unlocks the wallet.

    Requires User authorization policy and an initialized wallet.
    """
    await services.wallet.unlock(request.password)
    return "Wallet unlocked"

@router.post("/lock", response_class=PlainTextResponse, dependencies=[Depends(require_policy(Policy.USER))])
async def lock_wallet(services: WalletServices = Depends(get_services)):
    """Locks the wallet"""
    await services.wallet.lock()
    return "Wallet locked"

@router.get("/accounts", dependencies=[Depends(require_policy(Policy.USER))])
async def get_wallet_accounts(
    request: Annotated[GetWalletAccountsRequest, Query()],
    services: WalletServices = Depends(get_services)
):
    """Lists wallet account addresses by page"""
    accounts = services.resolver.list_accounts(request.pageIndex, request.pageSize)
    return {
        "count": len(accounts),
        "list": [account.to_dict() for account in accounts]
    }
